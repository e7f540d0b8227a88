"""
범위 증명 검증 서버
====================

Flask 애플리케이션 팩토리, 설정, CLI 명령.

설정 (환경 변수 기본값, create_app(config)로 덮어씀):

  RANGEPROOF_PARAMS_PATH   시작 시 읽을 파라미터 파일 (선택)
  RANGEPROOF_DB_PATH       TinyDB JSON 파일 (없으면 MemoryStorage)
  RANGEPROOF_IPP_ROUNDS    IPP 라운드 수 (기본 6)
  RANGEPROOF_LOG_LEVEL     zkp 로거 레벨 (기본 INFO)

실행:
    $ flask --app app run
    $ flask --app app verify-file params.txt proof.txt --min 0 --max 100 --subject 0xabc
"""

import logging
import os

import click
from flask import Flask, jsonify
from tinydb.storages import MemoryStorage

from zkp.rangeproof.encoding import load_params, load_proof_text
from zkp.rangeproof.errors import VerificationError
from zkp.rangeproof.proof import IPP_ROUNDS, RangeClaim
from zkp.rangeproof.tinydb_store import TinyDBLedgerStore
from zkp.rangeproof.verifier import RangeProofVerifier

from rangeproof_routes import init_rangeproof_bp, rangeproof_bp
from rangeproof_serializers import RequestError, hex_short


def build_store(app):
    """설정에 따라 원장 저장소를 만든다."""
    db_path = app.config.get("RANGEPROOF_DB_PATH")
    if not db_path:
        return TinyDBLedgerStore(storage=MemoryStorage)
    return TinyDBLedgerStore(db_path)


def create_app(config=None):
    app = Flask(__name__)

    app.config.setdefault("RANGEPROOF_PARAMS_PATH", os.environ.get("RANGEPROOF_PARAMS_PATH"))
    app.config.setdefault("RANGEPROOF_DB_PATH", os.environ.get("RANGEPROOF_DB_PATH"))
    app.config.setdefault("RANGEPROOF_IPP_ROUNDS",
                          int(os.environ.get("RANGEPROOF_IPP_ROUNDS", IPP_ROUNDS)))
    app.config.setdefault("RANGEPROOF_LOG_LEVEL", os.environ.get("RANGEPROOF_LOG_LEVEL", "INFO"))

    if config:
        app.config.update(config)

    logging.getLogger("zkp").setLevel(app.config["RANGEPROOF_LOG_LEVEL"])

    params = None
    params_path = app.config.get("RANGEPROOF_PARAMS_PATH")
    if params_path:
        params = load_params(params_path).validate()
        app.logger.info("공개 파라미터 로드: %s", params_path)

    verifier = RangeProofVerifier(
        store=build_store(app),
        ipp_rounds=app.config["RANGEPROOF_IPP_ROUNDS"],
    )
    init_rangeproof_bp(app, verifier, params)
    app.register_blueprint(rangeproof_bp)

    @app.route("/health")
    def health():
        state = app.extensions["rangeproof"]
        return jsonify({"status": "ok", "params_loaded": state["params"] is not None})

    @app.errorhandler(RequestError)
    def handle_request_error(err):
        return err.to_response()

    @app.cli.command("verify-file")
    @click.argument("params_path", type=click.Path(exists=True, dir_okay=False))
    @click.argument("proof_path", type=click.Path(exists=True, dir_okay=False))
    @click.option("--min", "range_min", type=int, required=True)
    @click.option("--max", "range_max", type=int, required=True)
    @click.option("--subject", required=True)
    def verify_file(params_path, proof_path, range_min, range_max, subject):
        """파라미터 파일과 증명 텍스트 파일로 증명 하나를 검증한다.

        앱의 원장을 그대로 쓰므로 수락은 기록되고 같은 증명의 재제출은 거절된다.
        """
        try:
            params = load_params(params_path)
            proof = load_proof_text(proof_path)
        except VerificationError as e:
            click.echo(f"INVALID: {e.kind}")
            raise SystemExit(1)

        verifier = app.extensions["rangeproof"]["verifier"]
        result = verifier.verify(params, proof, RangeClaim(range_min, range_max), subject)
        if result.accepted:
            click.echo(f"VALID {hex_short(result.identity)}")
        else:
            click.echo(f"INVALID: {result.kind}")
            raise SystemExit(1)

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
