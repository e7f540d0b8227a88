"""
범위 증명 Flask Blueprint
==========================

  POST /rangeproof/verify                    증명 검증 (수락 시 원장 기록)
  GET  /rangeproof/proofs/<identity>         식별자 수락 여부
  GET  /rangeproof/subjects/<subject>/latest 주체의 최신 수락 식별자
  GET  /rangeproof/params                    현재 공개 파라미터
  PUT  /rangeproof/params                    파라미터 교체 (이후 세션부터 적용)

상태 코드: 200 수락, 400 잘못된 입력, 409 중복, 422 유효하지 않은 증명
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from zkp.rangeproof.errors import VerificationError
from zkp.rangeproof.identity import is_identity
from zkp.rangeproof.verifier import VALIDATING

from rangeproof_serializers import (
    STATUS_BY_CATEGORY, RequestError,
    deserialize_params, parse_verify_request,
    result_status, serialize_params, serialize_result,
)

logger = logging.getLogger(__name__)

rangeproof_bp = Blueprint('rangeproof', __name__, url_prefix='/rangeproof')


def init_rangeproof_bp(app, verifier, params=None):
    """app.py에서 검증기와 초기 파라미터를 주입받는다."""
    app.extensions["rangeproof"] = {"verifier": verifier, "params": params}


# ─── 상태 헬퍼 ───

def state():
    return current_app.extensions["rangeproof"]


def current_params():
    params = state()["params"]
    if params is None:
        raise RequestError("공개 파라미터가 설정되지 않았습니다", status=503)
    return params


def error_response(error):
    """검증 이전 단계(요청 파싱)의 VerificationError → JSON 응답."""
    body = {
        "accepted": False,
        "identity": None,
        "reason": error.to_dict(),
        "stage": VALIDATING,
        "challenges": None,
        "event": None,
    }
    return jsonify(body), STATUS_BY_CATEGORY[error.category]


# ──────────────────────────────────────────────────────────────
# 검증
# ──────────────────────────────────────────────────────────────

@rangeproof_bp.route("/verify", methods=["POST"])
def verify_proof():
    """증명 검증."""
    params = current_params()
    payload = request.get_json(silent=True)
    try:
        proof, claim, subject = parse_verify_request(payload)
    except VerificationError as e:
        logger.info("요청 파싱 실패: %s", e.kind)
        return error_response(e)

    result = state()["verifier"].verify(params, proof, claim, subject)
    return jsonify(serialize_result(result)), result_status(result)


# ──────────────────────────────────────────────────────────────
# 원장 질의
# ──────────────────────────────────────────────────────────────

@rangeproof_bp.route("/proofs/<identity>")
def proof_status(identity):
    """식별자 수락 여부."""
    identity = identity.lower()
    if not is_identity(identity):
        raise RequestError(f"식별자 형식이 아닙니다: {identity}")
    verified = state()["verifier"].is_verified(identity)
    return jsonify({"identity": identity, "verified": verified})


@rangeproof_bp.route("/subjects/<subject>/latest")
def subject_latest(subject):
    """주체의 최신 수락 식별자."""
    identity = state()["verifier"].latest_identity(subject)
    return jsonify({"subject": subject, "identity": identity})


# ──────────────────────────────────────────────────────────────
# 공개 파라미터
# ──────────────────────────────────────────────────────────────

@rangeproof_bp.route("/params", methods=["GET"])
def get_params():
    return jsonify(serialize_params(current_params()))


@rangeproof_bp.route("/params", methods=["PUT"])
def put_params():
    """파라미터 교체. 이미 기록된 원장에는 영향이 없다."""
    try:
        params = deserialize_params(request.get_json(silent=True))
    except VerificationError as e:
        return jsonify({"reason": e.to_dict()}), STATUS_BY_CATEGORY[e.category]
    state()["params"] = params
    logger.info("공개 파라미터 교체: n=%s", hex(params.n))
    return jsonify(serialize_params(params))
