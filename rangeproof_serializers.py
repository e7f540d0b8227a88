"""
범위 증명 HTTP 요청/응답 직렬화
=================================

JSON 요청 본문을 도메인 값으로 읽고, 검증 결과를 JSON으로 바꾼다.
모든 정수는 "0x" + 64자리 16진 문자열로 내보낸다.

요청 예시 (POST /rangeproof/verify):

    {
      "proof": {"scalars": [...], "ipp_L": [...], ...}   또는  [31개 정수/16진수],
      "range": {"min": 0, "max": 100},
      "subject": "0xabc…"
    }
"""

from flask import jsonify

from zkp.rangeproof.encoding import parse_word, proof_from_json, to_hex
from zkp.rangeproof.errors import (
    DUPLICATE, INVALID, MALFORMED, InvalidParameters, InvalidRange,
    MalformedProofShape,
)
from zkp.rangeproof.proof import PublicParameters, RangeClaim


# 오류 범주 → HTTP 상태 코드
STATUS_BY_CATEGORY = {
    MALFORMED: 400,
    INVALID: 422,
    DUPLICATE: 409,
}


class RequestError(Exception):
    """요청 본문 자체가 잘못되었을 때 (JSON 아님, 필수 키 없음 등)."""

    def __init__(self, message, status=400):
        super().__init__(message)
        self.message = message
        self.status = status

    def to_response(self):
        return jsonify({"error": "RequestError", "message": self.message}), self.status


# ─── 요청 파싱 ───

def require_object(payload):
    if not isinstance(payload, dict):
        raise RequestError("요청 본문은 JSON 객체여야 합니다")
    return payload


def deserialize_proof(data):
    """증명 JSON 객체 또는 평탄화 배열 → Proof / 정수 리스트.

    평탄화 배열은 정수로만 바꾸고, 길이와 길이 표시자 검사는 검증기에 맡긴다.
    """
    if isinstance(data, dict):
        return proof_from_json(data)
    if isinstance(data, list):
        return [parse_word(v, name=f"proof[{i}]") for i, v in enumerate(data)]
    raise MalformedProofShape("proof는 JSON 객체 또는 배열이어야 합니다")


def deserialize_range(data):
    if not isinstance(data, dict) or "min" not in data or "max" not in data:
        raise InvalidRange("range는 {\"min\": int, \"max\": int} 형태여야 합니다")
    return RangeClaim(data["min"], data["max"])


def deserialize_params(data):
    if not isinstance(data, dict):
        raise RequestError("파라미터는 JSON 객체여야 합니다")
    values = []
    for name in ("g", "h", "n"):
        if name not in data:
            raise InvalidParameters(f"'{name}' 값이 없습니다")
        values.append(parse_word(data[name], error=InvalidParameters, name=name))
    return PublicParameters(*values).validate()


def parse_verify_request(payload):
    """POST /verify 본문 → (proof, claim, subject)."""
    payload = require_object(payload)
    if "proof" not in payload:
        raise RequestError("'proof' 키가 없습니다")
    proof = deserialize_proof(payload["proof"])
    claim = deserialize_range(payload.get("range"))
    return proof, claim, payload.get("subject")


# ─── 응답 ───

def serialize_params(params):
    return {"g": to_hex(params.g), "h": to_hex(params.h), "n": to_hex(params.n)}


def serialize_challenges(challenges):
    if challenges is None:
        return None
    return {name: to_hex(value) for name, value in challenges._asdict().items()}


def serialize_result(result):
    return {
        "accepted": result.accepted,
        "identity": result.identity,
        "reason": result.reason.to_dict() if result.reason is not None else None,
        "stage": result.stage,
        "challenges": serialize_challenges(result.challenges),
        "event": result.event.to_dict() if result.event is not None else None,
    }


def result_status(result):
    if result.accepted:
        return 200
    return STATUS_BY_CATEGORY[result.category]


# ─── 표시 헬퍼 ───

def hex_short(value):
    """식별자/워드 → 축약 문자열 (CLI 표시용)"""
    if value is None:
        return "None"
    s = value if isinstance(value, str) else to_hex(value)
    if len(s) <= 14:
        return s
    return s[:8] + "..." + s[-4:]
