"""
파일 / JSON 인코딩
===================

**파라미터 파일** (3줄 16진수):

    0x2
    0x3
    0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f

  g, h, n 순서. 0x 접두는 선택, 빈 줄과 앞뒤 공백은 무시한다.

**증명 텍스트 파일** (한 줄에 값 하나):

    15개 스칼라 (16진수)
    len(ipp_L)  (10진수)
    ipp_L 원소  (16진수)
    len(ipp_R)  (10진수)
    ipp_R 원소  (16진수)
    ipp_a, ipp_b (16진수)

**증명 JSON**:

    {"scalars": ["0x…" × 15], "ipp_L": [...], "ipp_R": [...],
     "ipp_a": "0x…", "ipp_b": "0x…"}

  모든 워드는 0x + 64자리 16진수 (32바이트 0-패딩).
"""

import string

from zkp.rangeproof.errors import InvalidParameters, MalformedProofShape
from zkp.rangeproof.field import fits_word
from zkp.rangeproof.proof import SCALAR_FIELDS, Proof, PublicParameters


HEX_DIGITS = frozenset(string.hexdigits)
DEC_DIGITS = frozenset(string.digits)


# ─────────────────────────────────────────────────────────────────────
# 워드 ↔ 16진 문자열
# ─────────────────────────────────────────────────────────────────────

def to_hex(value):
    """32바이트 0-패딩 16진 문자열 ("0x" + 64자리)."""
    return "0x" + format(value, "064x")


def parse_hex(text):
    """엄격한 16진수 파싱. 0x 접두는 선택.

    Raises:
        ValueError: 빈 문자열이거나 16진수가 아닌 문자가 있을 때
    """
    s = text.strip()
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    if not s or not set(s) <= HEX_DIGITS:
        raise ValueError(f"16진수가 아닙니다: {text!r}")
    return int(s, 16)


def parse_word(value, error=MalformedProofShape, name="value"):
    """JSON 값(정수 또는 16진 문자열)을 256비트 워드로 읽는다.

    Args:
        value: int 또는 "0x…" 문자열
        error: 실패 시 던질 VerificationError 클래스
        name: 오류 메시지에 쓸 필드 이름
    """
    if isinstance(value, str):
        try:
            value = parse_hex(value)
        except ValueError:
            raise error(f"{name}: 16진수가 아닙니다")
    if not fits_word(value):
        raise error(f"{name}: 256비트 워드가 아닙니다")
    return value


# ─────────────────────────────────────────────────────────────────────
# 파라미터 파일
# ─────────────────────────────────────────────────────────────────────

def parse_params(text):
    """파라미터 파일 내용을 읽는다. 불변식 검사는 validate()의 몫이다.

    Raises:
        InvalidParameters: 값이 3개 미만이거나 16진수가 아닐 때
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if len(lines) < 3:
        raise InvalidParameters("파라미터 파일에는 g, h, n 세 줄이 필요합니다")
    try:
        g, h, n = (parse_hex(line) for line in lines[:3])
    except ValueError as e:
        raise InvalidParameters(str(e))
    return PublicParameters(g, h, n)


def load_params(path):
    with open(path, "r") as f:
        return parse_params(f.read())


def dump_params(params):
    return "\n".join(format(v, "x") for v in params) + "\n"


def save_params(params, path):
    with open(path, "w") as f:
        f.write(dump_params(params))


# ─────────────────────────────────────────────────────────────────────
# 증명 텍스트 파일
# ─────────────────────────────────────────────────────────────────────

def parse_proof_text(text):
    """증명 텍스트 파일 내용을 Proof로 읽는다.

    Raises:
        MalformedProofShape: 빈 줄, 잘못된 16진수/10진수, 길이 0,
            len(R) ≠ len(L), 남는 내용이 있을 때
    """
    lines = text.rstrip().splitlines()
    pos = 0

    def next_line(what):
        nonlocal pos
        if pos >= len(lines):
            raise MalformedProofShape(f"{what}: 파일이 일찍 끝났습니다")
        line = lines[pos].strip()
        pos += 1
        if not line:
            raise MalformedProofShape(f"{what}: 빈 줄 (줄 {pos})")
        return line

    def next_hex(what):
        line = next_line(what)
        try:
            return parse_hex(line)
        except ValueError:
            raise MalformedProofShape(f"{what}: 16진수가 아닙니다 (줄 {pos})")

    def next_len(what):
        line = next_line(what)
        if not set(line) <= DEC_DIGITS:
            raise MalformedProofShape(f"{what}: 10진수 길이가 아닙니다 (줄 {pos})")
        length = int(line)
        if length == 0:
            raise MalformedProofShape(f"{what}: 길이는 0일 수 없습니다")
        return length

    scalars = [next_hex(name) for name in SCALAR_FIELDS]

    len_L = next_len("len(ipp_L)")
    ipp_L = [next_hex(f"ipp_L[{i}]") for i in range(len_L)]

    len_R = next_len("len(ipp_R)")
    if len_R != len_L:
        raise MalformedProofShape(f"len(ipp_R)={len_R} ≠ len(ipp_L)={len_L}")
    ipp_R = [next_hex(f"ipp_R[{i}]") for i in range(len_R)]

    ipp_a = next_hex("ipp_a")
    ipp_b = next_hex("ipp_b")

    if pos != len(lines):
        raise MalformedProofShape(f"남는 내용이 있습니다 (줄 {pos + 1})")

    return Proof(*scalars, ipp_L, ipp_R, ipp_a, ipp_b)


def load_proof_text(path):
    with open(path, "r") as f:
        return parse_proof_text(f.read())


def dump_proof_text(proof):
    lines = [format(v, "x") for v in proof.scalars]
    lines.append(str(len(proof.ipp_L)))
    lines += [format(v, "x") for v in proof.ipp_L]
    lines.append(str(len(proof.ipp_R)))
    lines += [format(v, "x") for v in proof.ipp_R]
    lines += [format(proof.ipp_a, "x"), format(proof.ipp_b, "x")]
    return "\n".join(lines) + "\n"


# ─────────────────────────────────────────────────────────────────────
# 증명 JSON
# ─────────────────────────────────────────────────────────────────────

def proof_to_json(proof):
    return {
        "scalars": [to_hex(v) for v in proof.scalars],
        "ipp_L": [to_hex(v) for v in proof.ipp_L],
        "ipp_R": [to_hex(v) for v in proof.ipp_R],
        "ipp_a": to_hex(proof.ipp_a),
        "ipp_b": to_hex(proof.ipp_b),
    }


def proof_from_json(data):
    """증명 JSON 객체를 Proof로 읽는다.

    Raises:
        MalformedProofShape: 키가 없거나 개수/값이 맞지 않을 때
    """
    if not isinstance(data, dict):
        raise MalformedProofShape("증명은 JSON 객체여야 합니다")
    for key in ("scalars", "ipp_L", "ipp_R", "ipp_a", "ipp_b"):
        if key not in data:
            raise MalformedProofShape(f"'{key}' 키가 없습니다")

    scalars = data["scalars"]
    if not isinstance(scalars, list) or len(scalars) != len(SCALAR_FIELDS):
        raise MalformedProofShape(f"scalars는 {len(SCALAR_FIELDS)}개여야 합니다")
    for key in ("ipp_L", "ipp_R"):
        if not isinstance(data[key], list):
            raise MalformedProofShape(f"{key}는 배열이어야 합니다")

    return Proof(
        *[parse_word(v, name=n) for v, n in zip(scalars, SCALAR_FIELDS)],
        [parse_word(v, name=f"ipp_L[{i}]") for i, v in enumerate(data["ipp_L"])],
        [parse_word(v, name=f"ipp_R[{i}]") for i, v in enumerate(data["ipp_R"])],
        parse_word(data["ipp_a"], name="ipp_a"),
        parse_word(data["ipp_b"], name="ipp_b"),
    )
