"""
범위 증명 검증 오류 분류
==========================

검증기는 첫 번째 실패에서 멈추고, 그 실패의 종류(kind)를 그대로 돌려준다.
운영자가 실패한 제출을 분류할 수 있도록 오류는 세 범주로 나뉜다.

  ┌────────────┬──────────────────────────────────────────────┐
  │ malformed  │ 호출자 버그: 파라미터, 범위, 주체, 증명 형태  │
  │ invalid    │ 암호학적으로 유효하지 않은 증명               │
  │ duplicate  │ 이미 수락된 증명 (무해한 중복 제출)           │
  └────────────┴──────────────────────────────────────────────┘

어떤 오류도 원장(ledger)을 변경하지 않는다.
"""

MALFORMED = "malformed"
INVALID = "invalid"
DUPLICATE = "duplicate"


class VerificationError(Exception):
    """모든 검증 실패의 기반 클래스.

    속성:
        kind: 안정적인 오류 식별자 (예: "DuplicateProof")
        category: MALFORMED / INVALID / DUPLICATE
    """

    kind = "VerificationError"
    category = INVALID

    def __init__(self, message=None):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self):
        return {
            "kind": self.kind,
            "category": self.category,
            "message": self.message,
        }


# ─────────────────────────────────────────────────────────────────────
# 입력 형태 오류 (malformed)
# ─────────────────────────────────────────────────────────────────────

class InvalidParameters(VerificationError):
    kind = "InvalidParameters"
    category = MALFORMED


class InvalidRange(VerificationError):
    kind = "InvalidRange"
    category = MALFORMED


class InvalidSubject(VerificationError):
    kind = "InvalidSubject"
    category = MALFORMED


class MalformedProofShape(VerificationError):
    """필드 개수, 길이 표시자, 워드 범위가 잘못된 증명."""
    kind = "MalformedProofShape"
    category = MALFORMED


# ─────────────────────────────────────────────────────────────────────
# 중복 제출
# ─────────────────────────────────────────────────────────────────────

class DuplicateProof(VerificationError):
    kind = "DuplicateProof"
    category = DUPLICATE

    def __init__(self, identity, message=None):
        super().__init__(message or f"이미 검증된 증명입니다: {identity}")
        self.identity = identity


# ─────────────────────────────────────────────────────────────────────
# 암호학적 검증 실패 (invalid)
# ─────────────────────────────────────────────────────────────────────

class InvalidChallenge(VerificationError):
    """Fiat-Shamir 챌린지가 0 mod n 으로 도출됨."""
    kind = "InvalidChallenge"
    challenge = None

    def __init__(self, message=None):
        super().__init__(message or f"챌린지 {self.challenge}가 0입니다")


class InvalidChallengeY(InvalidChallenge):
    kind = "InvalidChallengeY"
    challenge = "y"


class InvalidChallengeZ(InvalidChallenge):
    kind = "InvalidChallengeZ"
    challenge = "z"


class InvalidChallengeX(InvalidChallenge):
    kind = "InvalidChallengeX"
    challenge = "x"


class CommitmentMismatch(VerificationError):
    kind = "CommitmentMismatch"

    def __init__(self, field, message=None):
        super().__init__(message or f"커밋먼트 불일치: {field}")
        self.field = field

    def to_dict(self):
        data = super().to_dict()
        data["field"] = self.field
        return data


class PolynomialMismatch(VerificationError):
    """t̂ ≠ t0 + t1·x + t2·x² (mod n)."""
    kind = "PolynomialMismatch"


class ZeroField(VerificationError):
    kind = "ZeroField"

    def __init__(self, name, message=None):
        super().__init__(message or f"필드 {name}가 0 mod n 입니다")
        self.name = name

    def to_dict(self):
        data = super().to_dict()
        data["field"] = self.name
        return data


class NonDistinctCommitments(VerificationError):
    """C, C_v1, C_v2 중 두 값이 같음."""
    kind = "NonDistinctCommitments"


class IppLengthMismatch(VerificationError):
    """len(ipp_L) ≠ len(ipp_R)."""
    kind = "IppLengthMismatch"


class IppLevelMismatch(VerificationError):
    """IPP 라운드 수가 기대값과 다름."""
    kind = "IppLevelMismatch"
