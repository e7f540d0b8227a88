"""
범위 증명 데이터 모델
======================

검증기가 읽는 값 타입들을 정의한다. 모두 불변(immutable)이다.

**PublicParameters (g, h, n)**:
  두 생성자 스칼라와 모듈러스. 불변식:
    g ≠ 0, h ≠ 0, n ≠ 0, g < n, h < n, n < 2^256

**Proof**:
  외부 Prover가 만든 15개의 이름 있는 스칼라

    A, S, T1, T2, tau_x, mu, t_hat, C, C_v1, C_v2, t0, t1, t2, tau1, tau2

  와 내적 증명(IPP)의 라운드별 커밋먼트 ipp_L, ipp_R (각 6개),
  그리고 마지막 스칼라 ipp_a, ipp_b 로 구성된다.
  모든 값은 부호 없는 256비트 워드여야 한다.

**평탄화(flattened) 배열 레이아웃** (31개 정수, 라운드 수 6 기준):

  ┌──────────┬─────────────────────────────┐
  │ 0 – 14   │ 15개 스칼라 (위 순서)        │
  │ 15       │ 길이 표시자 6 (ipp_L)       │
  │ 16 – 21  │ ipp_L                       │
  │ 22       │ 길이 표시자 6 (ipp_R)       │
  │ 23 – 28  │ ipp_R                       │
  │ 29, 30   │ ipp_a, ipp_b                │
  └──────────┴─────────────────────────────┘

**IPP 라운드 수**:
  내적 증명은 차원 64의 벡터를 반씩 접으므로 log2(64) = 6 라운드이다.
  다른 차원을 지원할 때는 ipp_rounds_for(dimension)으로 유도한다.

사용 예시:
    >>> params = PublicParameters(g=2, h=3, n=N)
    >>> proof = Proof.from_flat(values)
    >>> proof.to_flat() == values   # True
"""

from collections import namedtuple

from zkp.rangeproof.errors import (
    InvalidParameters, InvalidRange, InvalidSubject, MalformedProofShape,
)
from zkp.rangeproof.field import WORD_MAX, fits_word


# ─────────────────────────────────────────────────────────────────────
# IPP 라운드 수
# ─────────────────────────────────────────────────────────────────────

def ipp_rounds_for(dimension):
    """내적 증명 벡터 차원에 대한 접기 라운드 수 ceil(log2(dimension))."""
    if dimension < 1:
        raise ValueError(f"차원은 1 이상이어야 합니다: {dimension}")
    return (dimension - 1).bit_length()


# 지원하는 비트 범위 계열의 내적 증명 차원
IPP_DIMENSION = 64
IPP_ROUNDS = ipp_rounds_for(IPP_DIMENSION)


# ─────────────────────────────────────────────────────────────────────
# 공개 파라미터
# ─────────────────────────────────────────────────────────────────────

class PublicParameters(namedtuple("PublicParameters", ["g", "h", "n"])):
    """Pedersen 커밋먼트의 공개 파라미터 (g, h, n).

    한 검증 세션 동안은 고정되며, 설정 권한자가 이후 세션을 위해
    교체할 수 있다. 교체는 이미 기록된 검증 결과에 영향을 주지 않는다.
    """

    __slots__ = ()

    def validate(self):
        """불변식을 확인한다.

        Raises:
            InvalidParameters: g, h, n 중 하나라도 불변식을 어길 때
        """
        g, h, n = self
        for name, value in (("g", g), ("h", h), ("n", n)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidParameters(f"{name}는 정수여야 합니다")
        if n <= 0 or n >= WORD_MAX:
            raise InvalidParameters("n은 0이 아닌 256비트 정수여야 합니다")
        if g <= 0 or g >= n:
            raise InvalidParameters("g는 [1, n) 범위여야 합니다")
        if h <= 0 or h >= n:
            raise InvalidParameters("h는 [1, n) 범위여야 합니다")
        return self


# ─────────────────────────────────────────────────────────────────────
# 범위 주장 / 주체
# ─────────────────────────────────────────────────────────────────────

class RangeClaim(namedtuple("RangeClaim", ["min", "max"])):
    """숨겨진 값이 속한다고 주장하는 닫힌 구간 [min, max]."""

    __slots__ = ()

    def validate(self):
        lo, hi = self
        for value in (lo, hi):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidRange("범위 경계는 정수여야 합니다")
        if lo > hi:
            raise InvalidRange(f"min > max: [{lo}, {hi}]")
        return self


# 이더리움 영(0) 주소: 주체 없음을 뜻하는 값
ZERO_ADDRESS = "0x" + "0" * 40


def is_empty_subject(subject):
    """주체가 비어 있거나 무효 표식(영 주소)인지 확인한다."""
    if subject is None:
        return True
    if not isinstance(subject, str):
        return True
    stripped = subject.strip()
    return stripped == "" or stripped.lower() == ZERO_ADDRESS


def validate_subject(subject):
    if is_empty_subject(subject):
        raise InvalidSubject(f"유효하지 않은 주체: {subject!r}")
    return subject


# ─────────────────────────────────────────────────────────────────────
# 증명
# ─────────────────────────────────────────────────────────────────────

SCALAR_FIELDS = (
    "A", "S", "T1", "T2", "tau_x", "mu", "t_hat",
    "C", "C_v1", "C_v2", "t0", "t1", "t2", "tau1", "tau2",
)
IPP_FIELDS = ("ipp_L", "ipp_R", "ipp_a", "ipp_b")


def flat_length(rounds=IPP_ROUNDS):
    """평탄화 배열의 길이: 15 + (1 + r) + (1 + r) + 2."""
    return len(SCALAR_FIELDS) + 2 * (rounds + 1) + 2


class Proof(namedtuple("Proof", SCALAR_FIELDS + IPP_FIELDS)):
    """범위 증명 값.

    생성 시 모든 필드가 256비트 워드인지 확인하고 ipp_L, ipp_R을
    튜플로 고정한다. ipp_L/ipp_R의 길이 검사는 구조 검증기의 몫이다.

    Raises:
        MalformedProofShape: 워드가 아닌 필드가 있을 때
    """

    __slots__ = ()

    def __new__(cls, *args, **kwargs):
        proof = super().__new__(cls, *args, **kwargs)
        for name in ("ipp_L", "ipp_R"):
            if isinstance(getattr(proof, name), (str, bytes)):
                raise MalformedProofShape(f"{name}는 정수 시퀀스여야 합니다")
        try:
            ipp_L = tuple(proof.ipp_L)
            ipp_R = tuple(proof.ipp_R)
        except TypeError:
            raise MalformedProofShape("ipp_L, ipp_R는 정수 시퀀스여야 합니다")
        proof = super().__new__(
            cls, *proof[:len(SCALAR_FIELDS)], ipp_L, ipp_R, proof.ipp_a, proof.ipp_b
        )

        for name in SCALAR_FIELDS + ("ipp_a", "ipp_b"):
            if not fits_word(getattr(proof, name)):
                raise MalformedProofShape(f"{name}가 256비트 워드가 아닙니다")
        for name, vec in (("ipp_L", ipp_L), ("ipp_R", ipp_R)):
            for i, value in enumerate(vec):
                if not fits_word(value):
                    raise MalformedProofShape(f"{name}[{i}]가 256비트 워드가 아닙니다")
        return proof

    @property
    def scalars(self):
        """15개 스칼라를 정의된 순서대로 반환한다."""
        return tuple(self[:len(SCALAR_FIELDS)])

    def replace(self, **changes):
        """일부 필드를 바꾼 새 Proof를 만든다 (검증 포함)."""
        fields = self._asdict()
        fields.update(changes)
        return type(self)(**fields)

    @classmethod
    def _make(cls, iterable):
        # namedtuple 기본 _make/_replace 는 __new__ 를 거치지 않는다
        return cls(*iterable)

    # ── 평탄화 배열 ──

    @classmethod
    def from_flat(cls, values, rounds=IPP_ROUNDS):
        """31개 (라운드 수 r이면 19 + 2r개) 정수 배열에서 Proof를 만든다.

        산술 연산 전에 길이와 길이 표시자를 확인한다.

        Args:
            values: 정수 시퀀스
            rounds: 기대하는 IPP 라운드 수 (기본 6)

        Raises:
            MalformedProofShape: 길이 또는 길이 표시자가 맞지 않을 때
        """
        values = list(values)
        expected = flat_length(rounds)
        if len(values) != expected:
            raise MalformedProofShape(
                f"평탄화 배열 길이는 {expected}이어야 합니다: {len(values)}"
            )

        k = len(SCALAR_FIELDS)
        l_marker = k
        r_marker = k + 1 + rounds
        if values[l_marker] != rounds:
            raise MalformedProofShape(f"ipp_L 길이 표시자가 {rounds}가 아닙니다")
        if values[r_marker] != rounds:
            raise MalformedProofShape(f"ipp_R 길이 표시자가 {rounds}가 아닙니다")

        scalars = values[:k]
        ipp_L = values[l_marker + 1:r_marker]
        ipp_R = values[r_marker + 1:r_marker + 1 + rounds]
        ipp_a, ipp_b = values[-2:]
        return cls(*scalars, ipp_L, ipp_R, ipp_a, ipp_b)

    def to_flat(self):
        """길이 표시자를 포함한 평탄화 배열을 반환한다."""
        return (
            list(self.scalars)
            + [len(self.ipp_L)] + list(self.ipp_L)
            + [len(self.ipp_R)] + list(self.ipp_R)
            + [self.ipp_a, self.ipp_b]
        )
