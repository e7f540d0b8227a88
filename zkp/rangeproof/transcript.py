"""
범위 증명 Fiat-Shamir 챌린지
==============================

비대화식(non-interactive) 변환을 위한 챌린지 도출.

**인코딩**:
  각 입력 정수를 32바이트 빅엔디안 워드로 0-패딩하여 순서대로 이어 붙이고,
  Keccak-256 (이더리움 변형, NIST SHA3-256 아님)으로 해싱한다.
  다이제스트를 정수로 읽어 n으로 축소한다.

    challenge([v₁, ..., v_k]) = int(Keccak256(w(v₁) ‖ ... ‖ w(v_k))) mod n

  레이블이나 상태 체이닝은 없다. Prover와 같은 바이트를 해싱해야
  같은 챌린지가 나오므로 워드 폭, 순서, 해시 함수 모두 고정이다.

**범위 증명의 3개 챌린지**:
  y = challenge([A, S, C, C_v1, C_v2])
  z = challenge([y])
  x = challenge([T1, T2])

  z는 이후 검사에서 쓰이지 않지만 트랜스크립트의 일부이므로
  계산하고 0이 아닌지 확인한다.

사용 예시:
    >>> t = Transcript(n)
    >>> y = t.challenge("y", [proof.A, proof.S, proof.C, proof.C_v1, proof.C_v2])
"""

from collections import namedtuple

from Crypto.Hash import keccak

from zkp.rangeproof.errors import (
    InvalidChallengeX, InvalidChallengeY, InvalidChallengeZ,
)
from zkp.rangeproof.field import fits_word


WORD_SIZE = 32


def keccak256(data):
    """Keccak-256 다이제스트 (32바이트)."""
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def encode_word(value):
    """정수를 32바이트 빅엔디안 워드로 인코딩한다.

    Raises:
        ValueError: 0 이상 2^256 미만의 정수가 아닐 때
    """
    if not fits_word(value):
        raise ValueError(f"256비트 워드가 아닙니다: {value!r}")
    return value.to_bytes(WORD_SIZE, "big")


def fiat_shamir(values):
    """입력 워드들의 Keccak-256 해시를 (축소하지 않은) 정수로 반환한다."""
    data = b"".join(encode_word(v) for v in values)
    return int.from_bytes(keccak256(data), "big")


Challenges = namedtuple("Challenges", ["y", "z", "x"])


class Transcript:
    """모듈러스 n에 대한 챌린지 도출기.

    도출한 챌린지를 레이블별로 기록해 둔다 (표시/디버깅용).
    기록은 해시 입력에 포함되지 않는다.

    속성:
        modulus: 모듈러스 n
        challenges: {레이블: 챌린지} 딕셔너리
    """

    def __init__(self, modulus):
        self.modulus = modulus
        self.challenges = {}

    def challenge(self, label, values):
        """values로부터 챌린지를 도출하고 label로 기록한다."""
        c = fiat_shamir(values) % self.modulus
        self.challenges[label] = c
        return c


def derive_challenges(proof, modulus):
    """증명으로부터 y, z, x 챌린지를 순서대로 도출한다.

    각 챌린지는 도출 직후 0인지 검사한다.

    Args:
        proof: Proof
        modulus: 모듈러스 n

    Returns:
        Challenges(y, z, x)

    Raises:
        InvalidChallengeY / InvalidChallengeZ / InvalidChallengeX
    """
    transcript = Transcript(modulus)

    y = transcript.challenge("y", [proof.A, proof.S, proof.C, proof.C_v1, proof.C_v2])
    if y == 0:
        raise InvalidChallengeY()

    z = transcript.challenge("z", [y])
    if z == 0:
        raise InvalidChallengeZ()

    x = transcript.challenge("x", [proof.T1, proof.T2])
    if x == 0:
        raise InvalidChallengeX()

    return Challenges(y, z, x)
