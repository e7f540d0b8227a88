"""
증명 구조 검증
===============

챌린지와 무관한 형태/정합성 검사.

  - A, S, T1, T2, C, C_v1, C_v2 는 0 mod n 이 아니어야 한다   → ZeroField(name)
  - C, C_v1, C_v2 는 서로 달라야 한다                          → NonDistinctCommitments
    (값 커밋먼트와 두 분할 범위 커밋먼트가 겹치면 안 됨)
  - len(ipp_L) == len(ipp_R)                                  → IppLengthMismatch
  - 둘 다 IPP 라운드 수와 같아야 한다 (기본 6)                   → IppLevelMismatch

내적 증명은 길이만 확인하며 대수적으로 재유도하지 않는다.
"""

from zkp.rangeproof.errors import (
    IppLengthMismatch, IppLevelMismatch, NonDistinctCommitments, ZeroField,
)
from zkp.rangeproof.proof import IPP_ROUNDS


NONZERO_FIELDS = ("A", "S", "T1", "T2", "C", "C_v1", "C_v2")


def check_structure(proof, modulus, rounds=IPP_ROUNDS):
    """구조 검사를 순서대로 수행한다.

    Args:
        proof: Proof
        modulus: 모듈러스 n
        rounds: 기대하는 IPP 라운드 수

    Raises:
        ZeroField, NonDistinctCommitments, IppLengthMismatch, IppLevelMismatch
    """
    for name in NONZERO_FIELDS:
        if getattr(proof, name) % modulus == 0:
            raise ZeroField(name)

    if proof.C == proof.C_v1 or proof.C == proof.C_v2 or proof.C_v1 == proof.C_v2:
        raise NonDistinctCommitments("C, C_v1, C_v2가 서로 다르지 않습니다")

    if len(proof.ipp_L) != len(proof.ipp_R):
        raise IppLengthMismatch(
            f"len(ipp_L)={len(proof.ipp_L)}, len(ipp_R)={len(proof.ipp_R)}"
        )
    if len(proof.ipp_L) != rounds:
        raise IppLevelMismatch(f"IPP 라운드 수 {len(proof.ipp_L)} ≠ {rounds}")
