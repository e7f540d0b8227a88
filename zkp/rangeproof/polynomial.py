"""
블라인딩 다항식 관계 검사
==========================

Prover의 t(X) = t0 + t1·X + t2·X² 를 챌린지 x에서 평가한 값이
공개된 t̂ 와 같은지 확인한다.

    rhs = (t0 + t1·x + t2·x²) mod n

  1. t̂ == rhs                               아니면 PolynomialMismatch
  2. Com(t̂, τx) == Com(rhs, τx)              아니면 CommitmentMismatch("t_hat")

2번은 1번이 통과하면 항상 성립하지만, 트랜스크립트 결속 단계의 일부이므로
그대로 수행한다 (t̂와 rhs의 표현이 어긋나는 경우를 잡는다).
"""

from zkp.rangeproof.commitment import pedersen_commit
from zkp.rangeproof.errors import CommitmentMismatch, PolynomialMismatch
from zkp.rangeproof.field import addmod, mulmod


def evaluate_t(proof, x, modulus):
    """t(x) = t0 + t1·x + t2·x² (mod n)."""
    x2 = mulmod(x, x, modulus)
    rhs = addmod(proof.t0, mulmod(proof.t1, x, modulus), modulus)
    return addmod(rhs, mulmod(proof.t2, x2, modulus), modulus)


def check_polynomial(params, proof, x):
    """챌린지 x에서 t̂ 관계를 확인한다.

    Args:
        params: PublicParameters
        proof: Proof
        x: 챌린지 x

    Raises:
        PolynomialMismatch: t̂ ≠ rhs
        CommitmentMismatch: 필드 이름 "t_hat"
    """
    rhs = evaluate_t(proof, x, params.n)
    if proof.t_hat != rhs:
        raise PolynomialMismatch("t_hat ≠ t0 + t1·x + t2·x² (mod n)")

    lhs_comm = pedersen_commit(params, proof.t_hat, proof.tau_x)
    rhs_comm = pedersen_commit(params, rhs, proof.tau_x)
    if lhs_comm != rhs_comm:
        raise CommitmentMismatch("t_hat")
