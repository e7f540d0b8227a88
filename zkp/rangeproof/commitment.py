"""
Pedersen 커밋먼트
==================

RSA형 그룹 Z_n* 위의 Pedersen 커밋먼트:

    Com(m, r) = g^m · h^r  mod n

  - 은닉(hiding): 커밋먼트는 m에 대한 정보를 드러내지 않는다
  - 결속(binding): Com(m, r) = Com(m', r') 인 (m', r') ≠ (m, r)를 찾기 어렵다
  - 준동형: Com(m₁, r₁)·Com(m₂, r₂) = Com(m₁+m₂, r₁+r₂)

**검증기의 커밋먼트 검사**:
  Prover가 공개한 열기(opening) (t1, τ1), (t2, τ2)가
  커밋먼트 T1, T2와 일치하는지 확인한다.

    Com(t1, τ1) == T1   아니면  CommitmentMismatch("T1")
    Com(t2, τ2) == T2   아니면  CommitmentMismatch("T2")
"""

from zkp.rangeproof.errors import CommitmentMismatch
from zkp.rangeproof.field import modpow, mulmod


def pedersen_commit(params, m, r):
    """Com(m, r) = g^m · h^r mod n.

    Args:
        params: PublicParameters
        m: 커밋할 값
        r: 블라인딩 인자

    Returns:
        int: 커밋먼트

    예시:
        >>> pedersen_commit(PublicParameters(2, 3, 101), 5, 7)
    """
    g, h, n = params
    return mulmod(modpow(g, m, n), modpow(h, r, n), n)


def check_commitments(params, proof):
    """T1, T2 커밋먼트와 그 열기의 일치를 확인한다.

    Raises:
        CommitmentMismatch: 필드 이름 "T1" 또는 "T2"
    """
    if pedersen_commit(params, proof.t1, proof.tau1) != proof.T1:
        raise CommitmentMismatch("T1")
    if pedersen_commit(params, proof.t2, proof.tau2) != proof.T2:
        raise CommitmentMismatch("T2")
