"""
범위 증명 테스트 공통 fixture
==============================

검증기를 통과하는 증명을 만들기 위한 테스트용 Prover를 포함한다.

**테스트 Prover** (차원 64, 라운드 6):
  값 v ∈ [a, b] 에 대해

    v1 = 4(v − a) + 1,  v2 = 4(b − v) + 1       (각각 세 제곱수의 합)
    d  = (v1, v2 의 세 제곱근들, 0 패딩)          길이 64
    C = Com(v, r), C_v1 = Com(v1, r1), C_v2 = Com(v2, r2)
    A = Com(Σd, α), S = Com(ΣsL + ΣsR, ρ)
    y = H(A, S, C, C_v1, C_v2), z = H(y)
    l0 = r0 = z·d + y
    t0 = <l0, r0>, t1 = <l0, sR> + <r0, sL>, t2 = <sL, sR>
    T1 = Com(t1, τ1), T2 = Com(t2, τ2), x = H(T1, T2)
    t̂ = t0 + t1·x + t2·x², μ = α + ρ·x, τx = τ2·x² + τ1·x

  내적 증명은 벡터 l, r 을 6번 반으로 접으며 라운드마다 L, R 커밋먼트를 남긴다.
  모든 값은 mod n 으로 정규화한다.
"""

import random

import pytest

from zkp.rangeproof.commitment import pedersen_commit
from zkp.rangeproof.proof import IPP_DIMENSION, Proof, PublicParameters
from zkp.rangeproof.transcript import fiat_shamir


# secp256k1 기저체의 소수 (256비트)
P256 = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F


def three_squares(value):
    """value = d1² + d2² + d3² 인 (d1, d2, d3)를 찾는다."""
    limit = int(value ** 0.5) + 1
    for d1 in range(limit + 1):
        for d2 in range(d1, limit + 1):
            rest = value - d1 * d1 - d2 * d2
            if rest < 0:
                break
            d3 = int(rest ** 0.5)
            while d3 * d3 > rest:
                d3 -= 1
            while (d3 + 1) * (d3 + 1) <= rest:
                d3 += 1
            if d3 * d3 == rest:
                return d1, d2, d3
    raise ValueError(f"세 제곱수 분해 실패: {value}")


def inner(a, b, n):
    return sum(x * y for x, y in zip(a, b)) % n


def prove_range(params, value, lo, hi, seed=1, dimension=IPP_DIMENSION):
    """테스트용 범위 증명 생성."""
    n = params.n
    rng = random.Random(seed)

    def rand():
        return rng.randrange(1, n)

    v1 = 4 * (value - lo) + 1
    v2 = 4 * (hi - value) + 1
    d = list(three_squares(v1)) + list(three_squares(v2))
    d += [0] * (dimension - len(d))

    r, r1, r2 = rand(), rand(), rand()
    C = pedersen_commit(params, value % n, r)
    C_v1 = pedersen_commit(params, v1 % n, r1)
    C_v2 = pedersen_commit(params, v2 % n, r2)

    alpha, rho = rand(), rand()
    sL = [rand() for _ in range(dimension)]
    sR = [rand() for _ in range(dimension)]
    A = pedersen_commit(params, sum(d) % n, alpha)
    S = pedersen_commit(params, (sum(sL) + sum(sR)) % n, rho)

    y = fiat_shamir([A, S, C, C_v1, C_v2]) % n
    z = fiat_shamir([y]) % n

    l0 = [(z * di + y) % n for di in d]
    r0 = list(l0)
    t0 = inner(l0, r0, n)
    t1 = (inner(l0, sR, n) + inner(r0, sL, n)) % n
    t2 = inner(sL, sR, n)

    tau1, tau2 = rand(), rand()
    T1 = pedersen_commit(params, t1, tau1)
    T2 = pedersen_commit(params, t2, tau2)

    x = fiat_shamir([T1, T2]) % n
    t_hat = (t0 + t1 * x + t2 * x * x) % n
    mu = (alpha + rho * x) % n
    tau_x = (tau2 * x * x + tau1 * x) % n

    a_vec = [(li + si * x) % n for li, si in zip(l0, sL)]
    b_vec = [(ri + si * x) % n for ri, si in zip(r0, sR)]
    ipp_L, ipp_R = [], []
    while len(a_vec) > 1:
        half = len(a_vec) // 2
        a_lo, a_hi = a_vec[:half], a_vec[half:]
        b_lo, b_hi = b_vec[:half], b_vec[half:]
        L = pedersen_commit(params, inner(a_lo, b_hi, n), rand())
        R = pedersen_commit(params, inner(a_hi, b_lo, n), rand())
        ipp_L.append(L)
        ipp_R.append(R)
        u = fiat_shamir([L, R]) % n
        a_vec = [(lo_ + u * hi_) % n for lo_, hi_ in zip(a_lo, a_hi)]
        b_vec = [(lo_ + u * hi_) % n for lo_, hi_ in zip(b_lo, b_hi)]

    return Proof(
        A=A, S=S, T1=T1, T2=T2, tau_x=tau_x, mu=mu, t_hat=t_hat,
        C=C, C_v1=C_v1, C_v2=C_v2, t0=t0, t1=t1, t2=t2, tau1=tau1, tau2=tau2,
        ipp_L=ipp_L, ipp_R=ipp_R, ipp_a=a_vec[0], ipp_b=b_vec[0],
    )


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def params():
    """256비트 모듈러스, g=2, h=3."""
    return PublicParameters(g=2, h=3, n=P256)


@pytest.fixture(scope="session")
def prover():
    """prove_range 함수 자체를 돌려준다 (값/범위/시드를 바꿔 쓰기 위함)."""
    return prove_range


@pytest.fixture(scope="session")
def honest_proof(params):
    """[0, 100] 범위의 숨겨진 값 50에 대한 정직한 증명."""
    return prove_range(params, 50, 0, 100, seed=1)


@pytest.fixture(scope="session")
def other_proof(params):
    """같은 범위, 다른 값/블라인딩의 정직한 증명."""
    return prove_range(params, 7, 0, 100, seed=2)
