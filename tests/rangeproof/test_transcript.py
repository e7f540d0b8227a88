"""
Fiat-Shamir 챌린지 테스트
==========================

테스트 범위:
  - Keccak-256 (NIST SHA3 아님) 알려진 다이제스트
  - 32바이트 빅엔디안 워드 인코딩
  - y, z, x 입력 구조와 결정성
  - 0 챌린지 거부 (InvalidChallengeY / Z / X)
"""

import pytest

from zkp.rangeproof import transcript
from zkp.rangeproof.errors import (
    InvalidChallengeX, InvalidChallengeY, InvalidChallengeZ,
)
from zkp.rangeproof.field import WORD_MAX
from zkp.rangeproof.transcript import (
    Transcript, derive_challenges, encode_word, fiat_shamir, keccak256,
)


KECCAK_EMPTY = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
KECCAK_ZERO_WORD = "290decd9548b62a8d60345a988386fc84ba6bc95484008f6362f93160ef3e563"


class TestKeccak:

    def test_empty_input(self):
        assert keccak256(b"").hex() == KECCAK_EMPTY

    def test_is_not_nist_sha3(self):
        """NIST SHA3-256("") 은 a7ffc6f8… 이다."""
        assert not keccak256(b"").hex().startswith("a7ffc6f8")

    def test_zero_word(self):
        assert fiat_shamir([0]) == int(KECCAK_ZERO_WORD, 16)


class TestEncodeWord:

    def test_padding(self):
        assert encode_word(1) == b"\x00" * 31 + b"\x01"
        assert encode_word(0x0102) == b"\x00" * 30 + b"\x01\x02"

    def test_max_word(self):
        assert encode_word(WORD_MAX - 1) == b"\xff" * 32

    @pytest.mark.parametrize("bad", [-1, WORD_MAX])
    def test_out_of_range(self, bad):
        with pytest.raises(ValueError):
            encode_word(bad)

    def test_concatenation_order_matters(self):
        assert fiat_shamir([1, 2]) != fiat_shamir([2, 1])


class TestTranscript:

    def test_challenge_reduced_and_recorded(self):
        t = Transcript(101)
        c = t.challenge("y", [1, 2, 3])
        assert c == fiat_shamir([1, 2, 3]) % 101
        assert t.challenges == {"y": c}


class TestDeriveChallenges:

    def test_input_structure(self, params, honest_proof):
        p = honest_proof
        n = params.n
        challenges = derive_challenges(p, n)

        y = fiat_shamir([p.A, p.S, p.C, p.C_v1, p.C_v2]) % n
        assert challenges.y == y
        assert challenges.z == fiat_shamir([y]) % n
        assert challenges.x == fiat_shamir([p.T1, p.T2]) % n

    def test_deterministic(self, params, honest_proof):
        assert derive_challenges(honest_proof, params.n) == derive_challenges(honest_proof, params.n)

    def test_y_ignores_other_fields(self, params, honest_proof):
        tampered = honest_proof.replace(mu=honest_proof.mu ^ 1)
        assert derive_challenges(tampered, params.n) == derive_challenges(honest_proof, params.n)

    def test_x_depends_on_t1_t2(self, params, honest_proof):
        tampered = honest_proof.replace(T2=honest_proof.T2 ^ 1)
        assert derive_challenges(tampered, params.n).x != derive_challenges(honest_proof, params.n).x


class TestZeroChallenges:
    """작은 모듈러스 n = 7 에서 0 챌린지를 만드는 입력을 찾는다."""

    N = 7

    def _search_y_zero(self, proof):
        for a in range(1, 10000):
            candidate = proof.replace(A=a)
            if fiat_shamir([a, proof.S, proof.C, proof.C_v1, proof.C_v2]) % self.N == 0:
                return candidate
        pytest.fail("y = 0 인 입력을 찾지 못했습니다")

    def _search_x_zero(self, proof):
        for a in range(1, 10000):
            y = fiat_shamir([a, proof.S, proof.C, proof.C_v1, proof.C_v2]) % self.N
            if y != 0 and fiat_shamir([y]) % self.N != 0:
                proof = proof.replace(A=a)
                break
        for t1 in range(1, 10000):
            if fiat_shamir([t1, proof.T2]) % self.N == 0:
                return proof.replace(T1=t1)
        pytest.fail("x = 0 인 입력을 찾지 못했습니다")

    def test_zero_y_rejected(self, honest_proof):
        proof = self._search_y_zero(honest_proof)
        with pytest.raises(InvalidChallengeY):
            derive_challenges(proof, self.N)

    def test_zero_x_rejected(self, honest_proof):
        proof = self._search_x_zero(honest_proof)
        with pytest.raises(InvalidChallengeX) as exc:
            derive_challenges(proof, self.N)
        assert exc.value.challenge == "x"

    def test_zero_z_rejected(self, honest_proof, monkeypatch):
        """z = H(y) 가 0이 되도록 해시를 고정한다."""
        outputs = iter([1, self.N])
        monkeypatch.setattr(transcript, "fiat_shamir", lambda values: next(outputs))
        with pytest.raises(InvalidChallengeZ):
            derive_challenges(honest_proof, self.N)
