"""
증명 식별자 (Proof Identity)
=============================

증명 전체 내용의 정규(canonical) 해시. 중복 제출 방지 키이자
외부에서 증명을 가리키는 핸들로 쓰인다.

**정규 직렬화**:
  이더리움 ABI의 abi.encode(proof) 와 같은 바이트열을 만든다.
  증명은 동적 배열 두 개를 가진 튜플이므로 다음과 같이 배치된다.

    word(0x20)                                ← 튜플 오프셋
    ── 튜플 헤드 (19 워드) ──
    A, S, T1, T2, tau_x, mu, t_hat,
    C, C_v1, C_v2, t0, t1, t2, tau1, tau2     ← 15개 스칼라
    offset(ipp_L), offset(ipp_R)              ← 헤드 시작 기준 바이트 오프셋
    ipp_a, ipp_b
    ── 튜플 테일 ──
    len(ipp_L), ipp_L[0], ..., ipp_L[k-1]     ← 명시적 길이 접두
    len(ipp_R), ipp_R[0], ..., ipp_R[k-1]

  모든 워드는 32바이트 빅엔디안이다.

    identity = "0x" ‖ hex(Keccak256(encoding))

  필드 하나라도 다르면 다른 식별자가 나온다 (해시 충돌 제외).
  언어별 구조체 해싱에 의존하지 않으므로 다른 구현과 재현 가능하다.
"""

from zkp.rangeproof.proof import SCALAR_FIELDS
from zkp.rangeproof.transcript import WORD_SIZE, encode_word, keccak256


# 튜플 헤드: 15 스칼라 + 두 오프셋 + ipp_a + ipp_b
HEAD_WORDS = len(SCALAR_FIELDS) + 4


def encode_proof(proof):
    """증명의 정규 바이트 직렬화 (abi.encode 호환)."""
    tail_L = [len(proof.ipp_L)] + list(proof.ipp_L)
    tail_R = [len(proof.ipp_R)] + list(proof.ipp_R)

    offset_L = HEAD_WORDS * WORD_SIZE
    offset_R = offset_L + len(tail_L) * WORD_SIZE

    words = [WORD_SIZE]
    words += list(proof.scalars)
    words += [offset_L, offset_R, proof.ipp_a, proof.ipp_b]
    words += tail_L
    words += tail_R
    return b"".join(encode_word(w) for w in words)


def proof_identity(proof):
    """증명 식별자 (0x 접두 64자리 16진 문자열)."""
    return "0x" + keccak256(encode_proof(proof)).hex()


def is_identity(value):
    """value가 식별자 형식("0x" + 64 hex)인지 확인한다."""
    if not isinstance(value, str) or len(value) != 66 or not value.startswith("0x"):
        return False
    try:
        int(value[2:], 16)
    except ValueError:
        return False
    return True
