"""
범위 증명 기반 모듈: 모듈러 산술(Modular Arithmetic)
=====================================================

범위 증명 검증 전체에서 사용되는 정수 모듈러 연산을 정의한다.

**모듈러스 n**:
  공개 파라미터의 n은 256비트 워드 안에 들어가는 모듈러스이다.
  (예: 두 128비트 소수의 곱인 RSA형 모듈러스)
  소수가 아닐 수도 있으므로 나눗셈(역원)은 사용하지 않는다.
  덧셈, 곱셈, 거듭제곱만 필요하다.

**잉여류 ZN**:
  py_ecc의 FQ 클래스를 모듈러스마다 상속하여 만든다.
  파이썬 정수는 임의 정밀도이므로 중간 곱셈이 오버플로되지 않는다.

**modpow 규약** (검증기와 비트 단위로 일치해야 함):
  - modulus = 0  →  0
  - base = 0     →  0   (exponent = 0 이어도 0)
  - exponent = 0 →  1
  - 그 외        →  이진 거듭제곱 (square-and-multiply)

사용 예시:
    >>> from zkp.rangeproof.field import modpow, mulmod, addmod
    >>> modpow(2, 10, 1000)    # 24
    >>> mulmod(7, 8, 10)       # 6
    >>> addmod(7, 8, 10)       # 5
"""

from functools import lru_cache

from py_ecc.fields import bn128_FQ as FQ


# 256비트 워드 (증명 필드, 챌린지 입력, 파라미터의 최대 폭)
WORD_BITS = 256
WORD_MAX = 1 << WORD_BITS


# ─────────────────────────────────────────────────────────────────────
# 잉여류 (Residue class) ZN
# ─────────────────────────────────────────────────────────────────────

@lru_cache(maxsize=32)
def residue_class(modulus):
    """모듈러스 n 위의 잉여류 타입 ZN을 반환한다.

    FQ를 상속하고 field_modulus만 교체한다 (bn128 FR과 같은 방식).
    같은 모듈러스에 대해서는 같은 클래스를 재사용한다.

    Args:
        modulus: 양의 정수 n

    Returns:
        type: FQ의 서브클래스 (ZN)

    예시:
        >>> ZN = residue_class(10)
        >>> ZN(7) * ZN(8)   # ZN(6)
    """
    if modulus <= 0:
        raise ValueError(f"모듈러스는 양수여야 합니다: {modulus}")
    return type("ZN", (FQ,), {"field_modulus": modulus})


# ─────────────────────────────────────────────────────────────────────
# 모듈러 연산
# ─────────────────────────────────────────────────────────────────────

def addmod(a, b, modulus):
    """(a + b) mod n. n = 0 이면 0을 반환한다."""
    if modulus == 0:
        return 0
    ZN = residue_class(modulus)
    return int(ZN(a) + ZN(b))


def mulmod(a, b, modulus):
    """(a · b) mod n. n = 0 이면 0을 반환한다."""
    if modulus == 0:
        return 0
    ZN = residue_class(modulus)
    return int(ZN(a) * ZN(b))


def modpow(base, exponent, modulus):
    """base^exponent mod n 을 이진 거듭제곱으로 계산한다.

    지수의 비트를 낮은 쪽부터 훑으며 base를 제곱하고,
    비트가 1이면 결과에 곱한다. O(log exponent) 번의 곱셈.

    Args:
        base: 밑 (0 이상의 정수)
        exponent: 지수 (0 이상의 정수)
        modulus: 모듈러스 n

    Returns:
        int: base^exponent mod n (모듈 docstring의 규약 참고)

    Raises:
        ValueError: exponent가 음수일 때

    예시:
        >>> modpow(3, 0, 7)   # 1
        >>> modpow(0, 0, 7)   # 0
        >>> modpow(3, 4, 0)   # 0
    """
    if exponent < 0:
        raise ValueError(f"지수는 음수일 수 없습니다: {exponent}")
    if modulus == 0:
        return 0
    if base == 0:
        return 0
    if exponent == 0:
        return 1

    ZN = residue_class(modulus)
    result = ZN(1)
    square = ZN(base)
    while exponent > 0:
        if exponent & 1:
            result = result * square
        square = square * square
        exponent >>= 1
    return int(result)


def fits_word(value):
    """value가 부호 없는 256비트 워드로 표현 가능한 정수인지 확인한다."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < WORD_MAX
