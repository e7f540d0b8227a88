"""
범위 증명 검증기 (Verification Orchestrator)
=============================================

모든 구성 요소를 정해진 순서로 조합하는 단일 진입점.
첫 번째 실패에서 멈추며, 마지막 단계 전에는 원장을 변경하지 않는다.

**상태 기계**:

  ┌─────────────────────┐
  │ validating          │  범위, 주체, 파라미터, 증명 형태
  └─────────┬───────────┘
            │  식별자 계산, 이미 수락됐으면 DuplicateProof
  ┌─────────▼───────────┐
  │ challenge_derivation│  y, z, x (각각 ≠ 0)
  └─────────┬───────────┘
  ┌─────────▼───────────┐
  │ commitment_check    │  T1, T2, t̂ 다항식 관계
  └─────────┬───────────┘
  ┌─────────▼───────────┐
  │ structural_check    │  0 아님, 서로 다름, IPP 길이
  └─────────┬───────────┘
  ┌─────────▼───────────┐
  │ committing          │  원자적 try_insert, 이벤트 발행
  └─────────┬───────────┘
            ▼
       accepted / rejected(reason)

**결과**:
  검증 실패는 예외로 빠져나오지 않고 VerificationResult(accepted=False)로
  돌아온다. reason.kind / reason.category 로 호출자 버그(malformed),
  잘못된 증명(invalid), 중복 제출(duplicate)을 구분한다.

사용 예시:
    >>> verifier = RangeProofVerifier()
    >>> result = verifier.verify(params, proof, RangeClaim(0, 100), "0xabc…")
    >>> result.accepted, result.identity
    >>> verifier.is_verified(result.identity)   # True
"""

import logging
import time
from collections import namedtuple

from tinydb.storages import MemoryStorage

from zkp.rangeproof.commitment import check_commitments
from zkp.rangeproof.errors import (
    DuplicateProof, InvalidParameters, InvalidRange, MalformedProofShape,
    VerificationError,
)
from zkp.rangeproof.events import VerificationEvent, emit
from zkp.rangeproof.identity import proof_identity
from zkp.rangeproof.polynomial import check_polynomial
from zkp.rangeproof.proof import (
    IPP_ROUNDS, Proof, PublicParameters, RangeClaim, validate_subject,
)
from zkp.rangeproof.structure import check_structure
from zkp.rangeproof.tinydb_store import TinyDBLedgerStore
from zkp.rangeproof.transcript import derive_challenges


logger = logging.getLogger(__name__)


# 단계 이름
VALIDATING = "validating"
CHALLENGE_DERIVATION = "challenge_derivation"
COMMITMENT_CHECK = "commitment_check"
STRUCTURAL_CHECK = "structural_check"
COMMITTING = "committing"
ACCEPTED = "accepted"


# ─────────────────────────────────────────────────────────────────────
# 순수 검증 (원장 없음)
# ─────────────────────────────────────────────────────────────────────

def check_proof(params, proof, ipp_rounds=IPP_ROUNDS):
    """원장 없이 증명의 수학적 부분만 검사한다.

    챌린지 도출 → 커밋먼트/다항식 → 구조 검사.
    같은 입력에는 항상 같은 결과를 돌려준다 (읽기 전용 재검사용).

    Args:
        params: PublicParameters
        proof: Proof
        ipp_rounds: 기대하는 IPP 라운드 수

    Returns:
        Challenges(y, z, x)

    Raises:
        VerificationError: 첫 번째 실패
    """
    params = PublicParameters(*params).validate()
    challenges = derive_challenges(proof, params.n)
    check_commitments(params, proof)
    check_polynomial(params, proof, challenges.x)
    check_structure(proof, params.n, ipp_rounds)
    return challenges


# ─────────────────────────────────────────────────────────────────────
# 결과
# ─────────────────────────────────────────────────────────────────────

class VerificationResult(namedtuple(
    "VerificationResult",
    ["accepted", "identity", "reason", "stage", "challenges", "event"],
)):
    """verify()의 결과.

    속성:
        accepted: 수락 여부
        identity: 증명 식별자 (형태 검사 전에 실패하면 None)
        reason: 거절 사유 VerificationError (수락 시 None)
        stage: 실패한 단계, 수락 시 "accepted"
        challenges: 도출된 Challenges (도출 전에 실패하면 None)
        event: 수락 시 발행된 VerificationEvent
    """

    __slots__ = ()

    @property
    def kind(self):
        return self.reason.kind if self.reason is not None else None

    @property
    def category(self):
        return self.reason.category if self.reason is not None else None

    def __bool__(self):
        return self.accepted


# ─────────────────────────────────────────────────────────────────────
# 검증기
# ─────────────────────────────────────────────────────────────────────

class RangeProofVerifier:
    """원장과 이벤트 관찰자를 가진 범위 증명 검증기.

    Args:
        store: LedgerStore (기본: MemoryStorage 위의 TinyDBLedgerStore)
        clock: 이벤트 타임스탬프용 시간 함수 (기본: time.time)
        observers: 수락 이벤트를 받을 호출 가능 객체들
        ipp_rounds: 기대하는 IPP 라운드 수 (기본 6)
    """

    def __init__(self, store=None, clock=time.time, observers=(), ipp_rounds=IPP_ROUNDS):
        self.store = store if store is not None else TinyDBLedgerStore(storage=MemoryStorage)
        self.clock = clock
        self.observers = list(observers)
        self.ipp_rounds = ipp_rounds

    def subscribe(self, observer):
        """수락 이벤트 관찰자를 등록한다. 데코레이터로도 쓸 수 있다."""
        self.observers.append(observer)
        return observer

    # ── 질의 ──

    def is_verified(self, identity):
        return self.store.is_verified(identity)

    def latest_identity(self, subject):
        return self.store.latest_identity(subject)

    # ── 검증 ──

    def _coerce_proof(self, proof):
        if isinstance(proof, Proof):
            # 워드 검사를 다시 거친다
            return Proof(*proof)
        if isinstance(proof, (list, tuple)):
            return Proof.from_flat(proof, self.ipp_rounds)
        raise MalformedProofShape("증명은 Proof 또는 평탄화 배열이어야 합니다")

    def _validate(self, params, proof, claim, subject):
        try:
            claim = RangeClaim(*claim)
        except TypeError:
            raise InvalidRange("범위는 (min, max) 쌍이어야 합니다")
        claim.validate()

        validate_subject(subject)

        try:
            params = PublicParameters(*params)
        except TypeError:
            raise InvalidParameters("파라미터는 (g, h, n) 세 값이어야 합니다")
        params.validate()

        return params, self._coerce_proof(proof), claim

    def verify(self, params, proof, claim, subject):
        """증명을 검증하고 수락 시 원장에 기록한다.

        Args:
            params: PublicParameters 또는 (g, h, n)
            proof: Proof 또는 평탄화 정수 배열
            claim: RangeClaim 또는 (min, max)
            subject: 제출 주체

        Returns:
            VerificationResult
        """
        stage = VALIDATING
        identity = None
        challenges = None
        try:
            params, proof, claim = self._validate(params, proof, claim, subject)

            identity = proof_identity(proof)
            if self.store.is_verified(identity):
                raise DuplicateProof(identity)

            stage = CHALLENGE_DERIVATION
            logger.debug("[%s] 챌린지 도출", identity)
            challenges = derive_challenges(proof, params.n)

            stage = COMMITMENT_CHECK
            logger.debug("[%s] 커밋먼트 검사 (x=%d)", identity, challenges.x)
            check_commitments(params, proof)
            check_polynomial(params, proof, challenges.x)

            stage = STRUCTURAL_CHECK
            logger.debug("[%s] 구조 검사", identity)
            check_structure(proof, params.n, self.ipp_rounds)

            stage = COMMITTING
            if not self.store.try_insert(identity, subject):
                raise DuplicateProof(identity)
        except VerificationError as e:
            logger.info("증명 거절: %s at %s (identity=%s)", e.kind, stage, identity)
            return VerificationResult(False, identity, e, stage, challenges, None)

        event = VerificationEvent(
            subject=subject,
            identity=identity,
            range_min=claim.min,
            range_max=claim.max,
            accepted=True,
            timestamp=self.clock(),
        )
        emit(self.observers, event)
        logger.info("증명 수락: %s (subject=%s, range=[%d, %d])",
                    identity, subject, claim.min, claim.max)
        return VerificationResult(True, identity, None, ACCEPTED, challenges, event)
