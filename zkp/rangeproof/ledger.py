"""
검증 원장 (Verification Ledger)
================================

수락된 증명 식별자와 주체별 최신 식별자를 기록하는 저장소.

  verified : ProofIdentity → True
  latest   : Subject → ProofIdentity

**원자적 check-and-set**:
  try_insert(identity, subject) 하나의 연산으로

    1. identity가 이미 기록되어 있으면 False (변경 없음)
    2. 아니면 verified[identity] = True, latest[subject] = identity 를
       함께 기록하고 True

  같은 식별자를 두고 경쟁하는 호출자 중 정확히 하나만 True를 받는다.
  두 매핑은 한 단위로 갱신되므로 한쪽만 반영된 상태는 보이지 않는다.

  기록은 삭제되거나 False로 덮어써지지 않는다.

검증 로직은 LedgerStore 인터페이스에만 의존한다.
기본 저장소는 TinyDB 저장소(tinydb_store)이며, MemoryLedgerStore 는 락 하나로 동작하는
가벼운 대체 구현이다.
"""

import logging
import threading
from abc import ABC, abstractmethod


logger = logging.getLogger(__name__)


class LedgerStore(ABC):
    """원장 저장소 인터페이스."""

    @abstractmethod
    def try_insert(self, identity, subject):
        """식별자가 없으면 기록하고 True, 이미 있으면 False.

        Args:
            identity: ProofIdentity ("0x" + 64 hex)
            subject: 증명을 제출한 주체

        Returns:
            bool: 이번 호출이 기록했는지 여부
        """

    @abstractmethod
    def is_verified(self, identity):
        """식별자가 수락된 적이 있는지."""

    @abstractmethod
    def latest_identity(self, subject):
        """주체의 가장 최근 수락 식별자. 없으면 None."""


class MemoryLedgerStore(LedgerStore):
    """프로세스 메모리 원장. 하나의 락으로 두 매핑을 함께 보호한다."""

    def __init__(self):
        self._lock = threading.Lock()
        self._verified = {}
        self._latest = {}

    def try_insert(self, identity, subject):
        with self._lock:
            if self._verified.get(identity):
                return False
            self._verified[identity] = True
            self._latest[subject] = identity
        logger.debug("원장 기록: %s (subject=%s)", identity, subject)
        return True

    def is_verified(self, identity):
        with self._lock:
            return self._verified.get(identity, False)

    def latest_identity(self, subject):
        with self._lock:
            return self._latest.get(subject)

    def __len__(self):
        with self._lock:
            return len(self._verified)
