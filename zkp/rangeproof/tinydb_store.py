"""
TinyDB 원장 저장소
===================

테이블 두 개를 쓴다.

  rangeproof_ledger : 수락된 증명마다 문서 하나
      {"identity": "0x…", "subject": "0xabc…", "seq": 3, "accepted_at": 1700000000.0}
  rangeproof_latest : 주체마다 문서 하나 (upsert)
      {"subject": "0xabc…", "identity": "0x…", "seq": 3}

  - check-and-set 은 "조회 → insert → upsert"를 프로세스 락 안에서 수행한다.
    조회 연산도 같은 락을 잡으므로 한쪽만 반영된 상태는 보이지 않는다.
  - seq 는 생성 시 한 번 테이블에서 읽어 온 뒤 메모리 카운터로 이어 간다.

사용 예시:
    >>> store = TinyDBLedgerStore("ledger.json")
    >>> store = TinyDBLedgerStore(storage=MemoryStorage)   # 메모리 원장
"""

import logging
import threading
import time

from tinydb import Query, TinyDB

from zkp.rangeproof.ledger import LedgerStore


logger = logging.getLogger(__name__)

DATA = Query()

TABLE_NAME = "rangeproof_ledger"
LATEST_TABLE_NAME = "rangeproof_latest"


class TinyDBLedgerStore(LedgerStore):
    """TinyDB 테이블 기반 원장.

    Args:
        path: JSON 파일 경로 (storage를 줄 때는 생략)
        storage: TinyDB 저장소 클래스 (예: MemoryStorage)
        clock: accepted_at 기록용 시간 함수
    """

    def __init__(self, path=None, storage=None, clock=time.time):
        if storage is not None:
            self.db = TinyDB(storage=storage)
        elif path is not None:
            self.db = TinyDB(path)
        else:
            raise ValueError("path 또는 storage가 필요합니다")
        self.table = self.db.table(TABLE_NAME)
        self.latest = self.db.table(LATEST_TABLE_NAME)
        self.clock = clock
        self._lock = threading.Lock()
        self._seq = max((doc["seq"] for doc in self.table.all()), default=0)

    def try_insert(self, identity, subject):
        with self._lock:
            if self.table.contains(DATA.identity == identity):
                return False
            self._seq += 1
            seq = self._seq
            self.table.insert({
                "identity": identity,
                "subject": subject,
                "seq": seq,
                "accepted_at": self.clock(),
            })
            self.latest.upsert(
                {"subject": subject, "identity": identity, "seq": seq},
                DATA.subject == subject,
            )
        logger.debug("원장 기록: %s (subject=%s, seq=%d)", identity, subject, seq)
        return True

    def is_verified(self, identity):
        with self._lock:
            return self.table.contains(DATA.identity == identity)

    def latest_identity(self, subject):
        with self._lock:
            doc = self.latest.get(DATA.subject == subject)
        return doc["identity"] if doc else None

    def __len__(self):
        with self._lock:
            return len(self.table)

    def close(self):
        self.db.close()
