"""
검증 원장 테스트
=================

테스트 범위:
  - try_insert 의 check-and-set 의미
  - 주체별 최신 식별자
  - 같은 식별자를 두고 경쟁하는 스레드 중 정확히 하나만 성공
  - TinyDB 저장소 (메모리 / JSON 파일)
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from tinydb.storages import MemoryStorage

from zkp.rangeproof.ledger import LedgerStore, MemoryLedgerStore
from zkp.rangeproof.tinydb_store import DATA, TinyDBLedgerStore


ID_1 = "0x" + "11" * 32
ID_2 = "0x" + "22" * 32
ALICE = "0x00000000000000000000000000000000000000a1"
BOB = "0x00000000000000000000000000000000000000b2"


class LedgerContract:
    """모든 LedgerStore 구현이 지켜야 하는 동작. make_store()를 구현한다."""

    def make_store(self):
        raise NotImplementedError

    def test_empty(self):
        store = self.make_store()
        assert store.is_verified(ID_1) is False
        assert store.latest_identity(ALICE) is None

    def test_first_insert_wins(self):
        store = self.make_store()
        assert store.try_insert(ID_1, ALICE) is True
        assert store.is_verified(ID_1) is True
        assert store.latest_identity(ALICE) == ID_1

    def test_second_insert_rejected(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        assert store.try_insert(ID_1, ALICE) is False
        assert store.try_insert(ID_1, BOB) is False

    def test_rejected_insert_does_not_touch_latest(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_1, BOB)
        assert store.latest_identity(BOB) is None

    def test_latest_follows_most_recent(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_2, ALICE)
        assert store.latest_identity(ALICE) == ID_2
        assert store.is_verified(ID_1)

    def test_subjects_independent(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_2, BOB)
        assert store.latest_identity(ALICE) == ID_1
        assert store.latest_identity(BOB) == ID_2

    def test_concurrent_insert_single_winner(self):
        store = self.make_store()
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda i: store.try_insert(ID_1, f"subject-{i}"), range(32)))
        assert results.count(True) == 1
        winner = results.index(True)
        assert store.latest_identity(f"subject-{winner}") == ID_1


class TestMemoryLedgerStore(LedgerContract):

    def make_store(self):
        return MemoryLedgerStore()

    def test_is_ledger_store(self):
        assert isinstance(self.make_store(), LedgerStore)

    def test_len(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_1, BOB)
        assert len(store) == 1


class TestTinyDBLedgerStore(LedgerContract):

    def make_store(self):
        return TinyDBLedgerStore(storage=MemoryStorage, clock=lambda: 1700000000.0)

    def test_is_ledger_store(self):
        assert isinstance(self.make_store(), LedgerStore)

    def test_document_layout(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_2, ALICE)
        docs = sorted(store.table.all(), key=lambda d: d["seq"])
        assert [d["seq"] for d in docs] == [1, 2]
        assert docs[0] == {
            "identity": ID_1, "subject": ALICE, "seq": 1, "accepted_at": 1700000000.0,
        }

    def test_latest_table_one_document_per_subject(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_2, ALICE)
        assert store.latest.all() == [{"subject": ALICE, "identity": ID_2, "seq": 2}]

    def test_rejected_insert_keeps_counter(self):
        store = self.make_store()
        store.try_insert(ID_1, ALICE)
        store.try_insert(ID_1, BOB)
        store.try_insert(ID_2, BOB)
        assert len(store) == 2
        assert store.table.get(DATA.identity == ID_2)["seq"] == 2

    def test_persists_to_file(self, tmp_path):
        path = str(tmp_path / "ledger.json")
        store = TinyDBLedgerStore(path)
        store.try_insert(ID_1, ALICE)
        store.close()

        reopened = TinyDBLedgerStore(path)
        assert reopened.is_verified(ID_1)
        assert reopened.latest_identity(ALICE) == ID_1
        assert reopened.try_insert(ID_1, BOB) is False
        reopened.close()

    def test_sequence_continues_after_reopen(self, tmp_path):
        path = str(tmp_path / "ledger.json")
        store = TinyDBLedgerStore(path)
        store.try_insert(ID_1, ALICE)
        store.close()

        reopened = TinyDBLedgerStore(path)
        assert reopened.try_insert(ID_2, ALICE) is True
        assert reopened.table.get(DATA.identity == ID_2)["seq"] == 2
        assert reopened.latest_identity(ALICE) == ID_2
        reopened.close()

    def test_requires_path_or_storage(self):
        with pytest.raises(ValueError):
            TinyDBLedgerStore()
