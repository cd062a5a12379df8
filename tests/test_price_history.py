"""
Tests for the PriceHistoryStore - durable 24-hour price cache.

Tests cover:
- Loading missing, corrupt and partially malformed caches
- Recording with eviction and persistence
- Reference sample lookup
"""
import json
import time

import pytest

from btc15_momentum.data.price_history import PriceHistory, PriceHistoryStore, PriceSample
from btc15_momentum.monitoring.audit import AuditLog

from conftest import read_jsonl

MINUTE_MS = 60_000
DAY_MS = 24 * 60 * MINUTE_MS


@pytest.fixture
def audit(state_store):
    return AuditLog(state_store, "trade_log.jsonl")


@pytest.fixture
def history_store(state_store, audit):
    return PriceHistoryStore(state_store, "price_cache.json", audit=audit)


class TestLoad:

    def test_missing_file_gives_empty_history(self, history_store):
        history = history_store.load()
        assert history.version == 1
        assert history.entries == []

    def test_corrupt_file_resets_and_reports(self, history_store, state_store, audit, tmp_path):
        (tmp_path / "price_cache.json").write_text("{not json")

        history = history_store.load()

        assert history.entries == []
        records = read_jsonl(tmp_path / "trade_log.jsonl")
        assert len(records) == 1
        assert records[0]["event"] == "price_cache_reset"

    def test_undecodable_bytes_reset(self, history_store, audit, tmp_path):
        (tmp_path / "price_cache.json").write_bytes(b'{"version": 1, "entries": [\xff\xfe]}')

        history = history_store.load()

        assert history.version == 1
        assert history.entries == []
        records = read_jsonl(tmp_path / "trade_log.jsonl")
        assert [r["event"] for r in records] == ["price_cache_reset"]

    def test_recovers_on_next_record(self, history_store, tmp_path):
        (tmp_path / "price_cache.json").write_bytes(b"\xff\xfe")

        history_store.record(history_store.load(), 95000.0, now_ms=1000)

        assert history_store.load().entries == [PriceSample(timestamp=1000, price=95000.0)]

    def test_non_object_document_resets(self, history_store, tmp_path):
        (tmp_path / "price_cache.json").write_text("[1, 2, 3]")
        assert history_store.load().entries == []

    def test_malformed_entries_dropped(self, history_store, tmp_path):
        doc = {
            "version": 1,
            "entries": [
                {"timestamp": 1000, "price": 95000.5},
                {"timestamp": "soon"},
                "garbage",
                {"timestamp": 2000, "price": "95010"},
            ],
        }
        (tmp_path / "price_cache.json").write_text(json.dumps(doc))

        history = history_store.load()

        assert history.entries == [
            PriceSample(timestamp=1000, price=95000.5),
            PriceSample(timestamp=2000, price=95010.0),
        ]

    def test_missing_entries_key(self, history_store, tmp_path):
        (tmp_path / "price_cache.json").write_text(json.dumps({"version": 1}))
        assert history_store.load().entries == []


class TestRecord:

    def test_record_persists_sample(self, history_store):
        now_ms = 1_736_165_643_000
        history = history_store.load()

        sample = history_store.record(history, 95123.45, now_ms=now_ms)

        assert sample == PriceSample(timestamp=now_ms, price=95123.45)
        reloaded = history_store.load()
        assert reloaded.entries == [sample]

    def test_record_evicts_entries_older_than_retention(self, history_store):
        now_ms = 1_736_165_643_000
        history = PriceHistory(entries=[
            PriceSample(timestamp=now_ms - DAY_MS - 1, price=1.0),
            PriceSample(timestamp=now_ms - DAY_MS, price=2.0),
            PriceSample(timestamp=now_ms - 60 * MINUTE_MS, price=3.0),
        ])

        history_store.record(history, 4.0, now_ms=now_ms)

        prices = [e.price for e in history_store.load().entries]
        assert prices == [2.0, 3.0, 4.0]

    def test_record_then_load_within_retention(self, history_store):
        now_ms = int(time.time() * 1000)
        history = PriceHistory(entries=[
            PriceSample(timestamp=now_ms - 2 * DAY_MS, price=1.0),
            PriceSample(timestamp=now_ms - DAY_MS - 5000, price=2.0),
        ])

        history_store.record(history, 3.0)

        cutoff = int(time.time() * 1000) - DAY_MS
        entries = history_store.load().entries
        assert entries
        assert all(e.timestamp >= cutoff for e in entries)

    def test_record_keeps_insertion_order(self, history_store):
        now_ms = 1_736_165_643_000
        history = PriceHistory(entries=[
            PriceSample(timestamp=now_ms - 5 * MINUTE_MS, price=1.0),
            PriceSample(timestamp=now_ms - 30 * MINUTE_MS, price=2.0),
        ])

        history_store.record(history, 3.0, now_ms=now_ms)

        assert [e.price for e in history_store.load().entries] == [1.0, 2.0, 3.0]

    def test_absolute_path_honoured(self, state_store, tmp_path):
        target = tmp_path / "elsewhere" / "cache.json"
        store = PriceHistoryStore(state_store, str(target))

        store.record(store.load(), 100.0, now_ms=1000)

        assert json.loads(target.read_text())["entries"][0]["price"] == 100.0


class TestFindApprox:

    def test_picks_sample_at_least_target_age_old(self):
        t = 1_736_165_643_000
        old = PriceSample(timestamp=t - 20 * MINUTE_MS, price=94000.0)
        recent = PriceSample(timestamp=t - 5 * MINUTE_MS, price=95000.0)
        history = PriceHistory(entries=[old, recent])

        assert PriceHistoryStore.find_approx(history, 15 * MINUTE_MS, now_ms=t) == old

    def test_picks_most_recent_qualifying_sample_regardless_of_order(self):
        t = 1_736_165_643_000
        a = PriceSample(timestamp=t - 16 * MINUTE_MS, price=1.0)
        b = PriceSample(timestamp=t - 40 * MINUTE_MS, price=2.0)
        c = PriceSample(timestamp=t - 17 * MINUTE_MS, price=3.0)
        history = PriceHistory(entries=[b, a, c])

        assert PriceHistoryStore.find_approx(history, 15 * MINUTE_MS, now_ms=t) == a

    def test_exact_age_qualifies(self):
        t = 1_736_165_643_000
        exact = PriceSample(timestamp=t - 15 * MINUTE_MS, price=1.0)
        history = PriceHistory(entries=[exact])

        assert PriceHistoryStore.find_approx(history, 15 * MINUTE_MS, now_ms=t) == exact

    def test_none_when_history_too_short(self):
        t = 1_736_165_643_000
        history = PriceHistory(entries=[PriceSample(timestamp=t - MINUTE_MS, price=1.0)])

        assert PriceHistoryStore.find_approx(history, 15 * MINUTE_MS, now_ms=t) is None

    def test_none_for_empty_history(self):
        assert PriceHistoryStore.find_approx(PriceHistory(), 15 * MINUTE_MS) is None
