"""Tests for the counter catalog."""

from __future__ import annotations

import threading
import time

import pytest

from netcounters import catalog as catalog_mod
from netcounters.catalog import CounterCatalog, RxCounter, TxCounter, default_catalog


class TestCounterEnums:
    """Tests for RxCounter / TxCounter."""

    def test_rx_has_eleven_members(self) -> None:
        assert len(RxCounter) == 11

    def test_tx_has_ten_members(self) -> None:
        assert len(TxCounter) == 10

    def test_display_name(self) -> None:
        assert RxCounter.CRC_ERRORS.display_name == "RX_CRC_ERRORS"
        assert str(TxCounter.WINDOW_ERRORS) == "TX_WINDOW_ERRORS"

    def test_field_name(self) -> None:
        assert RxCounter.FIFO_ERRORS.field == "fifo_errors"
        assert TxCounter.BYTES.field == "bytes"

    def test_rx_and_tx_are_distinct(self) -> None:
        assert RxCounter.BYTES != TxCounter.BYTES


class TestCounterCatalog:
    """Tests for CounterCatalog.build() and lookups."""

    def test_every_rx_counter_has_a_file(self) -> None:
        cat = CounterCatalog.build()
        assert set(cat.rx) == set(RxCounter)

    def test_every_tx_counter_has_a_file(self) -> None:
        cat = CounterCatalog.build()
        assert set(cat.tx) == set(TxCounter)

    def test_filenames_match_kernel_names(self) -> None:
        cat = CounterCatalog.build()
        for counter in RxCounter:
            assert cat.rx_filename(counter) == f"rx_{counter.field}"
        for counter in TxCounter:
            assert cat.tx_filename(counter) == f"tx_{counter.field}"

    def test_specific_filenames(self) -> None:
        cat = CounterCatalog.build()
        assert cat.rx_filename(RxCounter.BYTES) == "rx_bytes"
        assert cat.rx_filename(RxCounter.MISSED_ERRORS) == "rx_missed_errors"
        assert cat.tx_filename(TxCounter.HEARTBEAT_ERRORS) == "tx_heartbeat_errors"

    def test_mappings_are_read_only(self) -> None:
        cat = CounterCatalog.build()
        with pytest.raises(TypeError):
            cat.rx[RxCounter.BYTES] = "other"  # type: ignore[index]

    def test_catalog_is_frozen(self) -> None:
        cat = CounterCatalog.build()
        with pytest.raises(AttributeError):
            cat.rx = {}  # type: ignore[misc]


class TestDefaultCatalog:
    """Tests for default_catalog()."""

    def test_returns_same_instance(self) -> None:
        assert default_catalog() is default_catalog()

    def test_built_once_under_concurrency(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(catalog_mod, "_default", None)
        calls: list[int] = []
        original = CounterCatalog.build.__func__  # type: ignore[attr-defined]

        def slow_build(cls: type[CounterCatalog]) -> CounterCatalog:
            calls.append(1)
            time.sleep(0.05)
            return original(cls)

        monkeypatch.setattr(CounterCatalog, "build", classmethod(slow_build))

        barrier = threading.Barrier(8)
        results: list[CounterCatalog] = []

        def worker() -> None:
            barrier.wait()
            results.append(default_catalog())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)
