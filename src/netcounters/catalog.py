"""Catalog of the per-interface statistics files exposed by the kernel.

Maps each receive and transmit counter kind to the name of its file under
/sys/class/net/{iface}/statistics/.  The catalog is immutable; samplers share
the process-wide instance returned by :func:`default_catalog` unless they are
handed one explicitly.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

log = logging.getLogger(__name__)


class _Counter(enum.Enum):
    """Shared behaviour for the receive and transmit counter enums."""

    @property
    def display_name(self) -> str:
        """Canonical name for log messages, e.g. ``RX_BYTES``."""
        return self.value

    @property
    def field(self) -> str:
        """Name of the matching snapshot field, e.g. ``crc_errors``."""
        return self.name.lower()

    def __str__(self) -> str:
        return self.display_name


class RxCounter(_Counter):
    """Receive-side counter kinds."""

    BYTES = "RX_BYTES"
    COMPRESSED = "RX_COMPRESSED"
    CRC_ERRORS = "RX_CRC_ERRORS"
    DROPPED = "RX_DROPPED"
    ERRORS = "RX_ERRORS"
    FIFO_ERRORS = "RX_FIFO_ERRORS"
    FRAME_ERRORS = "RX_FRAME_ERRORS"
    LENGTH_ERRORS = "RX_LENGTH_ERRORS"
    MISSED_ERRORS = "RX_MISSED_ERRORS"
    OVER_ERRORS = "RX_OVER_ERRORS"
    PACKETS = "RX_PACKETS"


class TxCounter(_Counter):
    """Transmit-side counter kinds."""

    ABORTED_ERRORS = "TX_ABORTED_ERRORS"
    BYTES = "TX_BYTES"
    CARRIER_ERRORS = "TX_CARRIER_ERRORS"
    COMPRESSED = "TX_COMPRESSED"
    DROPPED = "TX_DROPPED"
    ERRORS = "TX_ERRORS"
    FIFO_ERRORS = "TX_FIFO_ERRORS"
    HEARTBEAT_ERRORS = "TX_HEARTBEAT_ERRORS"
    PACKETS = "TX_PACKETS"
    WINDOW_ERRORS = "TX_WINDOW_ERRORS"


# File names as published by the kernel, see
# Documentation/ABI/testing/sysfs-class-net-statistics
_RX_FILES: dict[RxCounter, str] = {
    RxCounter.BYTES: "rx_bytes",
    RxCounter.COMPRESSED: "rx_compressed",
    RxCounter.CRC_ERRORS: "rx_crc_errors",
    RxCounter.DROPPED: "rx_dropped",
    RxCounter.ERRORS: "rx_errors",
    RxCounter.FIFO_ERRORS: "rx_fifo_errors",
    RxCounter.FRAME_ERRORS: "rx_frame_errors",
    RxCounter.LENGTH_ERRORS: "rx_length_errors",
    RxCounter.MISSED_ERRORS: "rx_missed_errors",
    RxCounter.OVER_ERRORS: "rx_over_errors",
    RxCounter.PACKETS: "rx_packets",
}

_TX_FILES: dict[TxCounter, str] = {
    TxCounter.ABORTED_ERRORS: "tx_aborted_errors",
    TxCounter.BYTES: "tx_bytes",
    TxCounter.CARRIER_ERRORS: "tx_carrier_errors",
    TxCounter.COMPRESSED: "tx_compressed",
    TxCounter.DROPPED: "tx_dropped",
    TxCounter.ERRORS: "tx_errors",
    TxCounter.FIFO_ERRORS: "tx_fifo_errors",
    TxCounter.HEARTBEAT_ERRORS: "tx_heartbeat_errors",
    TxCounter.PACKETS: "tx_packets",
    TxCounter.WINDOW_ERRORS: "tx_window_errors",
}


@dataclass(frozen=True)
class CounterCatalog:
    """Read-only mapping from counter kind to statistics file name."""

    rx: Mapping[RxCounter, str]
    tx: Mapping[TxCounter, str]

    @classmethod
    def build(cls) -> CounterCatalog:
        """Build a catalog holding every receive and transmit counter."""
        log.debug("Building counter to filename catalog")
        return cls(
            rx=MappingProxyType(dict(_RX_FILES)),
            tx=MappingProxyType(dict(_TX_FILES)),
        )

    def rx_filename(self, counter: RxCounter) -> str:
        return self.rx[counter]

    def tx_filename(self, counter: TxCounter) -> str:
        return self.tx[counter]


_default: CounterCatalog | None = None
_default_lock = threading.Lock()


def default_catalog() -> CounterCatalog:
    """Return the process-wide catalog, building it on first use.

    Safe to call from several threads at once: the catalog is built exactly
    once.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = CounterCatalog.build()
    return _default
