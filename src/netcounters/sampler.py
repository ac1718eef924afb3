"""Per-interface counter sampler over sysfs statistics files.

Keeps one open handle per selected counter file under
/sys/class/net/{iface}/statistics/ and re-reads each from offset 0 on
refresh.  The kernel regenerates these pseudo-files on every read, so the
handles stay open for the lifetime of the sampler instead of being reopened
per sample.

Not thread-safe: callers sharing a sampler must serialize access.
"""

from __future__ import annotations

import io
import logging
import os
import re
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeVar

from .catalog import CounterCatalog, RxCounter, TxCounter, default_catalog
from .config import SamplerConfig
from .errors import (
    CounterParseError,
    CounterReadError,
    CounterUnavailableError,
    InterfaceNotFoundError,
    SamplerClosedError,
)

if TYPE_CHECKING:
    from types import TracebackType

log = logging.getLogger(__name__)

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1

# strtol(3) with base 10: leading whitespace, optional sign, digits
_DECIMAL_RE = re.compile(rb"\s*([+-]?\d+)")

_C = TypeVar("_C", RxCounter, TxCounter)


def parse_counter(raw: bytes) -> int:
    """Parse the contents of a counter file into an unsigned 64-bit value.

    Accepts what ``strtol(..., 10)`` would: optional leading whitespace and
    sign, then decimal digits.  Anything after the digits (normally the
    kernel's trailing newline) is ignored.  Negative values are
    reinterpreted as unsigned 64-bit.

    Raises:
        ValueError: If no digits are found or the value does not fit in a
            signed 64-bit integer.
    """
    match = _DECIMAL_RE.match(raw)
    if match is None:
        raise ValueError(f"no decimal value in {raw!r}")
    value = int(match.group(1))
    if not (_I64_MIN <= value <= _I64_MAX):
        raise ValueError(f"value {value} out of 64-bit range")
    return value & _U64_MASK


@dataclass
class _Tracked:
    """An open counter file and the last value parsed from it."""

    handle: io.FileIO
    path: Path
    value: int = 0


@dataclass(frozen=True)
class ReceiveSnapshot:
    """Receive counters as of the last refresh; untracked counters are 0."""

    bytes: int = 0
    compressed: int = 0
    crc_errors: int = 0
    dropped: int = 0
    errors: int = 0
    fifo_errors: int = 0
    frame_errors: int = 0
    length_errors: int = 0
    missed_errors: int = 0
    over_errors: int = 0
    packets: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class TransmitSnapshot:
    """Transmit counters as of the last refresh; untracked counters are 0."""

    aborted_errors: int = 0
    bytes: int = 0
    carrier_errors: int = 0
    compressed: int = 0
    dropped: int = 0
    errors: int = 0
    fifo_errors: int = 0
    heartbeat_errors: int = 0
    packets: int = 0
    window_errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class _CounterSet(Generic[_C]):
    """Open counter files for one direction, keyed by counter kind."""

    def __init__(self) -> None:
        self._entries: dict[_C, _Tracked] = {}

    def __contains__(self, counter: object) -> bool:
        return counter in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, counter: _C, entry: _Tracked) -> None:
        self._entries[counter] = entry

    def items(self) -> list[tuple[_C, _Tracked]]:
        return list(self._entries.items())

    def keys(self) -> frozenset[_C]:
        return frozenset(self._entries)

    def value(self, counter: _C) -> int:
        """Return the cached value, or 0 if the counter is not tracked."""
        entry = self._entries.get(counter)
        return 0 if entry is None else entry.value

    def release(self) -> list[tuple[_C, OSError]]:
        """Close every handle.  Entries and their cached values are kept.

        Returns the counters whose close failed, so the caller can report
        them; a failed close does not stop the remaining ones.
        """
        failures: list[tuple[_C, OSError]] = []
        for counter, entry in self._entries.items():
            try:
                entry.handle.close()
            except OSError as e:
                failures.append((counter, e))
        return failures


class InterfaceSampler:
    """Sample kernel statistics counters for one network interface.

    Usage::

        with InterfaceSampler("eth0") as sampler:
            sampler.select_rx({RxCounter.BYTES, RxCounter.PACKETS})
            sampler.refresh()
            print(sampler.rx_bytes())

    Construction only checks that the interface exists; counter files are
    opened by :meth:`select_rx` / :meth:`select_tx` and read by
    :meth:`refresh`.  Snapshot accessors never perform I/O.

    Counters that were never selected read as 0, which cannot be told apart
    from a tracked counter whose value is 0.  Use :attr:`tracked_rx` /
    :attr:`tracked_tx` when the distinction matters.
    """

    def __init__(
        self,
        interface: str | None = None,
        *,
        config: SamplerConfig | None = None,
        catalog: CounterCatalog | None = None,
    ) -> None:
        self._config = config if config is not None else SamplerConfig()
        self._catalog = catalog if catalog is not None else default_catalog()
        self._interface = (
            interface if interface is not None else self._config.default_interface
        )
        self._rx: _CounterSet[RxCounter] = _CounterSet()
        self._tx: _CounterSet[TxCounter] = _CounterSet()

        interface_path = self._config.sysfs_root / self._interface
        self._probe_interface(interface_path)
        self._closed = False

        self._stats_path = interface_path / self._config.stats_subdir
        log.debug("Got interface stats path as '%s'", self._stats_path)

    def _probe_interface(self, interface_path: Path) -> None:
        """Open and close the interface directory to confirm it exists."""
        try:
            with os.scandir(interface_path):
                pass
        except OSError as e:
            raise InterfaceNotFoundError(
                f"Cannot find/access network stats path '{interface_path}' "
                f"for interface '{self._interface}': {e.strerror}",
                interface=self._interface,
                path=interface_path,
            ) from e

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def interface(self) -> str:
        return self._interface

    @property
    def stats_path(self) -> Path:
        """Path to the interface's statistics directory."""
        return self._stats_path

    @property
    def tracked_rx(self) -> frozenset[RxCounter]:
        return self._rx.keys()

    @property
    def tracked_tx(self) -> frozenset[TxCounter]:
        return self._tx.keys()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_rx(self, counters: Iterable[RxCounter]) -> None:
        """Start tracking the given receive counters.

        Counters already tracked are skipped.  If a counter file cannot be
        opened, :class:`CounterUnavailableError` is raised; counters opened
        earlier in the same call stay tracked.
        """
        self._select(self._rx, counters, self._catalog.rx_filename)

    def select_tx(self, counters: Iterable[TxCounter]) -> None:
        """Start tracking the given transmit counters. See :meth:`select_rx`."""
        self._select(self._tx, counters, self._catalog.tx_filename)

    def _select(
        self,
        tracked: _CounterSet[_C],
        counters: Iterable[_C],
        filename_for: Callable[[_C], str],
    ) -> None:
        self._check_open()
        for counter in counters:
            if counter in tracked:
                log.debug("For '%s': already monitoring -- ignoring request", counter)
                continue

            path = self._stats_path / filename_for(counter)
            log.debug("For '%s': opening stats file @ '%s'", counter, path)
            try:
                handle = io.FileIO(path, "r")
            except OSError as e:
                raise CounterUnavailableError(
                    f"For '{counter}': cannot open stats file '{path}': {e.strerror}",
                    interface=self._interface,
                    counter=counter.display_name,
                    path=path,
                ) from e

            log.debug("For '%s': got file descriptor as %d", counter, handle.fileno())
            tracked.add(counter, _Tracked(handle=handle, path=path))

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Re-read every tracked counter, receive side first."""
        self.refresh_rx()
        self.refresh_tx()

    def refresh_rx(self) -> None:
        """Re-read every tracked receive counter.

        Raises:
            CounterReadError: If seeking or reading a counter file fails or
                returns no data.
            CounterParseError: If a counter file does not hold a decimal
                integer.

        The first failure aborts the pass.  The failing counter keeps its
        previous value.
        """
        self._check_open()
        for counter, entry in self._rx.items():
            entry.value = self._read_one(counter, entry)

    def refresh_tx(self) -> None:
        """Re-read every tracked transmit counter. See :meth:`refresh_rx`."""
        self._check_open()
        for counter, entry in self._tx.items():
            entry.value = self._read_one(counter, entry)

    def _read_one(self, counter: RxCounter | TxCounter, entry: _Tracked) -> int:
        """Rewind, read and parse a single counter file."""
        fd = entry.handle.fileno()
        read_size = self._config.read_size

        try:
            entry.handle.seek(0, os.SEEK_SET)
        except OSError as e:
            raise CounterReadError(
                f"For '{counter}': lseek failed on fd {fd}: {e.strerror}",
                interface=self._interface,
                counter=counter.display_name,
                path=entry.path,
            ) from e

        try:
            raw = entry.handle.read(read_size)
        except OSError as e:
            raise CounterReadError(
                f"For '{counter}': read failed on fd {fd}: {e.strerror}",
                interface=self._interface,
                counter=counter.display_name,
                path=entry.path,
            ) from e

        if not raw:
            raise CounterReadError(
                f"For '{counter}': read 0 bytes from fd {fd}",
                interface=self._interface,
                counter=counter.display_name,
                path=entry.path,
            )
        if len(raw) == read_size:
            log.warning(
                "For '%s': actually read %d bytes from fd %d", counter, len(raw), fd
            )

        try:
            return parse_counter(raw)
        except ValueError as e:
            raise CounterParseError(
                f"For '{counter}': unable to convert network stat value "
                f"{raw!r} from fd {fd}: {e}",
                interface=self._interface,
                counter=counter.display_name,
                path=entry.path,
            ) from e

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def rx_snapshot(self) -> ReceiveSnapshot:
        """Return all receive counters as of the last refresh."""
        return ReceiveSnapshot(**{c.field: self._rx.value(c) for c in RxCounter})

    def tx_snapshot(self) -> TransmitSnapshot:
        """Return all transmit counters as of the last refresh."""
        return TransmitSnapshot(**{c.field: self._tx.value(c) for c in TxCounter})

    def rx_bytes(self) -> int:
        return self._rx.value(RxCounter.BYTES)

    def rx_packets(self) -> int:
        return self._rx.value(RxCounter.PACKETS)

    def tx_bytes(self) -> int:
        return self._tx.value(TxCounter.BYTES)

    def tx_packets(self) -> int:
        return self._tx.value(TxCounter.PACKETS)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise SamplerClosedError(
                f"Sampler for interface '{self._interface}' is closed",
                interface=self._interface,
            )

    def close(self) -> None:
        """Release every open counter file.  Safe to call more than once.

        Cached values stay readable through the snapshot accessors.
        """
        if self._closed:
            return
        self._closed = True
        log.info("Shutting down sampler for '%s'", self._interface)

        for counter, e in self._rx.release() + self._tx.release():
            log.warning("For '%s': error closing stats file: %s", counter, e)

    def __del__(self) -> None:
        # __init__ may have raised before any state was set
        if getattr(self, "_closed", True):
            return
        self.close()

    def __enter__(self) -> InterfaceSampler:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(interface={self._interface!r}, "
            f"rx={len(self._rx)}, tx={len(self._tx)}, closed={self._closed})"
        )
