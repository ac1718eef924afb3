"""Column-oriented network counter reader across several interfaces.

Wraps one :class:`InterfaceSampler` per interface and flattens their
counters into ``net_{iface}_{counter}`` columns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, ClassVar

from .catalog import CounterCatalog, RxCounter, TxCounter, default_catalog
from .discovery import discover_interfaces
from .errors import SamplerError
from .sampler import InterfaceSampler

if TYPE_CHECKING:
    from types import TracebackType

    from .config import SamplerConfig

log = logging.getLogger(__name__)


class NetworkCounterReader:
    """Read selected counters for a set of interfaces.

    When ``interfaces`` is omitted, every interface found by
    :func:`discover_interfaces` under the configured sysfs root is read.
    Repeated interface names are read once.

    Each interface produces one column per selected counter, named after the
    counter's statistics file, e.g. ``net_eth0_rx_bytes``.  Values are
    cumulative counters as reported by the kernel.  If refreshing an
    interface fails, all of that interface's columns are empty strings for
    that read; the other interfaces are unaffected.
    """

    DEFAULT_RX: ClassVar[tuple[RxCounter, ...]] = (RxCounter.BYTES, RxCounter.PACKETS)
    DEFAULT_TX: ClassVar[tuple[TxCounter, ...]] = (TxCounter.BYTES, TxCounter.PACKETS)

    def __init__(
        self,
        interfaces: Iterable[str] | None = None,
        rx: Iterable[RxCounter] = DEFAULT_RX,
        tx: Iterable[TxCounter] = DEFAULT_TX,
        *,
        config: SamplerConfig | None = None,
        catalog: CounterCatalog | None = None,
    ) -> None:
        catalog = catalog if catalog is not None else default_catalog()
        if interfaces is None:
            interfaces = discover_interfaces(config)
            log.debug("Discovered interfaces: %s", interfaces)
        # Repeated names would produce colliding columns
        interfaces = list(dict.fromkeys(interfaces))
        rx = sorted(set(rx), key=list(RxCounter).index)
        tx = sorted(set(tx), key=list(TxCounter).index)

        self._samplers: list[InterfaceSampler] = []

        try:
            for iface in interfaces:
                sampler = InterfaceSampler(iface, config=config, catalog=catalog)
                self._samplers.append(sampler)
                sampler.select_rx(rx)
                sampler.select_tx(tx)
        except BaseException:
            self.close()
            raise

        # Per sampler: (column_name, counter) in column order
        self._fields: list[list[tuple[str, RxCounter | TxCounter]]] = []
        for sampler in self._samplers:
            cols: list[tuple[str, RxCounter | TxCounter]] = []
            for r in rx:
                cols.append((f"net_{sampler.interface}_{catalog.rx_filename(r)}", r))
            for t in tx:
                cols.append((f"net_{sampler.interface}_{catalog.tx_filename(t)}", t))
            self._fields.append(cols)

    @property
    def columns(self) -> list[str]:
        """Return the column names for this reader instance."""
        return [col for cols in self._fields for col, _ in cols]

    @property
    def interfaces(self) -> list[str]:
        return [s.interface for s in self._samplers]

    def read(self) -> dict[str, int | str]:
        """Refresh every interface and return the current counter values.

        Returns:
            Dict mapping column names to cumulative counter values (int),
            or empty string for every column of an interface whose refresh
            failed.
        """
        result: dict[str, int | str] = {}
        for sampler, cols in zip(self._samplers, self._fields, strict=True):
            try:
                sampler.refresh()
            except SamplerError as e:
                log.warning(
                    "Refresh failed for '%s' (%s): %s",
                    sampler.interface,
                    e.kind.value,
                    e,
                )
                for col, _ in cols:
                    result[col] = ""
                continue

            rx = sampler.rx_snapshot()
            tx = sampler.tx_snapshot()
            for col, counter in cols:
                snap = rx if isinstance(counter, RxCounter) else tx
                result[col] = getattr(snap, counter.field)
        return result

    def close(self) -> None:
        for sampler in self._samplers:
            sampler.close()

    def __enter__(self) -> NetworkCounterReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
