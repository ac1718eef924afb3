"""Sample per-interface network counters from sysfs."""

from .catalog import CounterCatalog, RxCounter, TxCounter, default_catalog
from .config import SamplerConfig
from .discovery import discover_interfaces
from .errors import (
    CounterParseError,
    CounterReadError,
    CounterUnavailableError,
    ErrorKind,
    InterfaceNotFoundError,
    SamplerClosedError,
    SamplerError,
)
from .reader import NetworkCounterReader
from .sampler import InterfaceSampler, ReceiveSnapshot, TransmitSnapshot, parse_counter

__all__ = [
    "CounterCatalog",
    "CounterParseError",
    "CounterReadError",
    "CounterUnavailableError",
    "ErrorKind",
    "InterfaceNotFoundError",
    "InterfaceSampler",
    "NetworkCounterReader",
    "ReceiveSnapshot",
    "RxCounter",
    "SamplerClosedError",
    "SamplerConfig",
    "SamplerError",
    "TransmitSnapshot",
    "TxCounter",
    "default_catalog",
    "discover_interfaces",
    "parse_counter",
]
