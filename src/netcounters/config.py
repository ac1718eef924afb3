"""Configuration for the interface counter sampler."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class SamplerConfig:
    """Filesystem layout and limits used by :class:`InterfaceSampler`."""

    # Directory holding one entry per network interface
    sysfs_root: Path = Path("/sys/class/net")

    # Per-interface subdirectory holding the counter files
    stats_subdir: str = "statistics"

    # Bytes to read from a counter file; reading this many is suspicious
    read_size: int = 32

    # Interface used when none is given
    default_interface: str = "eth0"

    def __post_init__(self) -> None:
        self.sysfs_root = Path(self.sysfs_root)
        if self.read_size < 1:
            raise ValueError(f"read_size must be positive, got {self.read_size}")
