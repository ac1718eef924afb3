"""Find the interfaces a sampler can be bound to.

An interface qualifies when its entry under the configured sysfs root holds
the statistics subdirectory the sampler reads counters from.
"""

from __future__ import annotations

import logging
import os

from .config import SamplerConfig

log = logging.getLogger(__name__)

_LOOPBACK = "lo"


def _is_virtual(entry: os.DirEntry[str]) -> bool:
    """True if the interface's sysfs link points into /devices/virtual/."""
    try:
        target = os.path.realpath(entry.path, strict=True)
    except (OSError, ValueError):
        return False
    return "/devices/virtual/" in target


def discover_interfaces(
    config: SamplerConfig | None = None,
    *,
    skip_loopback: bool = True,
    skip_virtual: bool = True,
) -> list[str]:
    """Return the sorted names of interfaces that expose counter files.

    Args:
        config: Supplies ``sysfs_root`` and ``stats_subdir``; defaults to
            :class:`SamplerConfig`'s defaults.
        skip_loopback: Exclude ``lo``.
        skip_virtual: Exclude bridges, veth pairs and other interfaces
            whose sysfs entry resolves under /sys/devices/virtual/.

    A missing or unreadable sysfs root yields an empty list.
    """
    config = config if config is not None else SamplerConfig()

    try:
        entries = list(os.scandir(config.sysfs_root))
    except OSError as e:
        log.debug("Cannot list interfaces under '%s': %s", config.sysfs_root, e)
        return []

    found: list[str] = []
    for entry in entries:
        if not entry.is_dir():
            continue
        if skip_loopback and entry.name == _LOOPBACK:
            continue
        if not os.path.isdir(os.path.join(entry.path, config.stats_subdir)):
            log.debug("Skipping '%s': no %s directory", entry.name, config.stats_subdir)
            continue
        if skip_virtual and _is_virtual(entry):
            log.debug("Skipping virtual interface '%s'", entry.name)
            continue
        found.append(entry.name)

    return sorted(found)
