"""Tests for interface discovery."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from netcounters.config import SamplerConfig
from netcounters.discovery import discover_interfaces


@pytest.fixture()
def fake_net(tmp_path: Path) -> Path:
    """Create a fake /sys/class/net tree."""
    for iface in ["eth0", "wlan0", "lo"]:
        stats_dir = tmp_path / iface / "statistics"
        stats_dir.mkdir(parents=True)
        (stats_dir / "rx_bytes").write_text("0\n")

    # Interface directory without statistics
    (tmp_path / "dummy0").mkdir()
    # Stray file at the top level
    (tmp_path / "bonding_masters").write_text("")
    return tmp_path


class TestDiscoverInterfaces:
    """Tests for discover_interfaces()."""

    def test_discovers_interfaces(self, fake_net: Path) -> None:
        config = SamplerConfig(sysfs_root=fake_net)
        assert discover_interfaces(config, skip_virtual=False) == ["eth0", "wlan0"]

    def test_includes_loopback_when_requested(self, fake_net: Path) -> None:
        config = SamplerConfig(sysfs_root=fake_net)
        ifaces = discover_interfaces(config, skip_loopback=False, skip_virtual=False)
        assert ifaces == ["eth0", "lo", "wlan0"]

    def test_skips_missing_statistics(self, fake_net: Path) -> None:
        config = SamplerConfig(sysfs_root=fake_net)
        assert "dummy0" not in discover_interfaces(config, skip_virtual=False)

    def test_uses_configured_stats_subdir(self, fake_net: Path) -> None:
        (fake_net / "dummy0" / "stats").mkdir()
        config = SamplerConfig(sysfs_root=fake_net, stats_subdir="stats")
        assert discover_interfaces(config, skip_virtual=False) == ["dummy0"]

    def test_skips_virtual(self, tmp_path: Path) -> None:
        devices = tmp_path / "devices"
        (devices / "virtual" / "net" / "veth0" / "statistics").mkdir(parents=True)
        (devices / "pci0000:00" / "net" / "eth0" / "statistics").mkdir(parents=True)
        net = tmp_path / "class" / "net"
        net.mkdir(parents=True)
        (net / "veth0").symlink_to(devices / "virtual" / "net" / "veth0")
        (net / "eth0").symlink_to(devices / "pci0000:00" / "net" / "eth0")
        config = SamplerConfig(sysfs_root=net)

        assert discover_interfaces(config) == ["eth0"]
        assert discover_interfaces(config, skip_virtual=False) == ["eth0", "veth0"]

    def test_unresolvable_link_is_kept(self, fake_net: Path) -> None:
        config = SamplerConfig(sysfs_root=fake_net)
        with patch(
            "netcounters.discovery.os.path.realpath", side_effect=OSError(2, "gone")
        ):
            assert discover_interfaces(config) == ["eth0", "wlan0"]

    def test_nonexistent_root(self, tmp_path: Path) -> None:
        config = SamplerConfig(sysfs_root=tmp_path / "nonexistent")
        assert discover_interfaces(config) == []

    def test_root_is_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "net").write_text("")
        config = SamplerConfig(sysfs_root=tmp_path / "net")
        assert discover_interfaces(config) == []
