"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import pytest

from weni.collector import SystemCollector
from weni.config import CollectorConfig
from weni.platform_info import PlatformProfile


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "windows: mark test as Windows-specific"
    )
    config.addinivalue_line(
        "markers", "linux: mark test as Linux-specific"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (queries the real OS)"
    )


@pytest.fixture
def collector_config(tmp_path):
    """Collector config pointing the hosts file at a temporary path."""
    return CollectorConfig(settle_delay_s=0.2, hosts_path=str(tmp_path / "hosts"))


@pytest.fixture
def linux_profile():
    return PlatformProfile.for_platform("Linux", "x86_64")


@pytest.fixture
def sleeps():
    """Records every settle delay requested by a collector."""
    return []


@pytest.fixture
def collector(collector_config, linux_profile, sleeps):
    """Create a SystemCollector whose settle delay is recorded, not slept."""
    return SystemCollector(collector_config, linux_profile, sleep=sleeps.append)
