"""Tests for configuration loading."""
from __future__ import annotations

import logging

import pytest

from weni.config import default_config, load_config
from weni.logging_utils import TRACE_LEVEL, resolve_log_level


class TestLoadConfig:
    """Tests for the optional CFG file."""

    def test_defaults(self):
        config = default_config()

        assert config.collector.settle_delay_s == pytest.approx(0.2)
        assert config.collector.hosts_path is None
        assert config.process.top is None
        assert config.process.sort_cpu is False
        assert config.hosts.filter_comments is True
        assert config.watch.interval_s == 2

    def test_none_path_gives_defaults(self):
        assert load_config(None) == default_config()

    def test_values_read(self, tmp_path):
        cfg = tmp_path / "weni.cfg"
        cfg.write_text(
            "[collector]\n"
            "settle_delay_ms = 50\n"
            "hosts_path = /tmp/hosts\n"
            "[process]\n"
            "top = 15\n"
            "[watch]\n"
            "interval_s = 10\n"
        )

        config = load_config(cfg)

        assert config.collector.settle_delay_s == pytest.approx(0.05)
        assert config.collector.hosts_path == "/tmp/hosts"
        assert config.process.top == 15
        assert config.watch.interval_s == 10

    def test_blank_values_are_unset(self, tmp_path):
        cfg = tmp_path / "weni.cfg"
        cfg.write_text("[collector]\nhosts_path =\n[process]\ntop =\n")

        config = load_config(cfg)

        assert config.collector.hosts_path is None
        assert config.process.top is None

    def test_interval_clamped(self, tmp_path):
        cfg = tmp_path / "weni.cfg"
        cfg.write_text("[watch]\ninterval_s = 0\n")

        assert load_config(cfg).watch.interval_s == 1

    def test_invalid_top(self, tmp_path):
        cfg = tmp_path / "weni.cfg"
        cfg.write_text("[process]\ntop = 0\n")

        with pytest.raises(ValueError):
            load_config(cfg)

    @pytest.mark.parametrize(
        "content",
        [
            "top = 5\n",
            "[process]\ntop = 5\n[process]\nsort_cpu = true\n",
        ],
    )
    def test_malformed_file(self, tmp_path, content):
        cfg = tmp_path / "weni.cfg"
        cfg.write_text(content)

        with pytest.raises(ValueError, match="Invalid config file"):
            load_config(cfg)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.cfg")


class TestResolveLogLevel:
    """Tests for verbosity to level mapping."""

    def test_verbosity(self):
        assert resolve_log_level(2, "INFO") == TRACE_LEVEL
        assert resolve_log_level(1, "ERROR") == logging.DEBUG

    def test_named_levels(self):
        assert resolve_log_level(0, "error") == logging.ERROR
        assert resolve_log_level(0, "trace") == TRACE_LEVEL

    def test_unknown_level_falls_back_to_warning(self):
        assert resolve_log_level(0, "chatty") == logging.WARNING
