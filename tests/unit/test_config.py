"""Tests for operator configuration."""

from __future__ import annotations

from designate_operator.config import DEFAULT_CONTAINER_IMAGE, OperatorConfig


class TestOperatorConfig:
    """Test cases for OperatorConfig.from_env."""

    def test_defaults(self, monkeypatch):
        for name in (
            "METRICS_PORT",
            "LOG_LEVEL",
            "MAX_WORKERS",
            "K8S_REQUEST_TIMEOUT",
            "DEFAULT_CONTAINER_IMAGE",
            "EXPOSE_ROUTES",
            "REQUEUE_SHORT_SECONDS",
            "REQUEUE_INPUT_SECONDS",
            "REQUEUE_KEYSTONE_SECONDS",
            "REQUEUE_IMMEDIATE_SECONDS",
            "DRIFT_CHECK_INTERVAL_SECONDS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = OperatorConfig.from_env()

        assert config.metrics_port == 8080
        assert config.log_level == "INFO"
        assert config.max_workers == 4
        assert config.request_timeout == 30.0
        assert config.default_container_image == DEFAULT_CONTAINER_IMAGE
        assert config.expose_routes is True
        assert config.requeue_short_seconds == 5.0
        assert config.requeue_input_seconds == 10.0
        assert config.requeue_keystone_seconds == 10.0
        assert config.requeue_immediate_seconds == 1.0
        assert config.drift_check_interval_seconds == 300.0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("METRICS_PORT", "9090")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("EXPOSE_ROUTES", "false")
        monkeypatch.setenv("REQUEUE_INPUT_SECONDS", "30")
        monkeypatch.setenv("DRIFT_CHECK_INTERVAL_SECONDS", "60")

        config = OperatorConfig.from_env()

        assert config.metrics_port == 9090
        assert config.log_level == "DEBUG"
        assert config.expose_routes is False
        assert config.requeue_input_seconds == 30.0
        assert config.drift_check_interval_seconds == 60.0
