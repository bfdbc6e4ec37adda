import logging

import structlog
from structlog.testing import capture_logs

from hookbus.config import HookBusSettings
from hookbus.logging_config import configure_from_settings, configure_logging, get_logger


def _capture_configure(monkeypatch):
    captured = {}
    monkeypatch.setattr(structlog, "configure", lambda **kw: captured.update(kw))
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: captured.update(basic=kw))
    return captured


def test_console_renderer_by_default(monkeypatch):
    captured = _capture_configure(monkeypatch)
    configure_logging()

    assert isinstance(captured["processors"][-1], structlog.dev.ConsoleRenderer)
    assert captured["basic"]["level"] == logging.INFO


def test_json_renderer_from_settings(monkeypatch):
    captured = _capture_configure(monkeypatch)
    configure_from_settings(HookBusSettings(log_level="debug", json_logs=True))

    assert isinstance(captured["processors"][-1], structlog.processors.JSONRenderer)
    assert captured["basic"]["level"] == logging.DEBUG


def test_get_logger_accepts_key_value_events():
    logger = get_logger("hookbus.test")
    with capture_logs() as logs:
        logger.info("listener_registered", key='["evt"]', chain_length=1)
    assert logs == [{"event": "listener_registered", "key": '["evt"]', "chain_length": 1, "log_level": "info"}]
