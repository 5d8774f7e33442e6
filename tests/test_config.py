import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import logging
from datalayer.config import DEFAULT_CONFIG, PixelConfig, configure_logging, load_config


def test_load_config_defaults():
    assert load_config({}) == DEFAULT_CONFIG
    assert DEFAULT_CONFIG.event_prefix == "vtex:"


def test_load_config_from_env():
    config = load_config(
        {
            "DATALAYER_EVENT_PREFIX": "shop:",
            "DATALAYER_LOG_LEVEL": "debug",
            "DATALAYER_SAMPLE_EVENTS": "/tmp/events.json",
        }
    )
    assert config == PixelConfig(
        event_prefix="shop:", log_level="DEBUG", sample_events_path="/tmp/events.json"
    )


def test_configure_logging_does_not_fail_on_unknown_level():
    configure_logging(PixelConfig(log_level="NOPE"))
    assert logging.getLogger("datalayer").getEffectiveLevel() >= 0
