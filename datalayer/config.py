import logging
import os
from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class PixelConfig:
    """Настройки транслятора и превью"""

    event_prefix: str = "vtex:"
    log_level: str = "WARNING"
    sample_events_path: str = "data/sample_events.json"


DEFAULT_CONFIG = PixelConfig()


def load_config(env: Mapping[str, str] = os.environ) -> PixelConfig:
    """Конфигурация из переменных окружения, пропущенные берутся по умолчанию"""
    return PixelConfig(
        event_prefix=env.get("DATALAYER_EVENT_PREFIX", DEFAULT_CONFIG.event_prefix),
        log_level=env.get("DATALAYER_LOG_LEVEL", DEFAULT_CONFIG.log_level).upper(),
        sample_events_path=env.get(
            "DATALAYER_SAMPLE_EVENTS", DEFAULT_CONFIG.sample_events_path
        ),
    )


def configure_logging(config: PixelConfig = DEFAULT_CONFIG) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
