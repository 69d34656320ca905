"""Engine factory and process setup."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from texsizer.config import settings
from texsizer.engine.batch import BatchAnalyzer
from texsizer.engine.config import EngineConfig
from texsizer.engine.registry import get_registry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    load_dotenv()
    level = level or settings.texsizer_log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def create_engine(config: EngineConfig | None = None) -> BatchAnalyzer:
    """Batch analyzer for ``config``, or for the preset named in settings."""
    if config is None:
        config = EngineConfig.from_preset(
            settings.texsizer_preset,
            max_workers=settings.texsizer_max_workers,
        )

    registry = get_registry()
    logger.debug("Engine: %d analyzers registered, strategy %s", registry.count, config.strategy.value)

    return BatchAnalyzer(config)

