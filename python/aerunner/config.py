"""Settings loaded from the environment, and tsconfig.json discovery."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_NAME = "tsconfig.json"
DEFAULT_TSC = "tsc"
DEFAULT_TSC_TIMEOUT = 120.0
DEFAULT_OUTPUT_IGNORE = ("*.map", "*.d.ts", "*.tsbuildinfo")
DEFAULT_LOG_LEVEL = "WARNING"
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Settings:
    tsc: str = DEFAULT_TSC
    # None disables the timeout.
    tsc_timeout: float | None = DEFAULT_TSC_TIMEOUT
    host_path: str | None = None
    output_ignore: list[str] = field(default_factory=lambda: list(DEFAULT_OUTPUT_IGNORE))
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from AERUNNER_* environment variables.

    Invalid values are logged and replaced by their defaults.
    """
    if environ is None:
        environ = os.environ

    settings = Settings()

    tsc = environ.get("AERUNNER_TSC", "").strip()
    if tsc:
        settings.tsc = tsc

    timeout_raw = environ.get("AERUNNER_TSC_TIMEOUT", "").strip()
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError:
            logger.warning(
                "config.invalid_timeout",
                extra={"value": timeout_raw, "fallback": DEFAULT_TSC_TIMEOUT},
            )
        else:
            if timeout < 0:
                logger.warning(
                    "config.invalid_timeout",
                    extra={"value": timeout_raw, "fallback": DEFAULT_TSC_TIMEOUT},
                )
            else:
                settings.tsc_timeout = timeout or None

    host_path = environ.get("AERUNNER_HOST_PATH", "").strip()
    if host_path:
        settings.host_path = host_path

    if "AERUNNER_OUTPUT_IGNORE" in environ:
        settings.output_ignore = [
            p.strip() for p in environ["AERUNNER_OUTPUT_IGNORE"].split(",") if p.strip()
        ]

    level_raw = environ.get("AERUNNER_LOG_LEVEL", "").strip().upper()
    if level_raw:
        if level_raw in _VALID_LOG_LEVELS:
            settings.log_level = level_raw
        else:
            logger.warning(
                "config.invalid_log_level",
                extra={"value": level_raw, "fallback": DEFAULT_LOG_LEVEL},
            )

    return settings


def find_config(file_path: str) -> str | None:
    """Return the nearest tsconfig.json at or above file_path's directory.

    Returns None when no ancestor directory has one.
    """
    start = Path(os.path.abspath(file_path)).parent
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_NAME
        if candidate.is_file():
            return str(candidate)
    return None
