from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

_DEFAULT_REGISTRY_RESERVE = 4


def _bool_from_env(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_optional_int(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value '{raw}'") from exc


def _infer_registry_reserve_from_env() -> int:
    reserve = _parse_optional_int(os.getenv("SAFELIST_REGISTRY_RESERVE"))
    if reserve is None:
        return _DEFAULT_REGISTRY_RESERVE
    if reserve < 1:
        raise ValueError(
            f"Unsupported registry reserve '{reserve}'. Expected a positive integer."
        )
    return reserve


@dataclass(frozen=True)
class RuntimeConfig:
    log_level: str
    enable_numba: bool
    registry_reserve: int

    @property
    def adjustment_backend(self) -> str:
        return "numba" if self.enable_numba else "numpy"


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("safelist")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter("%(levelname)s %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)


@lru_cache(maxsize=None)
def runtime_config() -> RuntimeConfig:
    log_level = os.getenv("SAFELIST_LOG_LEVEL", "INFO").upper()
    enable_numba = _bool_from_env(os.getenv("SAFELIST_ENABLE_NUMBA"), default=False)
    registry_reserve = _infer_registry_reserve_from_env()

    config = RuntimeConfig(
        log_level=log_level,
        enable_numba=enable_numba,
        registry_reserve=registry_reserve,
    )
    _configure_logging(config.log_level)
    return config


def reset_runtime_config_cache() -> None:
    runtime_config.cache_clear()
