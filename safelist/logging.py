"""Loggers for the ``safelist.*`` tree.

Modules log under ``safelist.<module path>`` (``safelist.core.registry``,
``safelist.traversal``, ...). Levels come from ``SAFELIST_LOG_LEVEL`` via
`safelist.config.runtime_config`, which also installs the single stream
handler on the ``safelist`` root logger.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import config as sl_config

_ROOT_LOGGER = "safelist"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``safelist`` or ``safelist.<name>`` at the configured level."""

    runtime = sl_config.runtime_config()
    logger = logging.getLogger(_ROOT_LOGGER if not name else f"{_ROOT_LOGGER}.{name}")
    logger.setLevel(runtime.log_level)
    return logger
