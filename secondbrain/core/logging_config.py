"""
Logging setup for the secondbrain namespace.

Modules use logging.getLogger(__name__); configure_logging() attaches a
single stdout handler to the "secondbrain" parent logger.
"""
from __future__ import annotations

import logging
import sys
from typing import Union

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_ROOT_NAME = "secondbrain"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    root = logging.getLogger(_ROOT_NAME)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(level)

    # repeated calls only adjust the level
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
