from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"


def _build_logger() -> logging.Logger:
    log = logging.getLogger("toll_summary")
    if log.handlers:
        return log

    level_name = os.environ.get("TOLL_SUMMARY_LOG_LEVEL", "INFO").upper()
    log.setLevel(getattr(logging, level_name, logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(handler)
    log.propagate = False
    return log


log = _build_logger()
