from __future__ import annotations

import logging

from benchdesk.config import get_config


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_config().LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
