import logging
from typing import Optional

from studio.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # provider SDKs are chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
