# -----------------------------------------------------------------------------
# careergenie/utils/logger.py — Shared application logger
# -----------------------------------------------------------------------------
# Messages are short event names ("llm_used", "provider_failed"); details go in
# extra= and are rendered as key=value pairs after the message.
# -----------------------------------------------------------------------------

import logging
import os
import sys

LOGGER_NAME = "careergenie"

# Attributes every LogRecord has; anything else came in through extra=.
_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        if not fields:
            return base
        pairs = " ".join(f"{k}={v!r}" if isinstance(v, str) else f"{k}={v}" for k, v in sorted(fields.items()))
        return f"{base} {pairs}"


def _build_logger() -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            KeyValueFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", "%Y-%m-%d %H:%M:%S")
        )
        log.addHandler(handler)
    log.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    return log


logger = _build_logger()
