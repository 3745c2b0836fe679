import logging
import os
import re
import sys
from typing import Any, Optional

LOG_LEVEL_ENV = "SHOPIFY_LOG_LEVEL"

# Fields an Admin API log line may carry, in output order
LOG_EXTRA_FIELDS = (
    "request_id",
    "shop",
    "tool",
    "method",
    "endpoint",
    "api_version",
    "attempt",
    "status",
    "duration_ms",
    "error_type",
)

# Admin API access tokens (shpat_, shpca_, shppa_, shpss_) and bearer headers
TOKEN_PATTERN = re.compile(r"(shp(?:at|ca|pa|ss)_)[0-9A-Za-z]+|(Bearer\s+)\S+")

# httpx logs every request line at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def redact_tokens(text: str) -> str:
    return TOKEN_PATTERN.sub(lambda m: (m.group(1) or m.group(2)) + "***", text)


class LogfmtFormatter(logging.Formatter):
    """logfmt lines for Admin API events; access tokens never reach the output."""

    def format(self, record: logging.LogRecord) -> str:
        kv = [f"level={record.levelname.lower()}", f"logger={record.name}"]

        msg = record.getMessage()
        if msg:
            kv.append(f"event={self._fmt_val(msg)}")

        kv.extend(
            f"{key}={self._fmt_val(getattr(record, key))}"
            for key in LOG_EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )

        if record.exc_info and record.exc_info[0] is not None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")

        return " ".join(kv)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (int, float, bool)):
            return str(val)
        s = redact_tokens(str(val))
        if " " in s or "=" in s:
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: Optional[str] = None) -> None:
    """
    Route root logging to stderr in logfmt.
    stdout stays free for the MCP stdio protocol. The level comes from
    ``level``, then ``SHOPIFY_LOG_LEVEL``, then INFO.
    """
    level = level or os.getenv(LOG_LEVEL_ENV) or "INFO"

    root = logging.getLogger()
    # Avoid duplicate handlers if called twice
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = [
    "setup_logging",
    "redact_tokens",
    "LogfmtFormatter",
    "LOG_EXTRA_FIELDS",
    "LOG_LEVEL_ENV",
]
