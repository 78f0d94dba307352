import logging
import re
from typing import Iterable, Union


_PRIVATE_FIELDS = re.compile(
    r"(sk_b64|secret|private_key|signing_key)(\s*[=:]\s*)\S+", re.IGNORECASE
)


class RedactingFilter(logging.Filter):
    """Scrub private signing-key material from log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except Exception:
            # Leave malformed records for logging's own error handling
            return True
        scrubbed = _PRIVATE_FIELDS.sub(r"\1\2***", msg)
        if scrubbed != msg:
            record.msg = scrubbed
            record.args = None
        return True


def setup_logging(
    level: Union[int, str] = logging.INFO,
    loggers: Iterable[str] = ("hashtree_api", "hashtree_cli", "uvicorn", "uvicorn.access"),
) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    f = RedactingFilter()
    for name in loggers:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.addFilter(f)
