"""Loggers for `markupruns`.

`logger` carries events a caller may want to know about, like a link URL rejected for its
scheme. `trace_logger` carries parse diagnostics (segment and fragment counts, discarded input,
ignored tag-style entries) at the `DETAIL` level, which sits between DEBUG and INFO. The library
never configures handlers.
"""

import logging

logger = logging.getLogger("markupruns")
trace_logger = logging.getLogger("markupruns.trace")

DETAIL = 15
logging.addLevelName(DETAIL, "DETAIL")


def detail(self: logging.Logger, message: str, *args, **kws) -> None:
    """Log `message` at the DETAIL level, e.g. `trace_logger.detail("parsed %d", n)`."""
    if self.isEnabledFor(DETAIL):
        self._log(DETAIL, message, args, **kws)


logging.Logger.detail = detail  # type: ignore
