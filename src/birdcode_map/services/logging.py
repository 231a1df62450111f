"""Root logger setup for the CLI and ad-hoc flow runs."""

from __future__ import annotations

import logging

# HTTP clients used by the Prefect API client; INFO from them drowns build output.
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def configure_logging(*, debug: bool = False, force: bool = False) -> None:
    """Send module logs to stderr as ``LEVEL logger: message``.

    ``debug`` lowers the root level to DEBUG and lets the HTTP client loggers
    through. ``force`` replaces handlers installed by an earlier call.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)-7s %(name)s: %(message)s",
        force=force,
    )
    quiet_level = logging.DEBUG if debug else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
