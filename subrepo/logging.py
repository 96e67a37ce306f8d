"""Debug diagnostics for subrepo, rendered on the same rich console as status output.

Status lines (cloning, installing, building) are printed directly on the
console. Loggers carry the quieter detail: resolved refs, link targets,
skipped head reads. They only show up with ``--verbose``.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "subrepo"


def get_logger(component: str) -> logging.Logger:
    """Logger for one component, e.g. ``get_logger("heads")`` -> ``subrepo.heads``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def configure_logging(*, verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Send subrepo records to ``console``; debug records only when ``verbose``.

    Calling it again replaces the previous handler, so repeated CLI
    invocations in one process do not duplicate lines.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.addHandler(
        RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            markup=False,
        )
    )
    return logger
