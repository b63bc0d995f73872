"""Logging helpers for the kubeview CLI."""

from __future__ import annotations

import logging

ROOT_LOGGER = "kubeview"


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger whose records reach stderr through the package root.

    Standard output carries the action result, so the handler is attached
    once to the ``kubeview`` root and writes to stderr only.
    """

    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Adjust the package log level for the current run."""

    logger = get_logger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


__all__ = ["get_logger", "configure_logging"]
