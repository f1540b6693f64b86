from __future__ import annotations

import logging


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; stdout is reserved for assistant text."""
    root = logging.getLogger()
    if root.handlers:
        return

    if verbose:
        level = logging.DEBUG
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "[%(levelname)s] %(message)s"
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))
    root.addHandler(console)

    for noisy in ("urllib3", "requests"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
