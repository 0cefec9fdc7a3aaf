# questboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the terminal readable while rich output is on screen:
    - questboard logs pass (the handler level decides)
    - Python warnings (captured as 'py.warnings') only at ERROR+
    - any other third party only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "questboard" or record.name.startswith("questboard."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path | None = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler on stderr, filtered, WARNING by default so it stays
      out of the way of command output
    - File handler (when log_dir is given) with everything for debugging

    Call this ONCE, from the entry point, before the board is loaded.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir is not None:
        log_dir = Path(log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_dir / "questboard.log"), encoding="utf-8")
        except OSError as e:
            # A read-only home must not stop the board from starting
            logging.getLogger(__name__).warning("File logging disabled: %s", e)
        else:
            fh.setLevel(file_level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)
