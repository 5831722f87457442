"""lazy-latex - LLM-assisted math typing for LaTeX and Markdown.

Inline ``;;...;;`` markers are turned into inline math, ``;;;...;;;`` into
display math and ``;;;;...;;;;`` into free generated text.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.3.0"


def _setup_logging(log_dir: Path | None = None, *, verbose: bool = False) -> None:
    """Configure logging to the console and, optionally, a rotating file.

    Args:
        log_dir: Directory for the rotating log file. ``None`` disables file
            logging.
        verbose: Show DEBUG messages on the console.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"lazylatex.{os.getpid()}.log"

        # File handler - detailed logging with rotation (10MB, keep 5 backups)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # Silence noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if log_dir is not None:
        logging.debug("Logging configured. Log file: %s", log_file.absolute())
