from pathlib import Path
import logging
import sys
from typing import Optional, TextIO
from datetime import datetime


def setup_logging(
    logs_dir: Optional[str | Path] = None,
    log_file_name: str = "server.log",
    level: int | str = logging.INFO,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure root logging to the console and a file under `logs_dir`.

    Idempotent: calling multiple times won't add duplicate handlers.
    The console handler writes to stderr by default because stdout carries the
    MCP stdio transport. Returns a module-level logger for callers to use.
    """
    if logs_dir is None:
        logs_dir = Path(__file__).resolve().parent.parent / "logs"
    else:
        logs_dir = Path(logs_dir)
    if stream is None:
        stream = sys.stderr
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    file_logging = True
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        file_logging = False

    # Each run writes to its own timestamped file
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base = Path(log_file_name).stem
    ext = Path(log_file_name).suffix or ".log"
    log_file = logs_dir / f"{base}_{timestamp}{ext}"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    if file_logging and not any(
        isinstance(h, logging.FileHandler) and Path(h.baseFilename).resolve().parent == logs_dir.resolve()
        for h in root_logger.handlers
    ):
        try:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            fh.setLevel(level)
            root_logger.addHandler(fh)
        except OSError:
            # Console only when the file cannot be opened
            pass

    stream_exists = any(
        type(h) is logging.StreamHandler and getattr(h, "stream", None) is stream
        for h in root_logger.handlers
    )
    if not stream_exists:
        sh = logging.StreamHandler(stream)
        sh.setFormatter(formatter)
        sh.setLevel(level)
        root_logger.addHandler(sh)

    return logging.getLogger(__name__)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Helper to get a logger by name; falls back to module logger."""
    return logging.getLogger(name) if name else logging.getLogger(__name__)
