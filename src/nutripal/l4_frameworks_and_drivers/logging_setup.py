"""File-based debug logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FILENAME = 'nutripal_debug.log'


def setup_file_logging(log_dir: Path, level: str = 'DEBUG') -> Path:
    """Send the 'nutripal' logger tree to a file in *log_dir*. Returns the log path."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = (log_dir / LOG_FILENAME).resolve()
    root = logging.getLogger('nutripal')
    for existing in root.handlers:
        if isinstance(existing, logging.FileHandler) and Path(existing.baseFilename).resolve() == log_path:
            return log_path
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    root.setLevel(level.upper())
    root.addHandler(handler)
    logging.getLogger('nutripal.app').info('Debug logging started → %s', log_path)
    return log_path
