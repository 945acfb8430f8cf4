import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = "/data/logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10_000_000  # 10MB
LOG_BACKUPS = 5


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(app_name: str = "remindme", log_dir: Optional[Path] = None, level: int = logging.INFO) -> None:
    """Configure application logging

    Logs always go to the console. They also go to `<app_name>.log`, with
    errors copied to `<app_name>-error.log`, when the log directory can be
    written to; otherwise a warning is logged and the console is all there is.

    Args:
        app_name: Name to use for log files
        log_dir: Directory for log files, $LOG_DIR or /data/logs by default
        level: Level of the root logger and the main handlers

    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # the discovery client logs every request at INFO
    logging.getLogger("googleapiclient.discovery").setLevel(logging.WARNING)

    log_dir = Path(log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIR))
    file_handlers: list[logging.Handler] = []
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handlers.append(_rotating_handler(log_dir / f"{app_name}.log", level, formatter))
        file_handlers.append(_rotating_handler(log_dir / f"{app_name}-error.log", logging.ERROR, formatter))
    except OSError as e:
        for handler in file_handlers:
            handler.close()
        logging.getLogger(__name__).warning(f"Logging to console only, cannot write logs to {log_dir}: {e}")
        return

    for handler in file_handlers:
        root_logger.addHandler(handler)
