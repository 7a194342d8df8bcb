# src/logging_config.py
import logging
import sys
from datetime import datetime
from pathlib import Path

LOGS_DIR = Path("logs")


def setup_logging(run_type: str, level: int = logging.INFO, logs_dir: Path = LOGS_DIR) -> Path:
    """
    Configure the root logger with a console handler and a timestamped
    log file: <run_type>_YYYYMMDD_HHMMSS.log under logs_dir.
    When logging is already configured (pytest, a scheduler) only the file
    handler is added.
    """
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"{run_type}_{timestamp}.log"

    root_logger = logging.getLogger()
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    existing_files = {getattr(h, "baseFilename", None) for h in root_logger.handlers}
    if str(log_file.resolve()) not in existing_files:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    if root_logger.getEffectiveLevel() > level:
        root_logger.setLevel(level)

    logging.getLogger(__name__).info("Log file initialized: %s", log_file.resolve())
    return log_file
