# src/ingestion/ingestion_logger.py
import time
from pathlib import Path

import pandas as pd

LOG_FILE = "metadata/ingest_log.csv"

LOG_COLUMNS = [
    "root",
    "checkpoint_in",
    "checkpoint_out",
    "files",
    "bytes",
    "rows",
    "status",
    "error",
    "duration_sec",
    "timestamp",
]


class IngestionLogger:
    """Appends one CSV row per poll cycle, whatever its outcome."""

    def __init__(self, log_file=LOG_FILE):
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def log_fetch(self, root, checkpoint_in, checkpoint_out, status, files=0, size_bytes=0, rows=0, error=None, duration=0.0):
        df = pd.DataFrame([{
            "root": root,
            "checkpoint_in": checkpoint_in,
            "checkpoint_out": checkpoint_out,
            "files": files,
            "bytes": size_bytes,
            "rows": rows,
            "status": status,
            "error": error,
            "duration_sec": duration,
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        }], columns=LOG_COLUMNS)
        header = not self.log_file.exists()
        df.to_csv(self.log_file, mode="a", index=False, header=header)

    def read_log(self) -> pd.DataFrame:
        if not self.log_file.exists():
            return pd.DataFrame(columns=LOG_COLUMNS)
        return pd.read_csv(self.log_file, dtype={"checkpoint_in": str, "checkpoint_out": str})
