import os
from pathlib import Path

import pandas as pd
import pytest

from ingestion.file_catalog import FileRecord


@pytest.fixture(autouse=True, scope="function")
def sandbox_env(monkeypatch, tmp_path):
    """
    Runs every test inside its own tmp directory so state/, metadata/, logs/
    and data/ never leak into the working tree.
    """
    monkeypatch.chdir(tmp_path)
    for var in ("DFS_SOURCE_ROOT", "DFS_SOURCE_FORMAT", "DFS_IGNORE_PREFIXES", "SOURCE_LIMIT_BYTES",
                "SCHEMA_FILE", "PROCESSED_DATA_PATH", "STATE_FILE", "INGEST_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    yield


class FakeCatalog:
    """In-memory FileCatalog. Set `error` to make the next listing fail."""

    def __init__(self, records=()):
        self.records = list(records)
        self.error = None
        self.calls = 0

    def add(self, path, size_bytes, mod_time_millis, is_directory=False):
        self.records.append(FileRecord(path, size_bytes, mod_time_millis, is_directory))

    def list_all(self, root_path):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return iter(list(self.records))


@pytest.fixture
def fake_catalog():
    return FakeCatalog()


def set_mtime(path, millis):
    ns = millis * 1_000_000
    os.utime(path, ns=(ns, ns))


@pytest.fixture
def sensor_frame():
    return pd.DataFrame({
        "sensor_id": ["sensor_1", "sensor_2", "sensor_3"],
        "reading_type": ["temperature", "humidity", "temperature"],
        "value": [25.5, 60.1, 27.3],
        "battery_level": [90, 85, 88],
    })


@pytest.fixture
def landing_zone(tmp_path):
    """Creates a landing zone directory; returns a helper that writes parquet files into it."""
    root = tmp_path / "landing"
    root.mkdir()

    def write(relative, df, mod_time_millis):
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_parquet(path, index=False)
        set_mtime(path, mod_time_millis)
        return Path(path)

    write.root = root
    return write
