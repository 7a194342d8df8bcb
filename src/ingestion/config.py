# src/ingestion/config.py
import json
import os
from pathlib import Path

from ingestion.errors import ConfigurationError

# Environment variable -> property key
ENV_PROPERTIES = {
    "DFS_SOURCE_ROOT": "ingest.source.dfs.root",
    "DFS_SOURCE_FORMAT": "ingest.source.dfs.format",
    "DFS_IGNORE_PREFIXES": "ingest.source.dfs.ignore.prefixes",
    "SOURCE_LIMIT_BYTES": "ingest.source.limit.bytes",
    "SCHEMA_FILE": "ingest.schema.file",
    "PROCESSED_DATA_PATH": "ingest.output.path",
    "STATE_FILE": "ingest.state.file",
    "INGEST_LOG_FILE": "ingest.log.file",
}


class SourceProperties(dict):
    """Flat string properties with typed accessors."""

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls({key: environ[var] for var, key in ENV_PROPERTIES.items() if environ.get(var)})

    @classmethod
    def from_json(cls, path):
        try:
            data = json.loads(Path(path).read_text())
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Unable to load properties from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Properties file {path} must hold a JSON object")
        return cls({k: _as_property(v) for k, v in data.items()})

    def check_required(self, keys):
        missing = [k for k in keys if not self.get(k)]
        if missing:
            raise ConfigurationError(f"Missing required properties: {', '.join(missing)}")

    def get_string(self, key, default=None):
        value = self.get(key)
        if value is None:
            if default is None:
                raise ConfigurationError(f"Property {key} is not set")
            return default
        return str(value)

    def get_int(self, key, default=None):
        value = self.get_string(key, None if default is None else str(default))
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(f"Property {key} must be an integer, got {value!r}") from e

    def get_list(self, key, default=()):
        value = self.get(key)
        if value is None:
            return list(default)
        return [v.strip() for v in str(value).split(",") if v.strip()]


def _as_property(value):
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)
