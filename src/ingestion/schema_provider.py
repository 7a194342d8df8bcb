# src/ingestion/schema_provider.py
import json
from pathlib import Path
from typing import Protocol

import pyarrow as pa

from ingestion.config import SourceProperties
from ingestion.errors import ConfigurationError

SCHEMA_FILE_PROP = "ingest.schema.file"

FIELD_TYPES = {
    "string": pa.string(),
    "int32": pa.int32(),
    "int64": pa.int64(),
    "float": pa.float32(),
    "double": pa.float64(),
    "bool": pa.bool_(),
    "timestamp": pa.timestamp("us"),
    "date": pa.date32(),
}


class SchemaProvider(Protocol):
    def get_source_schema(self) -> pa.Schema:
        ...


class StaticSchemaProvider:
    def __init__(self, schema: pa.Schema):
        self.schema = schema

    def get_source_schema(self) -> pa.Schema:
        return self.schema


class FilebasedSchemaProvider:
    """
    Reads the source schema from a JSON file:
        {"fields": [{"name": "sensor_id", "type": "string"}, ...]}
    The file is read once, at construction.
    """

    def __init__(self, props: SourceProperties):
        props.check_required([SCHEMA_FILE_PROP])
        self.schema_path = Path(props.get_string(SCHEMA_FILE_PROP))
        try:
            definition = json.loads(self.schema_path.read_text())
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Unable to load schema from {self.schema_path}: {e}") from e
        self.schema = schema_from_fields(definition.get("fields", []))

    def get_source_schema(self) -> pa.Schema:
        return self.schema


def schema_from_fields(fields) -> pa.Schema:
    if not fields:
        raise ConfigurationError("Schema has no fields")
    columns = []
    for field in fields:
        type_name = str(field.get("type", "")).lower()
        if type_name not in FIELD_TYPES:
            raise ConfigurationError(f"Unsupported type {type_name!r} for field {field.get('name')!r}")
        columns.append(pa.field(field["name"], FIELD_TYPES[type_name], nullable=field.get("nullable", True)))
    return pa.schema(columns)
