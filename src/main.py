# src/main.py
import logging
import os
import time

from ingestion.config import SourceProperties
from ingestion.dfs_source import DFSSource
from ingestion.ingestion_logger import LOG_FILE, IngestionLogger
from ingestion.schema_provider import FilebasedSchemaProvider
from logging_config import setup_logging
from storage.checkpoint_store import STATE_FILE, CheckpointStore
from storage.data_loader import DataLoader

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_LIMIT = 1024 ** 3
SOURCE_LIMIT_PROP = "ingest.source.limit.bytes"


def run_ingestion(props=None, schema_provider=None):
    """
    One poll cycle: load checkpoint -> fetch new files -> write batch ->
    log the cycle -> persist the new checkpoint.
    The checkpoint is only saved after the batch is written, so a failed
    cycle is retried from the same position on the next run.
    """
    props = props if props is not None else SourceProperties.from_env()
    schema_provider = schema_provider or FilebasedSchemaProvider(props)
    source = DFSSource(props, schema_provider)

    store = CheckpointStore(props.get_string("ingest.state.file", STATE_FILE))
    run_log = IngestionLogger(props.get_string("ingest.log.file", LOG_FILE))
    loader = DataLoader(props.get("ingest.output.path"))
    source_limit = props.get_int(SOURCE_LIMIT_PROP, DEFAULT_SOURCE_LIMIT)

    last_checkpoint = store.get(source.root_path)
    start = time.time()
    try:
        scan = source.scan_new_files(last_checkpoint, source_limit)
        if scan.is_empty:
            print(f"No new files under {source.root_path}, waiting for the next cycle.")
            run_log.log_fetch(source.root_path, last_checkpoint, str(scan.new_checkpoint), "no_data",
                              duration=round(time.time() - start, 2))
            return {"status": "no_data", "checkpoint": str(scan.new_checkpoint), "files": 0, "rows": 0}

        new_checkpoint = str(scan.new_checkpoint)
        print(f"Found {len(scan.selected_files)} new file(s), {scan.total_bytes} bytes.")
        out_path, rows = loader.write_batch(
            source.read_files(scan), schema_provider.get_source_schema(), new_checkpoint
        )
    except Exception as e:
        logger.exception("Ingestion cycle failed from checkpoint %s", last_checkpoint)
        run_log.log_fetch(source.root_path, last_checkpoint, last_checkpoint, "failed", error=str(e),
                          duration=round(time.time() - start, 2))
        raise

    duration = round(time.time() - start, 2)
    run_log.log_fetch(source.root_path, last_checkpoint, new_checkpoint, "success",
                      files=len(scan.selected_files), size_bytes=scan.total_bytes, rows=rows, duration=duration)
    store.put(source.root_path, new_checkpoint)
    print(f"[SUCCESS] Ingested {rows} rows into {out_path} in {duration}s (checkpoint {new_checkpoint})")
    return {"status": "success", "checkpoint": new_checkpoint, "files": len(scan.selected_files),
            "rows": rows, "output": str(out_path)}


def main():
    print("====================================")
    print("   📥 Landing Zone Ingestion   ")
    print("====================================\n")

    setup_logging("ingestion", level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
    print("🚀 Starting Ingestion Phase...")
    run_ingestion()
    print("✅ Ingestion Completed.\n")


if __name__ == "__main__":
    main()
