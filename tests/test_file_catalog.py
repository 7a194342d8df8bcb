import pyarrow.fs as pafs
import pytest

from conftest import set_mtime
from ingestion import file_catalog
from ingestion.errors import StorageAccessError
from ingestion.file_catalog import ArrowFileCatalog, FileRecord
from ingestion.file_filter import FileFilter


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / "landing"
    (root / "2025" / "06").mkdir(parents=True)
    (root / "2025" / "06" / "part-0.json").write_text('{"a": 1}\n')
    (root / "top.csv").write_text("a\n1\n2\n")
    (root / "_SUCCESS").write_text("")
    set_mtime(root / "2025" / "06" / "part-0.json", 1_700_000_000_123)
    set_mtime(root / "top.csv", 1_700_000_050_000)
    return root


def test_lists_files_and_directories_recursively(tree):
    catalog = ArrowFileCatalog(str(tree))
    records = {r.name: r for r in catalog.list_all(str(tree))}

    assert set(records) == {"2025", "06", "part-0.json", "top.csv", "_SUCCESS"}
    assert records["2025"].is_directory
    assert records["06"].is_directory
    assert not records["top.csv"].is_directory


def test_reports_size_and_millisecond_mod_time(tree):
    catalog = ArrowFileCatalog(str(tree))
    records = {r.name: r for r in catalog.list_all(str(tree))}

    assert records["top.csv"].size_bytes == len("a\n1\n2\n")
    assert records["top.csv"].mod_time_millis == 1_700_000_050_000
    assert records["part-0.json"].mod_time_millis == 1_700_000_000_123
    assert records["part-0.json"].path.endswith("2025/06/part-0.json")


def test_accepts_file_uri(tree):
    uri = tree.resolve().as_uri()
    catalog = ArrowFileCatalog(uri)
    names = {r.name for r in catalog.list_all(uri)}

    assert "top.csv" in names


def test_missing_root_raises_storage_error(tmp_path):
    missing = tmp_path / "does-not-exist"
    catalog = ArrowFileCatalog(str(missing))

    with pytest.raises(StorageAccessError):
        list(catalog.list_all(str(missing)))


def test_storage_error_is_an_os_error(tmp_path):
    missing = tmp_path / "does-not-exist"
    with pytest.raises(OSError):
        list(ArrowFileCatalog(str(missing)).list_all(str(missing)))


def test_filter_on_real_listing(tree):
    catalog = ArrowFileCatalog(str(tree))
    eligible = sorted(r.name for r in FileFilter().filter(catalog.list_all(str(tree))))

    assert eligible == ["part-0.json", "top.csv"]


@pytest.mark.parametrize("path,expected", [
    ("/lake/a.parquet", True),
    ("/lake/.a.parquet", False),
    ("/lake/_SUCCESS", False),
    ("/lake/_temporary/a.parquet", True),
    ("/lake/sub/.hidden", False),
])
def test_filter_looks_at_base_name_only(path, expected):
    assert FileFilter().is_eligible(FileRecord(path, 1, 1)) is expected


def test_directories_are_never_eligible():
    assert not FileFilter(ignore_prefixes=()).is_eligible(FileRecord("/lake/dir", 0, 1, is_directory=True))


@pytest.fixture
def object_store(monkeypatch):
    """An in-memory filesystem standing in for s3://bucket/landing."""
    fs = pafs._MockFileSystem()
    fs.create_dir("bucket/landing/2025")
    with fs.open_output_stream("bucket/landing/a.parquet") as out:
        out.write(b"PAR1")
    with fs.open_output_stream("bucket/landing/2025/b.parquet") as out:
        out.write(b"PAR1PAR1")

    def resolve(uri):
        return fs, uri.split("://", 1)[1].rstrip("/")

    monkeypatch.setattr(file_catalog, "_resolve", resolve)
    return fs


def test_remote_paths_keep_their_scheme(object_store):
    catalog = ArrowFileCatalog("s3://bucket/landing")
    files = sorted(r.path for r in catalog.list_all("s3://bucket/landing") if not r.is_directory)

    assert files == ["s3://bucket/landing/2025/b.parquet", "s3://bucket/landing/a.parquet"]


def test_remote_sizes_and_names(object_store):
    catalog = ArrowFileCatalog("s3://bucket/landing/")
    records = {r.name: r for r in catalog.list_all("s3://bucket/landing/")}

    assert records["b.parquet"].size_bytes == 8
    assert records["2025"].is_directory
    assert records["2025"].path == "s3://bucket/landing/2025"


@pytest.mark.parametrize("uri,fs_path,prefix", [
    ("s3://bucket/landing", "bucket/landing", "s3://"),
    ("s3://bucket/landing/", "bucket/landing", "s3://"),
    ("hdfs://namenode:8020/data/landing", "/data/landing", "hdfs://namenode:8020"),
    ("/data/landing", "/data/landing", ""),
])
def test_uri_prefix(uri, fs_path, prefix):
    assert file_catalog._uri_prefix(uri, fs_path, pafs._MockFileSystem()) == prefix


def test_local_file_uri_lists_plain_paths(tree):
    uri = tree.resolve().as_uri()
    paths = [r.path for r in ArrowFileCatalog(uri).list_all(uri)]

    assert paths and all(not p.startswith("file:") for p in paths)
