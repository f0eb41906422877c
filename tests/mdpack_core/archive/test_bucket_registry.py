"""归档分桶与收尾测试"""

import hashlib
import os
import tarfile
from datetime import date

import pytest

from mdpack.core.archive import ArchiveBucket, BucketCollapse, BucketRegistry, bucket_suffix, file_md5
from mdpack.core.exceptions import ChecksumIOError, OutputIOError, RegistryReleasedError
from mdpack.core.policies import DayPolicy

TODAY = date(2024, 3, 20)


class TestBucketSuffix:
    """测试分桶命名"""

    @pytest.mark.parametrize(
        ("record_date", "expected"),
        [
            (20240320, "20240320"),
            (20240304, "20240304"),
            (20240303, "20240301"),
            (20240216, "20240216"),
            (20240215, "20240201"),
            (20231231, "20231216"),
        ],
    )
    def test_half_month(self, record_date, expected):
        assert bucket_suffix(record_date, TODAY, BucketCollapse.HALF_MONTH) == expected

    @pytest.mark.parametrize(
        ("record_date", "expected"),
        [(20240310, "20240310"), (20240216, "20240201"), (20230529, "20230501")],
    )
    def test_month(self, record_date, expected):
        assert bucket_suffix(record_date, TODAY, BucketCollapse.MONTH) == expected

    def test_static(self):
        assert bucket_suffix(0, TODAY, BucketCollapse.STATIC) == "0"
        assert bucket_suffix(20120609, TODAY, BucketCollapse.STATIC) == "20120609"

    def test_invalid_date(self):
        with pytest.raises(ValueError):
            bucket_suffix(20240230, TODAY, BucketCollapse.MONTH)


class TestArchiveBucket:
    def test_entries_are_readable(self, tmp_path):
        path = str(tmp_path / "DAY.20240301")
        bucket = ArchiveBucket.open(path, 6)
        bucket.add_entry("day/a.csv", b"one\n", mode=0o640, mtime=1_700_000_000)
        bucket.add_entry("day/a.csv", b"two\n", mode=0o640, mtime=1_700_000_000)
        bucket.close()

        with tarfile.open(path, "r:gz") as tar:
            members = tar.getmembers()
            assert [m.name for m in members] == ["day/a.csv", "day/a.csv"]
            assert members[0].mode == 0o640
            assert members[0].mtime == 1_700_000_000
            assert tar.extractfile(members[1]).read() == b"two\n"

    def test_open_in_missing_folder(self, tmp_path):
        with pytest.raises(OutputIOError) as exc_info:
            ArchiveBucket.open(str(tmp_path / "missing" / "DAY.20240301"), 6)
        assert exc_info.value.error_code == "OUTPUT_IO_ERROR"

    def test_write_after_close(self, tmp_path):
        bucket = ArchiveBucket.open(str(tmp_path / "x"), 1)
        bucket.close()
        bucket.close()
        with pytest.raises(OutputIOError):
            bucket.add_entry("a", b"", mode=0o644, mtime=0)


class TestBucketRegistry:
    """测试注册表的缓存与收尾"""

    def test_resolve_caches_buckets(self, tmp_path):
        registry = BucketRegistry(6)
        path = str(tmp_path / "MIN.20240319")

        assert registry.resolve(path) is registry.resolve(path)
        assert len(registry) == 1
        assert path in registry
        registry.release("sse.m1")

    def test_release_in_path_order_with_md5(self, tmp_path, clock, fixed_now):
        registry = BucketRegistry(6)
        for name in ("MIN.20240319", "MIN.20240301", "MIN.20240316"):
            registry.resolve(str(tmp_path / name)).add_entry("m.csv", name.encode(), mode=0o644, mtime=0)

        manifest = registry.release("sse.m1", clock)

        paths = [entry.archive_path for entry in manifest]
        assert paths == sorted(paths)
        assert len(manifest) == 3
        for entry in manifest:
            with open(entry.archive_path, "rb") as file:
                assert entry.content_hash == hashlib.md5(file.read()).hexdigest()
            assert entry.resource_type == "sse.m1"
            assert entry.produced_at == fixed_now
        assert registry.released

    def test_missing_file_is_left_out(self, tmp_path):
        registry = BucketRegistry(6)
        kept = str(tmp_path / "DAY.20240301")
        lost = str(tmp_path / "DAY.20240201")
        registry.resolve(kept)
        registry.resolve(lost)
        os.remove(lost)

        manifest = registry.release("sse.d1")

        assert [entry.archive_path for entry in manifest] == [kept]

    def test_use_after_release(self, tmp_path):
        registry = BucketRegistry(6)
        registry.release("sse.d1")
        with pytest.raises(RegistryReleasedError):
            registry.resolve(str(tmp_path / "DAY.20240301"))
        with pytest.raises(RegistryReleasedError):
            registry.release("sse.d1")


class TestPolicyWriters:
    def test_resolve_writer_routes_by_bucket(self, tmp_path, clock):
        policy = DayPolicy("sse.d1", clock=clock)
        policy.initialize()
        prefix = f"{tmp_path.as_posix()}/DAY."

        first = policy.resolve_writer(prefix, 20240105)
        assert policy.resolve_writer(prefix, 20240129) is first
        assert policy.resolve_writer(prefix, 20240318) is not first
        assert policy.open_buckets == [prefix + "20240101", prefix + "20240318"]

        manifest = policy.release()
        assert [entry.archive_path for entry in manifest] == [prefix + "20240101", prefix + "20240318"]

    def test_resolve_writer_failure_returns_none(self, tmp_path, clock):
        policy = DayPolicy("sse.d1", clock=clock)
        policy.initialize()
        assert policy.resolve_writer(f"{tmp_path.as_posix()}/missing/DAY.", 20240105) is None
        assert policy.release() == []

    def test_release_without_initialize(self):
        assert DayPolicy("sse.d1").release() == []

    def test_writer_after_release(self, tmp_path, clock):
        policy = DayPolicy("sse.d1", clock=clock)
        policy.initialize()
        policy.release()
        with pytest.raises(RegistryReleasedError):
            policy.resolve_writer(f"{tmp_path.as_posix()}/DAY.", 20240105)


def test_file_md5_missing(tmp_path):
    with pytest.raises(ChecksumIOError):
        file_md5(str(tmp_path / "nope"))
