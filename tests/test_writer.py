import pytest

from specstack.errors import WriteError
from specstack.generator.writer import write_file, write_files


class TestWriteFile:
    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "c.sql"
        write_file(target, "SELECT 1;\n")
        assert target.read_text() == "SELECT 1;\n"

    def test_overwrites_existing_file(self, tmp_path):
        target = tmp_path / "c.sql"
        target.write_text("old")
        write_file(target, "new\n")
        assert target.read_text() == "new\n"

    def test_failure_raises_write_error(self, tmp_path):
        (tmp_path / "blocker").write_text("not a directory")
        target = tmp_path / "blocker" / "c.sql"
        with pytest.raises(WriteError, match="Failed to write") as exc:
            write_file(target, "x")
        assert exc.value.path == target


class TestWriteFiles:
    def test_writes_all_files(self, tmp_path):
        report = write_files(tmp_path, {"db/Pet_table.sql": "a\n", "frontend/src/types.ts": "b\n"})
        assert report.ok
        assert report.written == [tmp_path / "db/Pet_table.sql", tmp_path / "frontend/src/types.ts"]
        assert (tmp_path / "frontend/src/types.ts").read_text() == "b\n"

    def test_collects_every_error(self, tmp_path):
        (tmp_path / "db").write_text("a file where a directory should be")
        files = {
            "db/Pet_table.sql": "a\n",
            "frontend/src/types.ts": "b\n",
            "db/getPet_function.sql": "c\n",
        }
        report = write_files(tmp_path, files)
        assert not report.ok
        assert sorted(report.errors) == ["db/Pet_table.sql", "db/getPet_function.sql"]
        assert report.written == [tmp_path / "frontend/src/types.ts"]
        assert (tmp_path / "frontend/src/types.ts").exists()
