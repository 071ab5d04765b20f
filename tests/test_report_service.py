"""
Tests for the plain-text duplicate report.
"""
import pytest

from dupfinder.core.models import ReportMetadata
from dupfinder.services.report_service import ReportService, ReportWriteError


@pytest.fixture
def metadata():
    return ReportMetadata(
        generated_by="tester",
        start_time="20250101 12:00:00",
        end_time="20250101 12:00:05",
        roots=["/data"],
    )


@pytest.fixture
def duplicates(make_tree):
    root = make_tree("r", {
        "small1.txt": b"s" * 100,
        "small2.txt": b"s" * 100,
        "big1.bin": b"b" * 2048,
        "big2.bin": b"b" * 2048,
        "big3.bin": b"b" * 2048,
    })
    return {
        "hash_small": {str(root / "small2.txt"), str(root / "small1.txt")},
        "hash_big": {str(root / "big1.bin"), str(root / "big2.bin"), str(root / "big3.bin")},
    }, root


class TestRender:
    def test_header(self, duplicates, metadata):
        dups, _ = duplicates
        text = ReportService.render(dups, metadata)
        lines = text.splitlines()

        assert lines[:5] == [
            "Duplicate File Finder Report",
            "Generated by: tester",
            "Start Time: 20250101 12:00:00",
            "End Time: 20250101 12:00:05",
            "Base Directory: /data",
        ]

    def test_multiple_base_directories(self, duplicates, metadata):
        dups, _ = duplicates
        metadata.roots = ["/one", "/two"]
        text = ReportService.render(dups, metadata)

        assert "Base Directories:\n - /one\n - /two\n" in text
        assert "Base Directory:" not in text

    def test_groups_sorted_by_descending_size(self, duplicates, metadata):
        dups, root = duplicates
        text = ReportService.render(dups, metadata)

        assert text.index("Size: 2.00 KB") < text.index("Size: 100 bytes")
        big_block = (
            "Size: 2.00 KB\n"
            f"{root / 'big1.bin'}\n{root / 'big2.bin'}\n{root / 'big3.bin'}\n\n"
        )
        assert big_block in text

    def test_total_savings(self, duplicates, metadata):
        dups, _ = duplicates
        text = ReportService.render(dups, metadata)
        # 2048 * 2 + 100 * 1
        assert "Total Potential Space Savings: 4.10 KB" in text

    def test_empty_mapping(self, metadata):
        text = ReportService.render({}, metadata)
        assert "Total Potential Space Savings: 0 bytes" in text
        assert "Size:" not in text


class TestHelpers:
    def test_representative_size_skips_missing_paths(self, tmp_path):
        present = tmp_path / "z.txt"
        present.write_bytes(b"12345")
        assert ReportService.representative_size([str(present), str(tmp_path / "a_missing")]) == 5

    def test_representative_size_all_missing(self, tmp_path):
        assert ReportService.representative_size([str(tmp_path / "gone")]) == 0

    def test_total_savings(self):
        entries = [(1000, ["a", "b", "c"]), (10, ["d", "e"]), (5, ["f"])]
        assert ReportService.total_savings(entries) == 2010

    def test_current_user_is_a_string(self):
        assert isinstance(ReportService.current_user(), str)


class TestWrite:
    def test_writes_file(self, duplicates, metadata, tmp_path):
        dups, root = duplicates
        output = tmp_path / "report.txt"

        ReportService.write(dups, str(output), metadata)

        content = output.read_text(encoding="utf-8")
        assert content.startswith("Duplicate File Finder Report\n")
        assert str(root / "small1.txt") in content

    def test_default_metadata(self, duplicates, tmp_path):
        dups, _ = duplicates
        output = tmp_path / "report.txt"

        ReportService.write(dups, str(output))

        assert "Generated by: " in output.read_text(encoding="utf-8")

    def test_unwritable_destination(self, duplicates, metadata, tmp_path):
        dups, _ = duplicates
        with pytest.raises(ReportWriteError) as exc_info:
            ReportService.write(dups, str(tmp_path / "no_such_dir" / "report.txt"), metadata)

        assert isinstance(exc_info.value, OSError)
        assert "no_such_dir" in str(exc_info.value)
