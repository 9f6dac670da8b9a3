"""Tests for the run-scoped scratch area."""

import pytest

from criticwave_core.scratch import DIFF_FILENAME, MAX_NAME_BYTES, ScratchArea, safe_filename


class TestSafeFilename:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/app.py", "src_app.py"),
            ("a/b/c/d.go", "a_b_c_d.go"),
            ("win\\style\\path.cs", "win_style_path.cs"),
            ("README.md", "README.md"),
        ],
    )
    def test_separators_replaced(self, path, expected):
        assert safe_filename(path) == expected

    def test_no_separators_left(self):
        name = safe_filename("../../etc/passwd")
        assert "/" not in name and "\\" not in name

    def test_deep_path_is_capped_and_keeps_extension(self):
        deep = "/".join(["d" * 60] * 6) + "/x.py"
        name = safe_filename(deep)
        assert len(name.encode("utf-8")) <= MAX_NAME_BYTES
        assert name.endswith(".py")
        assert name.startswith("d" * 60 + "_")

    def test_capped_names_stay_distinct(self):
        prefix = "/".join(["d" * 60] * 6)
        assert safe_filename(prefix + "/a.py") != safe_filename(prefix + "/b.py")

    def test_multibyte_path_capped_by_bytes(self):
        name = safe_filename("/".join(["é" * 60] * 4) + "/x.go")
        assert len(name.encode("utf-8")) <= MAX_NAME_BYTES
        assert name.endswith(".go")


class TestScratchArea:
    def test_directory_removed_on_exit(self):
        with ScratchArea() as scratch:
            root = scratch.root
            scratch.write_file("src/app.py", b"print(1)")
            assert root.exists()
        assert not root.exists()

    def test_directory_removed_when_body_raises(self):
        with pytest.raises(RuntimeError):
            with ScratchArea() as scratch:
                root = scratch.root
                scratch.write_diff("diff --git a/x b/x")
                raise RuntimeError("boom")
        assert not root.exists()

    def test_files_land_inside_root(self):
        with ScratchArea() as scratch:
            path = scratch.write_file("../../escape.py", b"x")
            assert path.parent == scratch.root
            assert path.read_bytes() == b"x"

    def test_colliding_names_stay_distinct(self):
        with ScratchArea() as scratch:
            first = scratch.write_file("a/b.py", b"nested")
            second = scratch.write_file("a_b.py", b"flat")
            assert first != second
            assert first.name == "a_b.py"
            assert second.name == "a_b-2.py"
            assert first.read_bytes() == b"nested"
            assert second.read_bytes() == b"flat"

    def test_changed_file_cannot_overwrite_diff(self):
        with ScratchArea() as scratch:
            diff_path = scratch.write_diff("the diff")
            other = scratch.write_file(DIFF_FILENAME, b"a changed file")
            assert other != diff_path
            assert diff_path.read_text() == "the diff"

    def test_root_outside_context_raises(self):
        with pytest.raises(RuntimeError):
            ScratchArea().root
