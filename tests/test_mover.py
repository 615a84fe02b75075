"""Tests for file relocation."""

import pytest
from pathlib import Path, PurePosixPath
from unittest.mock import patch

from project_organizer.core.mover import (
    FileRelocator, CollisionPolicy, Move, RelocationResult, normalize_filename
)
from project_organizer.core.classifier import ExtensionClassifier
from project_organizer.models.profile import LEGACY_PROFILE
from project_organizer.exceptions import FileOperationError

ONE_PER_BUCKET = {
    "paper.pdf": "doc/paper.pdf",
    "run.out": "job/run.out",
    "clip.mp4": "media/clip/clip.mp4",
    "solver.py": "src/solver/solver.py",
    "setup.exe": "bin/setup.exe",
    "table.xyz": "data/table.xyz",
}


@pytest.fixture
def flat_project(tmp_path):
    """Create a flat directory with one file per bucket."""
    for name in ONE_PER_BUCKET:
        (tmp_path / name).write_text(name)
    return tmp_path


def files_under(root: Path):
    return sorted(
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_file() and ".git" not in p.parts
    )


class TestFileRelocator:
    """Test FileRelocator."""

    def test_initialization_default(self):
        """Test default options."""
        relocator = FileRelocator()

        assert relocator.collision is CollisionPolicy.RENAME
        assert relocator.normalize_names is False
        assert relocator.skip_sorted is False
        assert relocator.dry_run is False

    def test_collision_from_string(self):
        """Test that the policy accepts its string value."""
        assert FileRelocator(collision="overwrite").collision is CollisionPolicy.OVERWRITE

    def test_relocates_one_file_per_bucket(self, flat_project):
        """Test that every file lands in its bucket and the root is cleared."""
        result = FileRelocator().relocate(flat_project)

        assert files_under(flat_project) == sorted(ONE_PER_BUCKET.values())
        assert len(result.moved) == len(ONE_PER_BUCKET)
        assert not [p for p in flat_project.iterdir() if p.is_file()]

    def test_contents_are_preserved(self, flat_project):
        """Test that moved files keep their content."""
        FileRelocator().relocate(flat_project)
        assert (flat_project / "src" / "solver" / "solver.py").read_text() == "solver.py"

    def test_nested_files_bubble_up_to_root_buckets(self, tmp_path):
        """Test that destinations are relative to the walk root."""
        nested = tmp_path / "old" / "inner"
        nested.mkdir(parents=True)
        (nested / "notes.md").write_text("n")

        FileRelocator().relocate(tmp_path)

        assert (tmp_path / "doc" / "notes.md").exists()
        assert not (tmp_path / "old" / "inner" / "doc").exists()

    def test_git_directory_is_untouched(self, tmp_path):
        """Test that files inside .git are never moved."""
        git_dir = tmp_path / ".git"
        git_dir.mkdir()
        (git_dir / "HEAD").write_text("ref: refs/heads/main")
        (git_dir / "packed.pdf").write_text("x")

        result = FileRelocator().relocate(tmp_path)

        assert (git_dir / "packed.pdf").exists()
        assert (git_dir / "HEAD").exists()
        assert result.moved == []

    def test_files_already_in_place_are_skipped(self, tmp_path):
        """Test that a second run moves nothing."""
        (tmp_path / "b.py").write_text("b")
        relocator = FileRelocator()
        relocator.relocate(tmp_path)

        result = relocator.relocate(tmp_path)

        assert result.moved == []
        assert result.in_place == [tmp_path / "src" / "b" / "b.py"]

    def test_upper_case_extension(self, tmp_path):
        """Test that case does not change the bucket."""
        (tmp_path / "Scan.PDF").write_text("s")
        FileRelocator().relocate(tmp_path)
        assert (tmp_path / "doc" / "Scan.PDF").exists()

    def test_legacy_profile(self, tmp_path):
        """Test relocation with the legacy table."""
        (tmp_path / "a.pdf").write_text("a")
        (tmp_path / "nb.ipynb").write_text("{}")

        FileRelocator(ExtensionClassifier(LEGACY_PROFILE)).relocate(tmp_path)

        assert (tmp_path / "ref" / "a" / "a.pdf").exists()
        assert (tmp_path / "eg" / "nb" / "nb.ipynb").exists()

    def test_ignore_patterns(self, tmp_path):
        """Test that ignored files stay where they are."""
        (tmp_path / "README.md").write_text("r")
        (tmp_path / "other.md").write_text("o")

        result = FileRelocator(ignore=["README.md"]).relocate(tmp_path)

        assert (tmp_path / "README.md").exists()
        assert (tmp_path / "doc" / "other.md").exists()
        assert result.ignored == [tmp_path / "README.md"]

    def test_skip_sorted_leaves_bucket_contents(self, tmp_path):
        """Test that files already inside a bucket are not re-sorted."""
        sty_dir = tmp_path / "doc" / "report" / "sty"
        sty_dir.mkdir(parents=True)
        (sty_dir / "theme.sty").write_text("t")
        (tmp_path / "eg").mkdir()
        (tmp_path / "eg" / "README.md").write_text("e")
        (tmp_path / "loose.sty").write_text("l")

        result = FileRelocator(skip_sorted=True, sorted_dirs=["eg"]).relocate(tmp_path)

        assert (sty_dir / "theme.sty").exists()
        assert (tmp_path / "eg" / "README.md").exists()
        assert (tmp_path / "data" / "loose.sty").exists()
        assert len(result.ignored) == 2

    def test_without_skip_sorted_nested_bucket_files_move(self, tmp_path):
        """Test the plain behaviour for files deep inside a bucket."""
        report = tmp_path / "doc" / "report"
        report.mkdir(parents=True)
        (report / "report.tex").write_text("t")

        FileRelocator().relocate(tmp_path)

        assert (tmp_path / "doc" / "report.tex").exists()

    def test_normalize_names(self, tmp_path):
        """Test file name normalization on move."""
        (tmp_path / "My Final - Draft.DOCX").write_text("d")

        FileRelocator(normalize_names=True).relocate(tmp_path)

        assert (tmp_path / "doc" / "my_final_draft.docx").exists()

    def test_dry_run_changes_nothing(self, flat_project):
        """Test that a dry run only plans."""
        before = files_under(flat_project)

        result = FileRelocator(dry_run=True).relocate(flat_project)

        assert files_under(flat_project) == before
        assert result.dry_run is True
        assert len(result.moved) == len(ONE_PER_BUCKET)
        assert not (flat_project / "doc").exists()

    def test_by_bucket(self, flat_project):
        """Test per bucket counting."""
        result = FileRelocator().relocate(flat_project)
        assert result.by_bucket(flat_project) == {
            "doc": 1, "job": 1, "media": 1, "src": 1, "bin": 1, "data": 1
        }

    def test_plan(self, tmp_path):
        """Test planning without moving."""
        (tmp_path / "b.py").write_text("b")

        moves, ignored = FileRelocator().plan(tmp_path)

        assert moves == [Move(tmp_path / "b.py", tmp_path / "src" / "b" / "b.py")]
        assert ignored == []
        assert (tmp_path / "b.py").exists()


class TestCollisions:
    """Test destination collision handling."""

    @pytest.fixture
    def colliding(self, tmp_path):
        """Two files that map to the same destination path."""
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "notes.txt").write_text("first")
        (tmp_path / "b" / "notes.txt").write_text("second")
        return tmp_path

    def test_distinct_names_in_flat_bucket_both_survive(self, tmp_path):
        """Test that two different executables both end up in bin."""
        (tmp_path / "one.exe").write_text("1")
        (tmp_path / "two.exe").write_text("2")

        FileRelocator(collision=CollisionPolicy.OVERWRITE).relocate(tmp_path)

        assert sorted(p.name for p in (tmp_path / "bin").iterdir()) == ["one.exe", "two.exe"]

    def test_overwrite_reproduces_silent_replacement(self, colliding):
        """Test the known risk: the later move replaces the earlier file."""
        result = FileRelocator(collision=CollisionPolicy.OVERWRITE).relocate(colliding)

        doc = colliding / "doc"
        assert [p.name for p in doc.iterdir()] == ["notes.txt"]
        assert (doc / "notes.txt").read_text() == "second"
        assert len(result.overwritten) == 1

    def test_rename_keeps_both(self, colliding):
        """Test the default policy adds a counter."""
        result = FileRelocator().relocate(colliding)

        doc = colliding / "doc"
        assert (doc / "notes.txt").read_text() == "first"
        assert (doc / "notes (1).txt").read_text() == "second"
        assert result.renamed == [
            Move(colliding / "b" / "notes.txt", doc / "notes (1).txt")
        ]

    def test_rename_counts_up(self, colliding):
        """Test that existing numbered copies are skipped."""
        doc = colliding / "doc"
        doc.mkdir()
        (doc / "notes.txt").write_text("existing")
        (doc / "notes (1).txt").write_text("existing")

        FileRelocator().relocate(colliding)

        assert (doc / "notes (2).txt").exists()
        assert (doc / "notes (3).txt").exists()

    def test_fail_policy_aborts(self, colliding):
        """Test that the fail policy stops at the first collision."""
        with pytest.raises(FileOperationError, match="already exists"):
            FileRelocator(collision=CollisionPolicy.FAIL).relocate(colliding)

        assert (colliding / "doc" / "notes.txt").read_text() == "first"
        assert (colliding / "b" / "notes.txt").exists()

    def test_fail_policy_checks_before_creating_folders(self, tmp_path):
        """Test that a collision is detected before any directory is made."""
        (tmp_path / "doc").mkdir()
        (tmp_path / "doc" / "notes.txt").write_text("first")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "notes.txt").write_text("second")

        with patch.object(Path, "mkdir") as mock_mkdir:
            with pytest.raises(FileOperationError, match="already exists"):
                FileRelocator(collision=CollisionPolicy.FAIL).relocate(tmp_path)

        mock_mkdir.assert_not_called()


class TestRelocationErrors:
    """Test that relocation fails fast."""

    def test_move_failure_is_fatal(self, tmp_path):
        """Test that an OSError during a move aborts the pass."""
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.txt").write_text("b")

        with patch("project_organizer.core.mover.shutil.move", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError, match="disk full"):
                FileRelocator().relocate(tmp_path)

    def test_mkdir_failure_is_fatal(self, tmp_path):
        """Test that a destination blocked by a file aborts the pass."""
        (tmp_path / "src").write_text("not a directory")
        (tmp_path / "tool.py").write_text("t")

        with pytest.raises(FileOperationError, match="Failed to create directory"):
            FileRelocator(ignore=["src"]).relocate(tmp_path)


class TestDestinationSafety:
    """Test destinations for unusual file names."""

    def test_dot_stem_is_sorted_under_fail_policy(self, tmp_path):
        """Test that '...py' goes into the flat source folder."""
        (tmp_path / "...py").write_text("x")

        result = FileRelocator(collision=CollisionPolicy.FAIL).relocate(tmp_path)

        assert (tmp_path / "src" / "...py").read_text() == "x"
        assert not (tmp_path / "...py").exists()
        assert result.renamed == []

    def test_dot_stem_with_default_policy(self, tmp_path):
        """Test that the default policy does not rename the file in place."""
        (tmp_path / "...py").write_text("x")

        FileRelocator().relocate(tmp_path)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["src"]
        assert (tmp_path / "src" / "...py").exists()

    def test_destination_outside_root_is_refused(self, tmp_path):
        """Test that a folder escaping the root raises before moving."""
        root = tmp_path / "proj"
        root.mkdir()
        (root / "a.bin").write_text("a")
        classifier = ExtensionClassifier()

        with patch.object(classifier, "classify_path", return_value=PurePosixPath("../elsewhere")):
            with pytest.raises(FileOperationError, match="outside"):
                FileRelocator(classifier=classifier).relocate(root)

        assert (root / "a.bin").exists()
        assert not (tmp_path / "elsewhere").exists()


class TestNormalizeFilename:
    """Test name normalization."""

    @pytest.mark.parametrize("name,expected", [
        ("My File.txt", "my_file.txt"),
        ("a - b.PDF", "a_b.pdf"),
        ("multi   space", "multi_space"),
        ("already_ok.py", "already_ok.py"),
    ])
    def test_normalize(self, name, expected):
        assert normalize_filename(name) == expected


def test_relocation_result_skipped():
    """Test the combined skip list."""
    result = RelocationResult(in_place=[Path("a")], ignored=[Path("b")])
    assert result.skipped == [Path("a"), Path("b")]
