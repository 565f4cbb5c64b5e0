"""
Integration tests for file_manager.cli module.

Tests CLI argument parsing and end-to-end functionality.
"""

import logging
import pytest
from pathlib import Path

from file_manager import cli
from file_manager.cli import build_commands, configure_logging, create_parser, main, run
from file_manager.commands import (
    CopyCommand,
    DeleteCommand,
    FindCommand,
    ListCommand,
    MkdirCommand,
    MoveCommand,
    OrganizeCommand,
    RenameCommand,
    StatsCommand,
)
from file_manager.config import CollisionPolicy


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self):
        parser = create_parser()
        assert parser is not None

    def test_no_arguments_allowed(self):
        args = create_parser().parse_args([])

        assert args.list is None
        assert args.interactive is False

    def test_two_value_flags(self):
        parser = create_parser()

        args = parser.parse_args(["--rename", "old.txt", "new.txt"])
        assert args.rename == ["old.txt", "new.txt"]

        args = parser.parse_args(["-m", "a", "b", "-c", "c", "d"])
        assert args.move == ["a", "b"]
        assert args.copy == ["c", "d"]

    def test_rename_needs_two_values(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--rename", "only-one"])

    def test_short_flags(self):
        args = create_parser().parse_args(["-l", "docs", "-d", "junk.txt", "-r", "a", "b"])

        assert args.list == "docs"
        assert args.delete == "junk.txt"
        assert args.rename == ["a", "b"]

    def test_collision_choices(self):
        parser = create_parser()

        assert parser.parse_args([]).on_collision == "rename"
        assert parser.parse_args(["--on-collision", "skip"]).on_collision == "skip"
        with pytest.raises(SystemExit):
            parser.parse_args(["--on-collision", "merge"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])

        assert "file-manager" in capsys.readouterr().out


class TestBuildCommands:
    """Tests for build_commands function."""

    def test_fixed_order(self):
        args = create_parser().parse_args([
            "--stats", "s",
            "--find", "*.txt",
            "--organize-by-date", "od",
            "--organize-by-type", "ot",
            "--mkdir", "mk",
            "--copy", "c1", "c2",
            "--move", "m1", "m2",
            "--rename", "r1", "r2",
            "--delete", "del",
            "--list", "ls",
        ])

        assert build_commands(args) == [
            ListCommand(Path("ls")),
            DeleteCommand(Path("del")),
            RenameCommand(Path("r1"), Path("r2")),
            MoveCommand(Path("m1"), Path("m2")),
            CopyCommand(Path("c1"), Path("c2")),
            MkdirCommand(Path("mk")),
            OrganizeCommand(Path("ot"), "type"),
            OrganizeCommand(Path("od"), "date"),
            FindCommand("*.txt"),
            StatsCommand(Path("s")),
        ]

    def test_organize_options(self):
        args = create_parser().parse_args(["--organize-by-type", "dl", "--recursive", "--dry-run"])

        assert build_commands(args) == [OrganizeCommand(Path("dl"), "type", recursive=True, dry_run=True)]

    def test_no_operations(self):
        assert build_commands(create_parser().parse_args(["--verbose"])) == []


class TestRun:
    """Tests for run function."""

    def test_returns_zero_on_success(self, temp_dir: Path, sample_files: dict):
        args = create_parser().parse_args(["--organize-by-type", str(temp_dir)])

        assert run(args) == 0
        assert (temp_dir / "txt" / "notes.txt").exists()

    def test_returns_one_on_failure(self, temp_dir: Path):
        args = create_parser().parse_args(["--delete", str(temp_dir / "missing")])

        assert run(args) == 1

    def test_collision_flag_applied(self, temp_dir: Path):
        (temp_dir / "txt").mkdir()
        (temp_dir / "txt" / "a.txt").write_text("old")
        (temp_dir / "a.txt").write_text("new")
        args = create_parser().parse_args(["--organize-by-type", str(temp_dir), "--on-collision", "overwrite"])

        assert run(args) == 0
        assert (temp_dir / "txt" / "a.txt").read_text() == "new"

    def test_no_operation_prints_help(self, capsys):
        assert run(create_parser().parse_args([])) == 0

        assert "usage:" in capsys.readouterr().out

    def test_interactive_ignores_other_flags(self, temp_dir: Path, monkeypatch):
        sessions = []
        monkeypatch.setattr(cli, "run_interactive", lambda config: sessions.append(config) or 0)
        args = create_parser().parse_args(["--interactive", "--mkdir", str(temp_dir / "x"), "--on-collision", "skip"])

        assert run(args) == 0
        assert len(sessions) == 1
        assert sessions[0].collision_policy is CollisionPolicy.SKIP
        assert not (temp_dir / "x").exists()


class TestMain:
    """Tests for main function."""

    def test_multiple_operations(self, temp_dir: Path, capsys):
        source = temp_dir / "a.txt"
        source.write_text("content")

        result = main([
            "--copy", str(source), str(temp_dir / "b.txt"),
            "--mkdir", str(temp_dir / "new"),
            "--stats", str(temp_dir),
        ])

        assert result == 0
        out = capsys.readouterr().out
        assert "Total files: 2" in out
        assert (temp_dir / "new").is_dir()

    def test_failed_operation_does_not_stop_others(self, temp_dir: Path, capsys):
        result = main([
            "--rename", str(temp_dir / "missing"), str(temp_dir / "other"),
            "--mkdir", str(temp_dir / "made"),
        ])

        assert result == 1
        assert (temp_dir / "made").is_dir()
        assert not (temp_dir / "other").exists()
        assert "Error renaming file:" in capsys.readouterr().err

    def test_find(self, temp_dir: Path, capsys):
        for name in ["a.txt", "b.log", "c.txt"]:
            (temp_dir / name).write_text(name)

        assert main(["--find", str(temp_dir / "*.txt")]) == 0

        lines = set(capsys.readouterr().out.splitlines())
        assert lines == {str(temp_dir / "a.txt"), str(temp_dir / "c.txt")}

    def test_list(self, temp_dir: Path, nested_files: list, capsys):
        assert main(["--list", str(temp_dir)]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == f"Listing files in directory: {temp_dir}"
        assert set(lines[1:]) == {str(f) for f in nested_files}

    def test_organize_by_date(self, temp_dir: Path, dated_files: dict):
        assert main(["--organize-by-date", str(temp_dir)]) == 0

        assert sorted(p.name for p in temp_dir.iterdir()) == sorted(dated_files)

    def test_unreadable_entry_fails_organize(self, temp_dir: Path, monkeypatch, capsys):
        from file_manager import walker

        (temp_dir / "a.txt").write_text("a")
        (temp_dir / "locked.txt").write_text("locked")
        original = walker.FileEntry.from_path

        def fake_from_path(cls, path):
            if Path(path).name == "locked.txt":
                raise PermissionError(13, "Permission denied", str(path))
            return original(path)

        monkeypatch.setattr(walker.FileEntry, "from_path", classmethod(fake_from_path))

        assert main(["--organize-by-type", str(temp_dir)]) == 1

        assert "Error organizing locked.txt:" in capsys.readouterr().err
        assert (temp_dir / "txt" / "a.txt").exists()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_verbose_logs_debug(self):
        logger = configure_logging(verbose=True)

        assert logger.name == "file_manager"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_quiet_by_default(self):
        logger = configure_logging()

        assert logger.level == logging.WARNING

    def test_reconfigure_replaces_handler(self):
        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1

    def test_debug_records_reach_stream(self):
        import io

        stream = io.StringIO()
        configure_logging(verbose=True, stream=stream)

        logging.getLogger("file_manager.operations").debug("walk %s", "message")

        assert "walk message" in stream.getvalue()
