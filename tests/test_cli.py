"""Tests for the command line interface."""
import os
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from photo_organizer.cli import build_config, create_parser, main
from photo_organizer.core.config import RetryPolicy
from .fixtures import duplicate_file, make_jpeg


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args(["photos"])

        assert args.source == Path("photos")
        assert args.dest is None
        assert args.workers is None
        assert args.courtesy_delay == 1.0
        assert args.max_attempts == 3
        assert args.cache_radius_km == 10.0
        assert args.verbose is False
        assert args.quiet is False

    def test_options(self):
        args = create_parser().parse_args([
            "photos", "out", "-w", "4", "--courtesy-delay", "0.5",
            "--max-attempts", "5", "--cache-radius-km", "2.5",
            "--user-agent", "MyApp/2.0", "-v",
        ])

        assert args.dest == Path("out")
        assert args.workers == 4
        assert args.courtesy_delay == 0.5
        assert args.max_attempts == 5
        assert args.cache_radius_km == 2.5
        assert args.user_agent == "MyApp/2.0"
        assert args.verbose is True


class TestBuildConfig:
    """Tests for build_config."""

    def test_default_destination(self, tmp_path: Path):
        source = tmp_path / "Photos"
        source.mkdir()

        config = build_config(create_parser().parse_args([str(source)]))

        assert config.dest_root == tmp_path.resolve() / "Photos_Organized"
        assert config.workers == (os.cpu_count() or 1)

    def test_geocoding_options(self, tmp_path: Path):
        args = create_parser().parse_args([
            str(tmp_path), str(tmp_path / "out"), "--courtesy-delay", "0.5",
            "--max-attempts", "4", "--cache-radius-km", "3", "--user-agent", "MyApp/2.0",
        ])

        config = build_config(args)

        assert config.geocoding.retry == RetryPolicy(max_attempts=4, base_delay=0.5)
        assert config.geocoding.cache_radius_km == 3.0
        assert config.geocoding.user_agent == "MyApp/2.0"


class TestMain:
    """Tests for the main entry point."""

    def test_missing_source(self, tmp_path: Path, capsys):
        source = tmp_path / "missing"

        assert main([str(source), "-q"]) == 1

        assert "not found" in capsys.readouterr().err
        assert not (tmp_path / "missing_Organized").exists()

    def test_invalid_workers(self, tmp_path: Path, capsys):
        assert main([str(tmp_path), str(tmp_path / "out"), "-q", "-w", "0"]) == 1
        assert "Workers" in capsys.readouterr().err

    def test_run(self, tmp_path: Path, capsys):
        """Test a run with a duplicate and a corrupt file still exits 0."""
        source = tmp_path / "Photos"
        make_jpeg(source / "a.jpg", date_taken=datetime(2022, 8, 9, 10, 0, 0))
        duplicate_file(source / "a.jpg", source / "b.jpg")
        (source / "c.jpg").write_bytes(b"garbage")

        assert main([str(source), "-q", "-w", "2"]) == 0

        out = capsys.readouterr().out
        assert "Total files: 3" in out
        assert "Successfully processed: 1" in out
        assert "Duplicates ignored: 1" in out
        assert "Errors: 1" in out
        dest = tmp_path / "Photos_Organized"
        assert (dest / "2022" / "2022-08-09_IMG0001.jpg").exists()

    def test_run_rich_output(self, tmp_path: Path, capsys):
        source = tmp_path / "Photos"
        make_jpeg(source / "a.jpg", date_taken=datetime(2022, 8, 9, 10, 0, 0))

        assert main([str(source), str(tmp_path / "out")]) == 0

        out = capsys.readouterr().out
        assert "Processing Summary" in out
        assert "Photo Organizer" in out

    def test_interrupt_exits_130(self, tmp_path: Path):
        source = tmp_path / "Photos"
        make_jpeg(source / "a.jpg")

        with patch(
            "photo_organizer.services.processor.PhotoOrganizer.run",
            side_effect=KeyboardInterrupt,
        ):
            assert main([str(source), "-q"]) == 130
