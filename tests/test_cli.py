"""Tests for the command line entry point."""

from __future__ import annotations

from evoherd.__main__ import main


def _run_args(tmp_path, *extra):
    return [
        "run",
        "--generations", "2",
        "--population", "4",
        "--timer", "1.0",
        "--dt", "0.25",
        "--export", str(tmp_path / "out.csv"),
        "--winners", str(tmp_path / "winners"),
        *extra,
    ]


def test_run_exports_each_generation(tmp_path, capsys):
    """run writes one record set and one winner per generation."""
    assert main(_run_args(tmp_path)) == 0

    lines = (tmp_path / "out.csv").read_text().splitlines()
    assert len(lines) == 7
    assert lines[0].startswith("Type;Generation;AgentID")
    assert len(list((tmp_path / "winners").glob("*.json"))) == 2
    assert "Generations" in capsys.readouterr().out


def test_run_without_winners(tmp_path):
    """--no-winners leaves the winners directory alone."""
    assert main(_run_args(tmp_path, "--no-winners")) == 0
    assert not (tmp_path / "winners").exists()


def test_invalid_population_is_config_error(tmp_path, capsys):
    """A zero population exits with code 2."""
    args = _run_args(tmp_path)
    args[args.index("--population") + 1] = "0"

    assert main(args) == 2
    assert "Configuration error" in capsys.readouterr().out
    assert not (tmp_path / "out.csv").exists()


def test_report(tmp_path, capsys):
    """report renders the winners of an export."""
    main(_run_args(tmp_path))
    capsys.readouterr()

    assert main(["report", str(tmp_path / "out.csv")]) == 0
    assert "Exported winners" in capsys.readouterr().out


def test_report_missing_file(tmp_path):
    """A missing export exits with code 1."""
    assert main(["report", str(tmp_path / "missing.csv")]) == 1


def test_no_command_prints_help(capsys):
    """No subcommand prints usage."""
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_report_rejects_foreign_file(tmp_path, capsys):
    """report refuses a CSV that is not an export."""
    path = tmp_path / "notes.csv"
    path.write_text("a;b;c\n1;2;3\n")

    assert main(["report", str(path)]) == 1
    assert "Cannot read" in capsys.readouterr().out
