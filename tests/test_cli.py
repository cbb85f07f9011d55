import json
from pathlib import Path

import pytest

import run_pipeline as cli


def test_parser_defaults(fixture_path):
    args = cli.build_parser().parse_args(["--file", str(fixture_path), "--money", "20"])
    assert args.money == 20
    assert args.target == Path("./data/output.json")
    assert args.target_years == 1
    assert args.min_continents == 1
    assert args.min_short_term_percent == 0.0
    assert args.min_medium_term_percent == 0.0
    assert args.min_long_term_percent == 0.0
    assert args.verbose is False


def test_parser_overrides(fixture_path, tmp_path):
    args = cli.build_parser().parse_args(
        [
            "--file", str(fixture_path),
            "--money", "20",
            "--min_continents", "3",
            "--min_long_term_percent", "2",
            "--min_medium_term_percent", "2",
            "--min_short_term_percent", "2",
            "--target", str(tmp_path / "test.json"),
            "--target_years", "2",
            "-v",
        ]
    )
    assert args.min_continents == 3
    assert args.min_long_term_percent == 2
    assert args.target_years == 2
    assert args.target == tmp_path / "test.json"
    assert args.verbose is True


def test_parser_requires_file():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--money", "20"])


def test_main_writes_report(fixture_path, tmp_path):
    target = tmp_path / "output.json"
    exit_code = cli.main(
        [
            "-f", str(fixture_path),
            "-m", "500",
            "-t", str(target),
            "--target_years", "3",
            "--iterations", "300",
            "--seed", "5",
        ]
    )
    assert exit_code == 0
    result = json.loads(target.read_text())
    assert len(result["co2_report"]) == 3


def test_main_rejects_invalid_configuration(fixture_path, tmp_path):
    exit_code = cli.main(["-f", str(fixture_path), "-m", "-5", "-t", str(tmp_path / "out.json")])
    assert exit_code == 1


def test_main_reports_missing_input(tmp_path):
    exit_code = cli.main(["-f", str(tmp_path / "missing.json"), "-m", "10", "-t", str(tmp_path / "out.json")])
    assert exit_code == 1
