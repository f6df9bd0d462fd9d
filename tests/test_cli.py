from __future__ import annotations

import json
from pathlib import Path

import pytest

from autofill.cli import _answer_payload, build_config, build_parser, record_run
from autofill.io_utils import prepare_run_directory


def test_fill_arguments():
    args = build_parser().parse_args(
        ["fill", "--url", "https://jobs.example.com", "--profile", "me.json", "--overwrite"]
    )

    assert args.command == "fill"
    assert args.profile == Path("me.json")
    assert args.overwrite is True
    assert args.headed is False


def test_url_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["detect"])


def test_build_config_applies_flags(monkeypatch):
    monkeypatch.setenv("AUTOAPPLY_APP_URL", "https://env.test")
    args = build_parser().parse_args(
        ["fill", "--url", "https://x.test", "--app-url", "https://flag.test", "--overwrite"]
    )

    config = build_config(args)

    assert config.app_url == "https://flag.test"
    assert config.overwrite is True


def test_build_config_reads_env(monkeypatch):
    monkeypatch.setenv("AUTOAPPLY_APP_URL", "https://env.test")
    args = build_parser().parse_args(["detect", "--url", "https://x.test"])

    assert build_config(args).app_url == "https://env.test"


def test_answer_payload():
    assert _answer_payload({"action": "showGeneratedResponse", "response": "Hi"}) == {
        "success": True,
        "response": "Hi",
    }
    failed = _answer_payload({"error": "not_authenticated", "message": "log in"})
    assert failed == {"success": False, "error": "not_authenticated", "message": "log in"}


def test_record_run_writes_command_summary(tmp_path):
    run_paths = prepare_run_directory("run-1", "fill", data_dir=tmp_path)

    path = record_run({"filled_count": 2}, run_paths, "https://www.linkedin.com/jobs/view/42")

    assert path == tmp_path / "run-1" / "fill.json"
    summary = json.loads(path.read_text(encoding="utf-8"))
    assert summary == {
        "filled_count": 2,
        "run_id": "run-1",
        "url": "https://www.linkedin.com/jobs/view/42",
        "job_board": True,
    }


def test_record_run_flags_company_sites(tmp_path):
    run_paths = prepare_run_directory("run-2", "detect", data_dir=tmp_path)

    path = record_run({"detected": False}, run_paths, "https://careers.acme.com/apply")

    assert json.loads(path.read_text(encoding="utf-8"))["job_board"] is False
