"""Command-line interface for the application autofill engine."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict

from .browser import BrowserConfig, BrowserSession
from .config import EngineConfig
from .errors import AutofillError
from .io_utils import RunPaths, generate_run_id, prepare_run_directory, write_json
from .logging_utils import build_logger
from .page_context import is_job_board
from .profile import ProfileClient, load_profile_file
from .response_relay import ResponseRelay
from .session import DetectionSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect and auto-fill job application forms"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--url", required=True, help="Application page URL")
    common.add_argument("--run-id", dest="run_id", help="Optional run identifier")
    common.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    common.add_argument(
        "--headed", action="store_true", help="Show the browser window"
    )
    common.add_argument(
        "--app-url",
        dest="app_url",
        help="AutoApply Pro base URL (defaults to AUTOAPPLY_APP_URL)",
    )

    detect_parser = subparsers.add_parser(
        "detect", help="List the application fields found on a page", parents=[common]
    )
    detect_parser.add_argument("--scope", help="CSS selector of the form to scan")

    fill_parser = subparsers.add_parser(
        "fill", help="Fill detected fields from the user profile", parents=[common]
    )
    fill_parser.add_argument("--scope", help="CSS selector of the form to scan")
    fill_parser.add_argument(
        "--profile",
        type=Path,
        help="Local profile JSON; fetched from the app when omitted",
    )
    fill_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace values already present in the form",
    )

    answer_parser = subparsers.add_parser(
        "answer", help="Generate an answer to an application question", parents=[common]
    )
    answer_parser.add_argument("--question", required=True, help="Question text")
    answer_parser.add_argument("--job-title", dest="job_title", help="Override job title")
    answer_parser.add_argument("--company", help="Override company name")

    return parser


def build_config(args: argparse.Namespace) -> EngineConfig:
    config = EngineConfig.from_env()
    if args.app_url:
        config.app_url = args.app_url
    if getattr(args, "overwrite", False):
        config.overwrite = True
    return config


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    run_id = args.run_id or generate_run_id()
    run_paths = prepare_run_directory(run_id, args.command)
    logger = build_logger(run_paths, verbose=args.verbose)
    config = build_config(args)

    profile_path = getattr(args, "profile", None)
    profile = load_profile_file(profile_path) if profile_path else None

    browser_config = BrowserConfig(headless=not args.headed)
    with BrowserSession(browser_config, logger=logger) as browser:
        page = browser.goto(args.url)
        session = DetectionSession(
            page,
            config,
            profile_client=ProfileClient(config, logger=logger),
            relay=ResponseRelay(config, logger=logger),
            profile=profile,
            logger=logger,
        )
        if args.command == "detect":
            result = session.detect(args.scope).to_dict()
        elif args.command == "fill":
            result = _run_fill(session, args, browser, run_paths, logger)
        elif args.command == "answer":
            result = _run_answer(session, args)
        else:
            parser.error(f"Unknown command: {args.command}")

    record_run(result, run_paths, args.url)
    print(json.dumps(result, indent=2))


def record_run(
    result: Dict[str, object], run_paths: RunPaths, url: str
) -> Path:
    result["run_id"] = run_paths.run_id
    result["url"] = url
    result["job_board"] = is_job_board(url)
    return write_json(run_paths.build_path(f"{run_paths.command}.json"), result)


def _run_fill(
    session: DetectionSession,
    args: argparse.Namespace,
    browser: BrowserSession,
    run_paths: RunPaths,
    logger: logging.Logger,
) -> Dict[str, object]:
    detection = session.detect(args.scope)
    if not detection.detected:
        return {"success": False, "error": "no_form_detected"}
    try:
        report = session.autofill()
    except AutofillError as exc:
        logger.error("Autofill aborted: %s", exc)
        return {"success": False, "error": exc.code, "message": exc.user_message}
    shot = browser.screenshot(run_paths.build_path("filled.png"))
    payload: Dict[str, object] = {"success": True, "screenshot": str(shot)}
    payload.update(report.to_dict())
    return payload


def _run_answer(
    session: DetectionSession, args: argparse.Namespace
) -> Dict[str, object]:
    outcome: Dict[str, object] = {}
    session.notify = outcome.update
    session.handle_message(
        {
            "action": "generateResponse",
            "question": args.question,
            "jobTitle": args.job_title,
            "company": args.company,
        }
    )
    return _answer_payload(outcome)


def _answer_payload(outcome: Dict[str, object]) -> Dict[str, object]:
    if "response" in outcome:
        return {"success": True, "response": outcome["response"]}
    return {
        "success": False,
        "error": outcome.get("error"),
        "message": outcome.get("message"),
    }


if __name__ == "__main__":  # pragma: no cover
    main()
