"""
Command Line Interface for the Interview Grader platform.

This module provides a CLI for serving question sets, scoring submission files
offline, and inspecting stored interview results.
"""
import argparse
import contextlib
import json
import logging
import random
import sys
from typing import List, Optional

from pydantic import ValidationError

from interview_grader.core.assembler import SessionAssembler
from interview_grader.core.catalog import CatalogValidationError, RubricCatalog
from interview_grader.core.serializers import to_admin_summary, to_submit_response
from interview_grader.core.statistics import compute_statistics
from interview_grader.core.storage import PersistenceError, create_store
from interview_grader.models.session import SessionSubmission
from interview_grader.tools.report_tools import generate_interview_report
from interview_grader.utils.config import (
    get_interview_config,
    get_reports_config,
    get_storage_config,
    log_config,
)

logger = logging.getLogger(__name__)


def _print_json(data):
    print(json.dumps(data, indent=2))


def _open_store():
    return contextlib.closing(create_store(get_storage_config()))


def _load_catalog(path: Optional[str]) -> RubricCatalog:
    return RubricCatalog.default(path or get_interview_config().get("question_bank"))


def cmd_questions(args) -> int:
    catalog = _load_catalog(args.question_bank)
    interview_config = get_interview_config()
    theory = args.theory if args.theory is not None else interview_config.get("theory_count", 10)
    coding = args.coding if args.coding is not None else interview_config.get("coding_count", 10)
    rng = random.Random(args.seed) if args.seed is not None else random.Random()
    _print_json(catalog.select_questions(theory, coding, rng=rng))
    return 0


def cmd_score(args) -> int:
    """Score a submission file; optionally write the response and persist the result."""
    try:
        with open(args.submission, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        print(f"Cannot read submission {args.submission}: {e}", file=sys.stderr)
        return 2

    if not isinstance(payload, dict):
        print("Submission must be a JSON object", file=sys.stderr)
        return 2

    try:
        submission = SessionSubmission.from_payload(payload)
    except ValidationError as e:
        print(f"Invalid submission {args.submission}: {e}", file=sys.stderr)
        return 2

    catalog = _load_catalog(args.question_bank)
    result = SessionAssembler(catalog).assemble(submission)
    response = to_submit_response(result)

    exit_code = 0
    if args.save:
        try:
            with _open_store() as store:
                outcome = store.append(result)
            error = None if outcome.success else outcome.error
        except PersistenceError as e:
            error = str(e)
        response["persisted"] = error is None
        if error is not None:
            print(f"Failed to save interview {result.id}: {error}", file=sys.stderr)
            exit_code = 1

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(response, f, indent=2)
        print(f"Result written to {args.out}")
    else:
        _print_json(response)
    return exit_code


def cmd_list(args) -> int:
    with _open_store() as store:
        rows = [to_admin_summary(record) for record in store.list_all()]
    if args.json:
        _print_json(rows)
        return 0
    if not rows:
        print("No interviews stored.")
        return 0
    for row in rows:
        print(f"{row['id']}  {row['candidateName']:<24} {row['score']:<20} {row['status']}")
    return 0


def cmd_show(args) -> int:
    with _open_store() as store:
        record = store.get_by_id(args.interview_id)
    if record is None:
        print(f"Interview not found: {args.interview_id}", file=sys.stderr)
        return 1
    _print_json(record)
    return 0


def cmd_stats(args) -> int:
    with _open_store() as store:
        records = store.list_all()
    _print_json(compute_statistics(records, _load_catalog(args.question_bank)))
    return 0


def cmd_report(args) -> int:
    with _open_store() as store:
        record = store.get_by_id(args.interview_id)
    if record is None:
        print(f"Interview not found: {args.interview_id}", file=sys.stderr)
        return 1
    output_dir = args.output_dir or get_reports_config().get("output_dir", "reports")
    report = generate_interview_report(record, output_format=args.format, output_dir=output_dir)
    _print_json(report)
    return 0 if report.get("success") else 1


def cmd_serve(args) -> int:
    from interview_grader.server import start_server

    start_server(host=args.host, port=args.port)
    return 0


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Java technical interview grader")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--question-bank", help="Path to a question bank YAML file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    questions = subparsers.add_parser("questions", help="Print a structured question set")
    questions.add_argument("--theory", type=int, help="Number of Part A questions")
    questions.add_argument("--coding", type=int, help="Number of Part B questions")
    questions.add_argument("--seed", type=int, help="Seed for a reproducible selection")
    questions.set_defaults(func=cmd_questions)

    score = subparsers.add_parser("score", help="Score a submission JSON file")
    score.add_argument("submission", help="Path to the submission JSON")
    score.add_argument("--out", help="Write the scored result to this file")
    score.add_argument("--save", action="store_true", help="Persist the result to the configured store")
    score.set_defaults(func=cmd_score)

    list_parser = subparsers.add_parser("list", help="List stored interviews")
    list_parser.add_argument("--json", action="store_true", help="Print summary rows as JSON")
    list_parser.set_defaults(func=cmd_list)

    show = subparsers.add_parser("show", help="Print a stored interview record")
    show.add_argument("interview_id")
    show.set_defaults(func=cmd_show)

    stats = subparsers.add_parser("stats", help="Print aggregate statistics")
    stats.set_defaults(func=cmd_stats)

    report = subparsers.add_parser("report", help="Generate a report for a stored interview")
    report.add_argument("interview_id")
    report.add_argument("--format", choices=["json", "pdf", "both"], default="both")
    report.add_argument("--output-dir", help="Directory for report files")
    report.set_defaults(func=cmd_report)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Host to bind the server to")
    serve.add_argument("--port", type=int, help="Port to bind the server to")
    serve.set_defaults(func=cmd_serve)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI, used by setup.py entry_points."""
    args = parse_args(argv)
    log_config(level="DEBUG" if args.debug else None)

    try:
        return args.func(args)
    except CatalogValidationError as e:
        print(f"Invalid question bank: {e}", file=sys.stderr)
        return 2
    except PersistenceError as e:
        print(f"Storage error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
