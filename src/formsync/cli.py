"""
Command-line entry point.

    formsync render form.html --target python
    formsync render payload.yaml --target html
    formsync extract sample.py --target python
    formsync analyze payload.json
    formsync submit payload.json [--url URL]

Exit status is 1 for decode failures and rejected submissions.
"""
import argparse
import json
import logging
import sys

from formsync.analyzer import analyze_form
from formsync.backends import Target, anchor_for, render
from formsync.config import Config
from formsync.embedded_block import extract_block
from formsync.markup_parser import parse_markup
from formsync.merger import merge_questions
from formsync.payload import (
    PayloadDecodeError,
    decode_payload_text,
    payload_from_yaml,
    payload_to_json,
    to_payload,
)
from formsync.submission import SubmissionClient, SubmissionError


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _load_questions(path: str):
    """Markup by default; payload documents by .json, .yaml or .yml extension."""
    text = _read(path)
    if path.endswith(".json"):
        return decode_payload_text(text)
    if path.endswith((".yaml", ".yml")):
        return payload_from_yaml(text)
    return merge_questions([], parse_markup(text))


def cmd_render(args) -> int:
    try:
        questions = _load_questions(args.source)
    except PayloadDecodeError as e:
        print(f"Invalid payload: {e}", file=sys.stderr)
        return 1
    print(render(args.target, questions))
    return 0


def cmd_extract(args) -> int:
    source = _read(args.sample)
    block = extract_block(source, anchor_for(args.target))
    if block is None:
        print("No payload block found", file=sys.stderr)
        return 1
    try:
        questions = decode_payload_text(block.block_text)
    except PayloadDecodeError as e:
        print(f"Invalid payload: {e}", file=sys.stderr)
        return 1
    print(payload_to_json(to_payload(questions)))
    return 0


def cmd_analyze(args) -> int:
    try:
        questions = _load_questions(args.source)
    except PayloadDecodeError as e:
        print(f"Invalid payload: {e}", file=sys.stderr)
        return 1
    report = analyze_form(questions)
    print(f"Questions: {report.total_questions}")
    print(f"Unconditional: {sorted(i + 1 for i in report.unconditional)}")
    print(f"Conditional: {sorted(i + 1 for i in report.conditional)}")
    for warning in report.warnings:
        print(f" - {warning}")
    return 0


def cmd_submit(args) -> int:
    try:
        document = json.loads(_read(args.payload))
    except ValueError as e:
        print(f"Invalid payload: {e}", file=sys.stderr)
        return 1
    if not isinstance(document, dict):
        print("Invalid payload: expected a JSON object", file=sys.stderr)
        return 1
    try:
        result = SubmissionClient(url=args.url).submit(document)
    except SubmissionError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f"success={result.success} id={result.identifier}")
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="formsync", description="Form definition round-trip tools")
    sub = parser.add_subparsers(dest="command", required=True)
    targets = [t.value for t in Target]

    p = sub.add_parser("render", help="Render markup as another view")
    p.add_argument("source", help="Path to form markup or payload (.json, .yaml)")
    p.add_argument("--target", choices=targets, default=Target.PYTHON.value)
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("extract", help="Read the payload block out of a code sample")
    p.add_argument("sample", help="Path to code sample")
    p.add_argument("--target", choices=targets[1:], default=Target.PYTHON.value)
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("analyze", help="Report diagnostics for form markup")
    p.add_argument("source", help="Path to form markup or payload (.json, .yaml)")
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("submit", help="POST a payload document")
    p.add_argument("payload", help="Path to payload JSON")
    p.add_argument("--url", default=None)
    p.set_defaults(func=cmd_submit)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    Config.validate()
    logging.basicConfig(level=Config.LOG_LEVEL)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
