"""
Run an intake through the analysis pipeline from the command line.

Usage:
    litfund analyze intake.json --attach complaint.pdf --attach photo.jpg
    litfund analyze intake.json --json     # sections as JSON
    litfund analyze intake.json --raw      # model answer, unsegmented
    litfund serve --port 8000

The intake file holds the same camelCase fields the HTTP API accepts.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .config import Settings
from .engine.analyzer import analyze_intake
from .engine.attachments import ingest_paths
from .engine.llm import GatewayConfig, ModelGateway
from .engine.segmenter import sections_to_text, segment
from .errors import EmptyResultError, LitfundError
from .schemas import AnalyzeRequest, Attachment, format_currency


async def run_analysis(args: argparse.Namespace, settings: Settings) -> int:
    request = AnalyzeRequest.model_validate_json(Path(args.intake).read_text())

    attachments: list[Attachment] = list(request.attachments or [])
    for error in ingest_paths(args.attach, attachments, settings.max_attachment_bytes):
        print(f"WARNING: {error.message}", file=sys.stderr)
    request.attachments = attachments or None

    missing = request.missing_required_fields()
    if missing:
        print(f"ERROR: required field(s) missing: {', '.join(missing)}", file=sys.stderr)
        return 1

    gateway = ModelGateway(GatewayConfig.from_settings(settings))
    funding = format_currency(request.funding_request)
    print(f"Analyzing intake (funding ${funding}, {len(attachments)} attachment(s))...",
          file=sys.stderr)

    text = await analyze_intake(request, gateway)
    if not text.strip():
        raise EmptyResultError()

    if args.raw:
        print(text)
        return 0

    sections = segment(text)
    if args.json:
        print(json.dumps([s.model_dump(mode="json") for s in sections], indent=2))
    else:
        print(sections_to_text(sections))
    return 0


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("litfund.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="litfund", description="Litigation funding intake analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Analyze an intake JSON file")
    p_analyze.add_argument("intake", help="Path to the intake JSON file")
    p_analyze.add_argument("--attach", action="append", default=[], help="File to attach (repeatable)")
    p_analyze.add_argument("--raw", action="store_true", help="Print the model answer without segmenting")
    p_analyze.add_argument("--json", action="store_true", help="Print sections as JSON")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    if args.command == "serve":
        return serve(args)

    try:
        return asyncio.run(run_analysis(args, Settings()))
    except LitfundError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
