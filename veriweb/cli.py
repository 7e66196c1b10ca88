"""
Command-line URL classifier.

Run: classify-url http://192.168.1.5/login
     classify-url --json --extended "http://paypa1.com/verify"

The exit code is always 0: a MALICIOUS verdict is a result, not a failure.
"""

import argparse
import sys

from .app.report import render_text
from .app.scanner import analyze
from .config import configure_logging, resolve_rules


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="classify-url", description="Classify a URL as SAFE, SUSPICIOUS or MALICIOUS")
    parser.add_argument('url', help='URL to analyze (quote it in the shell)')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser.add_argument('--extended', action='store_true', help='Use the extended rule set')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log every pipeline stage')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    # logs go to stderr so stdout stays parseable
    configure_logging("DEBUG" if args.verbose else "WARNING")

    _, rules = resolve_rules("extended" if args.extended else "default")
    result = analyze(args.url, rules)

    if args.json:
        sys.stdout.write(result.to_json() + "\n")
    else:
        sys.stdout.write(render_text(result, url=args.url) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
