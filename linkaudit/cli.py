"""
Command line entry point.

Usage:
    linkaudit https://bit.ly/market-crash-insider
    linkaudit --mode full --json https://example.com/news
    linkaudit --demo
"""

import argparse
import logging
import sys

from linkaudit import config
from linkaudit.app.report import explain, to_json
from linkaudit.app.scanner import Analyzer
from linkaudit.config import DEMO_LINKS, Mode
from linkaudit.errors import InvalidUrl


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkaudit", description="Assess how trustworthy a link looks.")
    parser.add_argument("urls", nargs="*", help="URLs to analyze")
    parser.add_argument("--mode", choices=[m.value for m in Mode], default=config.DEFAULT_MODE.value,
                        help="light: URL only; full: also fetch the page text")
    parser.add_argument("--json", action="store_true", help="print the JSON export instead of a summary")
    parser.add_argument("--demo", action="store_true", help="analyze the built-in demo links")
    return parser


def main(argv=None, analyzer: Analyzer = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL)

    urls = list(args.urls) + (list(DEMO_LINKS) if args.demo else [])
    if not urls:
        build_parser().print_usage(sys.stderr)
        return 1

    analyzer = analyzer or Analyzer()
    status = 0
    for url in urls:
        try:
            result = analyzer.analyze_sync(url, args.mode)
        except InvalidUrl as e:
            print(f"{url}: invalid URL ({e.reason})", file=sys.stderr)
            status = 2
            continue

        if args.json:
            print(to_json(result))
            continue
        print("=" * 80)
        print("URL:", url)
        print(f"Score: {result.scores.overall} Verdict: {result.labels.verdict}")
        for line in explain(result):
            print("-", line)
    return status


if __name__ == "__main__":
    sys.exit(main())
