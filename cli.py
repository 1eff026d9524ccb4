#!/usr/bin/env python3
"""CLI for converting go test output into JUnit XML."""

import argparse
import json
import logging
import sys

import core
from gotest_junit.parser import ReadError


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def _read_suites(args):
    """Parse the transcript selected by --input/--url, or standard input."""
    try:
        return core.read_input(path=args.input, url=args.url)
    except ReadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def cmd_convert(args):
    """Convert a transcript into a JUnit XML report."""
    suites = _read_suites(args)
    if suites is None:
        return 1

    data = core.convert(suites,
                        xml_declaration=True if args.xml_declaration else None,
                        indent=args.indent)
    try:
        core.write_output(data, args.output)
    except OSError as e:
        print(f"Error: cannot write report: {e}", file=sys.stderr)
        return 1
    return 0


def _print_summary(summary: dict):
    """Print human-readable summary."""
    print(f"\n{'='*60}")
    print(f"Suites:  {summary['suites']}")
    print(f"Total:   {summary['total']}")
    print(f"Passed:  {summary['passed']}")
    print(f"Failed:  {summary['failed']}")
    print(f"Errors:  {summary['errors']}")
    print(f"Skipped: {summary['skipped']}")
    print(f"Pass Rate: {summary['pass_rate']:.1f}%")
    print(f"Duration: {summary['duration_seconds']:.2f}s")

    failed_tests = summary["failed_tests"]
    if failed_tests:
        print(f"\nFailed Tests ({len(failed_tests)}):")
        for t in failed_tests[:10]:
            print(f"  - {t['suite']}: {t['name'][:70]}")
        if len(failed_tests) > 10:
            print(f"  ... and {len(failed_tests) - 10} more")
    print(f"{'='*60}\n")


def cmd_summary(args):
    """Print pass/fail counts for a transcript."""
    suites = _read_suites(args)
    if suites is None:
        return 1

    summary = core.summarize(suites)
    if args.format == 'json':
        print(json.dumps(summary, indent=2))
    else:
        _print_summary(summary)

    return 0 if summary["failed"] == 0 else 1


def _add_input_args(p):
    source = p.add_mutually_exclusive_group()
    source.add_argument('--input', '-i', help='Transcript file (default: stdin)')
    source.add_argument('--url', '-u', help='Download the transcript from a URL')


def build_parser():
    parser = argparse.ArgumentParser(description='Convert go test output to JUnit XML')
    parser.add_argument('-v', '--verbose', action='store_true')

    sub = parser.add_subparsers(dest='command')

    p = sub.add_parser('convert', help='Write a JUnit XML report')
    _add_input_args(p)
    p.add_argument('--output', '-o', help='Report file (default: stdout)')
    p.add_argument('--indent', help='Pretty print with this indentation string')
    p.add_argument('--xml-declaration', action='store_true',
                   help='Start the report with an XML declaration')

    p = sub.add_parser('summary', help='Print test counts')
    _add_input_args(p)
    p.add_argument('--format', '-f', choices=['text', 'json'], default='text')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    cmds = {
        'convert': cmd_convert,
        'summary': cmd_summary,
    }
    return cmds[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
