#!/usr/bin/env python3
"""
Core operations used by the CLI.
Contains the read, convert and summarize steps of a transcript conversion.
"""

import io
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional

from gotest_junit.config import get_input_encoding, get_xml_options
from gotest_junit.log_client import LogClient
from gotest_junit.models import TestStatus, TestSuite
from gotest_junit.parser import ReadError, parse_lines, parse_stream
from gotest_junit.report import write_xml

logger = logging.getLogger(__name__)


def read_input(path: Optional[str] = None, url: Optional[str] = None,
               stream: Optional[BinaryIO] = None) -> list[TestSuite]:
    """
    Read a go test transcript and parse it into suites.

    Exactly one source is used: a URL, a file path, or a binary stream
    (standard input when nothing is given).

    Raises:
        ReadError: If the source cannot be read.
    """
    if url:
        return parse_lines(LogClient().fetch_lines(url))

    encoding = get_input_encoding()
    if path:
        logger.debug(f"Reading transcript from {path}")
        try:
            with open(path, encoding=encoding, errors="replace", newline="\n") as f:
                return parse_stream(f)
        except OSError as e:
            raise ReadError(f"Cannot open {path}: {e}") from e

    raw = stream if stream is not None else sys.stdin.buffer
    text = io.TextIOWrapper(raw, encoding=encoding, errors="replace", newline="\n")
    try:
        return parse_stream(text)
    finally:
        # Leave the caller's stream open
        text.detach()


def convert(suites: list[TestSuite], xml_declaration: Optional[bool] = None,
            indent: Optional[str] = None) -> bytes:
    """Render suites as JUnit XML. Unset options fall back to the configuration."""
    options = get_xml_options()
    if xml_declaration is not None:
        options["xml_declaration"] = xml_declaration
    if indent is not None:
        options["indent"] = indent
    return write_xml(suites, **options)


def write_output(data: bytes, path: Optional[str] = None) -> None:
    """Write report bytes to a file, or to standard output."""
    if path:
        Path(path).write_bytes(data)
        logger.info(f"Wrote report to {path}")
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def summarize(suites: list[TestSuite]) -> dict:
    """Aggregate counts over all suites."""
    results = {"suites": len(suites), "total": 0, "passed": 0, "failed": 0,
               "errors": 0, "skipped": 0, "pass_rate": 0.0, "duration_seconds": 0.0,
               "failed_tests": []}

    for suite in suites:
        results["total"] += suite.tests
        results["passed"] += suite.passed
        results["failed"] += suite.failures
        results["errors"] += suite.errors
        results["skipped"] += suite.skipped
        results["duration_seconds"] += suite.duration_seconds

        for test in suite.test_cases:
            if test.status == TestStatus.FAILED:
                results["failed_tests"].append({
                    "suite": suite.name,
                    "name": test.name,
                    "duration_seconds": test.duration_seconds,
                })

    # Calculate pass rate excluding skipped tests
    executed = results["total"] - results["skipped"]
    if executed > 0:
        results["pass_rate"] = (results["passed"] / executed) * 100

    return results
