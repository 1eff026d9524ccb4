"""
Parser for `go test -v` transcripts.

Each line is classified on its own by `classify_line`, which returns an action
describing what the line means. `ParserState` applies those actions in order,
accumulating cases into the current suite until a suite summary line
(`ok ...` or `FAIL <pkg> ...`) closes it.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, TextIO, Union

from .models import TestCase, TestStatus, TestSuite

logger = logging.getLogger(__name__)

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

DURATION_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_DURATION_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")


class ReadError(Exception):
    """The input source failed for a reason other than end of input."""


def parse_duration(text: str) -> Optional[float]:
    """
    Parse a Go duration string such as "0.03s", "1m2.5s" or "300ms".

    Returns:
        The duration in seconds, or None if the text is not a valid duration.
    """
    if not text:
        return None

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return 0.0
    if not text:
        return None

    total_ns = 0
    pos = 0
    while pos < len(text):
        match = _DURATION_COMPONENT.match(text, pos)
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            return None
        if unit not in DURATION_UNITS:
            return None
        value = Decimal(f"{whole or '0'}.{fraction or '0'}")
        total_ns += int(value * DURATION_UNITS[unit])
        pos = match.end()

    seconds, nanos = divmod(total_ns, SECOND)
    return sign * (seconds + nanos / 1e9)


def parse_case_duration(fields: list[str]) -> Optional[float]:
    """Parse the "(0.01s)" or "(0.01 seconds)" part of a case result line."""
    if len(fields) <= 3:
        return None

    value = fields[3]
    if value.startswith("("):
        value = value[1:]

    if value.endswith(")"):
        value = value[:-1]
    elif len(fields) > 4 and fields[4] == "seconds)":
        pass
    else:
        logger.debug(f"Unterminated case duration: {' '.join(fields[3:])}")
        return None

    if value and (value[-1].isdigit() or value[-1] == "."):
        value += "s"

    duration = parse_duration(value)
    if duration is None:
        logger.debug(f"Ignoring unparseable case duration: {fields[3]}")
    return duration


@dataclass(frozen=True)
class Ignore:
    """Line carries no information."""


@dataclass(frozen=True)
class StartCase:
    """`=== RUN` line: a new case begins."""
    name: str


@dataclass(frozen=True)
class MarkResult:
    """`--- PASS:` / `--- FAIL:` line for the current case."""
    status: TestStatus
    duration: Optional[float] = None


@dataclass(frozen=True)
class EndSuite:
    """`ok <pkg> <time>` / `FAIL <pkg> <time>` line closing the current suite."""
    name: str
    duration: Optional[float] = None


@dataclass(frozen=True)
class AppendOutput:
    """Any other line, captured as output of the current case."""
    text: str


Action = Union[Ignore, StartCase, MarkResult, EndSuite, AppendOutput]


def classify_line(line: str) -> Action:
    """Classify a single transcript line (without its line break)."""
    if line in ("PASS", "FAIL"):
        return Ignore()

    if line.startswith("=== RUN"):
        fields = line.split()
        return StartCase(fields[2] if len(fields) > 2 else "")

    if line.startswith("--- FAIL:"):
        return MarkResult(TestStatus.FAILED, parse_case_duration(line.split()))

    if line.startswith("--- PASS:"):
        return MarkResult(TestStatus.PASSED, parse_case_duration(line.split()))

    if line.startswith("FAIL") or line.startswith("ok"):
        fields = line.split()
        name = fields[1] if len(fields) > 1 else ""
        duration = parse_duration(fields[2]) if len(fields) > 2 else None
        return EndSuite(name, duration)

    return AppendOutput(line)


class ParserState:
    """Accumulates suites and cases while transcript lines are applied."""

    def __init__(self):
        self.suites: list[TestSuite] = []
        self.suite = TestSuite()
        # Index into self.suite.test_cases, None until a case has started
        self.case_index: Optional[int] = None
        self.placeholder = TestCase()

    @property
    def current_case(self) -> TestCase:
        if self.case_index is None:
            return self.placeholder
        return self.suite.test_cases[self.case_index]

    def apply(self, action: Action):
        if isinstance(action, StartCase):
            self.suite.test_cases.append(TestCase(name=action.name))
            self.case_index = len(self.suite.test_cases) - 1
            logger.debug(f"Started case {action.name!r}")

        elif isinstance(action, MarkResult):
            case = self.current_case
            case.status = action.status
            if action.duration is not None:
                case.duration_seconds = action.duration

        elif isinstance(action, EndSuite):
            self.suite.name = action.name
            if action.duration is not None:
                self.suite.duration_seconds = action.duration
            self.suites.append(self.suite)
            logger.debug(f"Finished suite {action.name!r} with {self.suite.tests} cases")
            self.suite = TestSuite()
            self.case_index = None
            self.placeholder = TestCase()

        elif isinstance(action, AppendOutput):
            self.current_case.output.append(action.text)

    def pending_cases(self) -> int:
        """Number of cases in the open suite that no summary line has closed yet."""
        return len(self.suite.test_cases)


def parse_lines(lines: Iterable[str]) -> list[TestSuite]:
    """
    Parse transcript lines into finished test suites.

    A suite still open when the input ends is dropped.
    """
    state = ParserState()
    for line in lines:
        state.apply(classify_line(line.rstrip("\r\n")))

    if state.pending_cases():
        logger.debug(f"Dropping {state.pending_cases()} cases of an unterminated suite")
    return state.suites


def parse_stream(stream: TextIO) -> list[TestSuite]:
    """
    Parse a text stream into test suites.

    Raises:
        ReadError: If reading from the stream fails.
    """
    try:
        return parse_lines(stream)
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"Failed to read test output: {e}") from e
