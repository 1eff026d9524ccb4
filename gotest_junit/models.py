"""
Data models for parsed test transcripts.
"""

from dataclasses import dataclass, field
from enum import Enum


class TestStatus(Enum):
    """Status of a test case."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass
class TestCase:
    """Represents a single test case result."""
    name: str = ""
    duration_seconds: float = 0.0
    status: TestStatus = TestStatus.UNKNOWN
    output: list[str] = field(default_factory=list)

    @property
    def output_text(self) -> str:
        return "".join(line + "\n" for line in self.output)


@dataclass
class TestSuite:
    """Represents a test suite (collection of test cases)."""
    name: str = ""
    duration_seconds: float = 0.0
    test_cases: list[TestCase] = field(default_factory=list)

    def _count(self, status: TestStatus) -> int:
        return sum(1 for case in self.test_cases if case.status == status)

    @property
    def tests(self) -> int:
        return len(self.test_cases)

    @property
    def failures(self) -> int:
        return self._count(TestStatus.FAILED)

    @property
    def errors(self) -> int:
        return self._count(TestStatus.ERROR)

    @property
    def skipped(self) -> int:
        return self._count(TestStatus.SKIPPED)

    @property
    def passed(self) -> int:
        # Cases without an explicit status are counted here as well
        return self.tests - self.failures - self.errors - self.skipped
