"""Shared fixtures for the test suite."""

import pytest

from gotest_junit.config import CONFIG_KEYS

SAMPLE_TRANSCRIPT = """\
=== RUN   TestA
--- PASS: TestA (0.01s)
=== RUN   TestB
some failure detail
--- FAIL: TestB (0.02s)
FAIL    example.com/pkg    0.03s
"""

MULTI_PACKAGE_TRANSCRIPT = """\
=== RUN   TestParse
--- PASS: TestParse (0.10s)
=== RUN   TestParseEmpty
--- PASS: TestParseEmpty (0.00s)
PASS
ok  	example.com/parser	0.120s
=== RUN   TestWrite
    writer_test.go:42: expected 3 bytes, got 2
--- FAIL: TestWrite (1.50s)
=== RUN   TestFlush
--- PASS: TestFlush (0.25s)
FAIL
FAIL	example.com/writer	1.9s
"""


@pytest.fixture(autouse=True)
def clean_config(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and any .env file."""
    for key in CONFIG_KEYS + ['GOTEST_JUNIT_CONFIG']:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_transcript() -> str:
    return SAMPLE_TRANSCRIPT


@pytest.fixture
def multi_package_transcript() -> str:
    return MULTI_PACKAGE_TRANSCRIPT
