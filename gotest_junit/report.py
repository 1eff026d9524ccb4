"""
JUnit XML report writer.

Produces a <testsuites> document with one <testsuite> per parsed suite and one
<testcase> per case. Failed cases carry a <failure><message> element holding
the output captured while the case was running.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import BinaryIO, Optional

from .models import TestStatus, TestSuite

logger = logging.getLogger(__name__)

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def xml_safe(text: str) -> str:
    """Replace characters XML cannot carry (e.g. ANSI escapes) with U+FFFD."""
    return _INVALID_XML_CHARS.sub("\ufffd", text)


def format_seconds(value: float) -> str:
    """Shortest text form of a duration in seconds ("0.03", "0", "1.5")."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def build_tree(suites: list[TestSuite]) -> ET.Element:
    """Build the <testsuites> element tree for the given suites."""
    root = ET.Element("testsuites")

    for suite in suites:
        suite_el = ET.SubElement(root, "testsuite", {
            "name": xml_safe(suite.name),
            "errors": str(suite.errors),
            "failures": str(suite.failures),
            "skipped": str(suite.skipped),
            "tests": str(suite.tests),
            "time": format_seconds(suite.duration_seconds),
        })

        for case in suite.test_cases:
            case_el = ET.SubElement(suite_el, "testcase", {
                "name": xml_safe(case.name),
                "time": format_seconds(case.duration_seconds),
            })
            # Error and skipped cases only show up in the suite counters
            if case.status == TestStatus.FAILED:
                failure = ET.SubElement(case_el, "failure")
                message = ET.SubElement(failure, "message")
                message.text = xml_safe(case.output_text)

    return root


def write_xml(suites: list[TestSuite], xml_declaration: bool = False,
              indent: Optional[str] = None) -> bytes:
    """
    Serialize suites into a JUnit XML document.

    Args:
        suites: Parsed test suites, in output order
        xml_declaration: Prefix the document with an XML declaration
        indent: Indentation string for pretty printing, compact output if None

    Returns:
        The UTF-8 encoded document
    """
    root = build_tree(suites)
    if indent:
        ET.indent(root, space=indent)

    data = ET.tostring(root, encoding="utf-8", xml_declaration=xml_declaration,
                       short_empty_elements=False)
    logger.debug(f"Serialized {len(suites)} suites into {len(data)} bytes")
    return data


def write_report(suites: list[TestSuite], destination: BinaryIO, **options) -> int:
    """Write the XML report to a binary stream. Returns the number of bytes written."""
    data = write_xml(suites, **options)
    destination.write(data)
    destination.flush()
    return len(data)
