"""Tests of the packaging metadata in setup.py."""

import pathlib
import re
import sys

SETUP_PY = pathlib.Path(__file__).parent.parent / "setup.py"


def test_python_requires():
    # ExceptionGroup and match statements need 3.11.
    match = re.search(r"python_requires=\">=(\d+)\.(\d+)\"", SETUP_PY.read_text())
    assert match is not None
    minimum = (int(match[1]), int(match[2]))
    assert minimum >= (3, 11)
    assert sys.version_info[:2] >= minimum
