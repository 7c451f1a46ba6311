"""
Helpers shared by the test modules
"""
from pathlib import Path


def read_rows(path):
    """Non-empty lines of a data file."""
    return [line for line in Path(path).read_text(encoding="utf-8").splitlines() if line.strip()]
