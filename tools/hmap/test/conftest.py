"""Shared fixtures for hmap tests."""

import pytest
import sys
import os

# Add the project root to sys.path so 'tools.hmap' is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", ".."))

from tools.hmap.entry import Entry
from tools.hmap.headermap import encode


SAMPLE_ENTRIES = [
    Entry(key="Foo/Foo.h", prefix="/Users/dev/Source/Foo/", suffix="Foo.h"),
    Entry(key="Foo/Bar.h", prefix="/Users/dev/Source/Foo/", suffix="Bar.h"),
    Entry(key="Baz.h", prefix="/Users/dev/Source/Baz/include/", suffix="Baz.h"),
    Entry(key="A", prefix="B", suffix="C"),
]


SAMPLE_JSON = """\
{
  "A": {"prefix": "B", "suffix": "C"},
  "D": {"prefix": "E", "suffix": "F"}
}
"""


SAMPLE_YAML = """\
A:
  prefix: B
  suffix: C
D:
  prefix: E
  suffix: F
"""


@pytest.fixture
def sample_entries():
    """A handful of realistic entries with unique keys."""
    return list(SAMPLE_ENTRIES)


@pytest.fixture
def sample_hmap():
    """Native-order header map binary of SAMPLE_ENTRIES."""
    return encode(SAMPLE_ENTRIES)


@pytest.fixture
def sample_json():
    return SAMPLE_JSON


@pytest.fixture
def sample_yaml():
    return SAMPLE_YAML
