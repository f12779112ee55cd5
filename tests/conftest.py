"""
Shared fixtures for the converter tests.
"""

from datetime import datetime

import pytest

from stoidoc.core.diagnostics import DiagnosticLog
from stoidoc.core.options import ConvertOptions
from stoidoc.lookup import LookupTable, load_lookup_table


@pytest.fixture
def timestamp():
    return datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture
def bundled_lookup():
    return load_lookup_table()


@pytest.fixture
def small_lookup():
    return LookupTable.from_pairs([
        ("Box", "BX"),
        ("CE0120", "CE0120_Mark"),
        ("Large", "L"),
    ])


@pytest.fixture
def options():
    return ConvertOptions(graphics_path="G:\\GRAPHICS\\")


@pytest.fixture
def diagnostics():
    return DiagnosticLog()
