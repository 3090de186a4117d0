"""Pytest configuration for formknobs tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def data_dir():
    """Directory holding schema and record files used by the tests."""
    return DATA_DIR


@pytest.fixture
def valid_product():
    """A raw product record every product schema variant accepts."""
    return {
        "name": "Blue Shirt",
        "description": "A nice blue cotton shirt",
        "price": "19.99",
        "category": "shirts",
        "is_featured": "on",
    }


@pytest.fixture
def invalid_product():
    """A raw product record failing four fields."""
    return {
        "name": "Hi",
        "description": "short",
        "price": "-5",
        "category": "uncategorised",
        "is_featured": None,
    }
