"""
Pytest configuration and fixtures for dwarven-names tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing dwarven_names
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document under tmp_path and return its path."""
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path

    return _write
