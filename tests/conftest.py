import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]


def _add_src_to_path() -> None:
    src_path = ROOT / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding static test input files."""
    return ROOT / "tests" / "fixtures"
