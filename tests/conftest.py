import sys
from pathlib import Path

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mixprec.core.rng import Generator  # noqa: E402


@pytest.fixture
def generator():
    return Generator(seed=1234)
