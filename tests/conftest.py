import sys
from pathlib import Path

import pytest

# Ensure the repository root (which contains the `cowork` package) is importable in tests.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cowork.common.models import Listing


@pytest.fixture
def make_listing():
    counter = {"n": 0}

    def _make(**overrides) -> Listing:
        counter["n"] += 1
        values = {
            "name": f"Space {counter['n']}",
            "address": f"{counter['n']} Main St",
            "city": "Austin",
            "state": "TX",
            "country": "United States",
        }
        values.update(overrides)
        return Listing(**values)

    return _make
