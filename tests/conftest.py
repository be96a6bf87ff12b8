from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from gtoicm.core.models import PayoutStructure, Player  # noqa: E402


@pytest.fixture
def three_players() -> list[Player]:
    return [
        Player(id="p1", chips=5000),
        Player(id="p2", chips=3000),
        Player(id="p3", chips=2000),
    ]


@pytest.fixture
def sng_payouts() -> PayoutStructure:
    return PayoutStructure.percentages([50, 30, 20], 1000)
