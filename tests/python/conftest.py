import sys
from pathlib import Path
from typing import Sequence, TypeVar

import pytest

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

T = TypeVar("T")


class ScriptedRng:
    """Stand-in random source with fixed draws, for pinning down a single tick."""

    def __init__(self, value: float = 0.99, choice_index: int = 0):
        self.value = value
        self.choice_index = choice_index
        self.choices = 0

    def next_float(self) -> float:
        return self.value

    def next_int(self, max_value: int) -> int:
        return 0

    def next_between(self, low: int, high: int) -> int:
        return low

    def choice(self, items: Sequence[T]) -> T:
        self.choices += 1
        return items[self.choice_index % len(items)]

    def sample(self, items: Sequence[T], count: int) -> list[T]:
        return list(items[:count])


@pytest.fixture
def scripted_rng():
    return ScriptedRng


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run long simulations on a full-size city",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "slow: marks tests that run many ticks on a full-size city",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-slow"):
        return

    skip_marker = pytest.mark.skip(
        reason="Long-running simulation (use --run-slow)",
    )

    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_marker)
