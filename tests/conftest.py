import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import nerdle_solver without installing
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from nerdle_solver.generate import generate  # noqa: E402


def pytest_addoption(parser):
    parser.addoption("--runslow", action="store_true", default=False, help="run slow enumeration tests")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--runslow"):
        return
    skip_slow = pytest.mark.skip(reason="needs --runslow")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(scope="session")
def micro_corpus():
    """All 127 five-slot equations."""
    return list(generate(5))


@pytest.fixture
def micro_file(tmp_path: Path, micro_corpus):
    path = tmp_path / "micro_nerdle.txt"
    path.write_text("\n".join(micro_corpus) + "\n", encoding="utf-8")
    return path
