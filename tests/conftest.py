"""
Pytest configuration and shared fixtures
"""
import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Add backend directory to path for imports
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from locator.index.base import AIndex  # noqa: E402
from locator.index.fm_index import FMIndex  # noqa: E402
from locator.models.occurrence import Occurrence, SearchRange  # noqa: E402


class StubIndex(AIndex):
    """
    Index answering from a pattern table.

    Patterns in `matches` get a non-empty range whose rows resolve to the
    listed occurrences; `default` (if set) is returned for any other pattern.
    """
    def __init__(self, matches: Dict[str, List[Occurrence]] = None, default: List[Occurrence] = None):
        self.matches = matches or {}
        self.default = default
        self.rows: List[List[Occurrence]] = []
        self.found: List[str] = []
        self.located: List[SearchRange] = []

    @classmethod
    def load(cls, file):
        return cls()

    def find(self, pattern: str) -> SearchRange:
        self.found.append(pattern)
        occurrences = self.matches.get(pattern, self.default)
        if not occurrences:
            return SearchRange.empty()
        first = len(self.rows)
        self.rows.append(list(occurrences))
        return SearchRange(first, first)

    def count(self, searchRange: SearchRange) -> int:
        return len(self.rows[searchRange.first])

    def locate(self, searchRange: SearchRange, sort: bool = True) -> List[Occurrence]:
        self.located.append(searchRange)
        return list(self.rows[searchRange.first])


@pytest.fixture
def nodes():
    return [(1, "ACGTACGTAC"), (2, "GGACGT"), (7, "TTT")]


@pytest.fixture
def fm_index(nodes):
    return FMIndex.from_nodes(nodes, step=4)


@pytest.fixture
def index_file(tmp_path, fm_index):
    path = tmp_path / "graph.npz"
    fm_index.save(str(path))
    return str(path)


@pytest.fixture
def sequence_file(tmp_path):
    path = tmp_path / "reads.txt"
    path.write_text("ACGTAC\nGGAC\nTTTT\n")
    return str(path)


@pytest.fixture
def make_stub():
    """Factory for a StubIndex and a loader class that hands it to SeedLocator."""
    def make(matches=None, default=None):
        stub = StubIndex(matches=matches, default=default)

        class StubLoader:
            @staticmethod
            def load(file):
                return stub

        return stub, StubLoader
    return make
