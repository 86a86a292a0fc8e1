# index/fm_index.py
import zipfile
from collections import defaultdict
from typing import IO, Dict, List, Sequence, Tuple, Union

import numpy as np

from ..constants.constants import NODE_SEPARATOR, OCC_CHECKPOINT_STEP, SENTINEL
from ..errors import ResourceOpenError
from ..models.occurrence import Occurrence, SearchRange
from .base import AIndex

_ARRAYS = ("text", "sa", "node_ids", "node_starts")


class FMIndex(AIndex):
    """
    Plain FM-index (SA + BWT + C + Occ checkpoints) over labelled graph nodes.

    Node labels are joined by NODE_SEPARATOR and closed by SENTINEL, so a
    pattern never matches across two nodes. Suffix array rows resolve to
    (node id, offset) through the node start table.
    """
    def __init__(self, text: str, sa: np.ndarray, node_ids: np.ndarray, node_starts: np.ndarray,
                 step: int = OCC_CHECKPOINT_STEP):
        assert text.endswith(SENTINEL), "Indexed text must end with sentinel '$'"
        self.text = text
        self.n = len(text)
        self.sa = np.asarray(sa, dtype=np.int64)
        self.node_ids = np.asarray(node_ids, dtype=np.int64)
        self.node_starts = np.asarray(node_starts, dtype=np.int64)
        self.bwt = self._bwt_from_sa(text, self.sa)
        self.alphabet = sorted(set(self.bwt))
        self.C = self._build_C(self.bwt)
        self.occ_chk, self.step = self._build_occ(self.bwt, self.alphabet, step)

    @classmethod
    def from_nodes(cls, nodes: Sequence[Tuple[int, str]], step: int = OCC_CHECKPOINT_STEP) -> "FMIndex":
        """
        Index the labels of `nodes`, a sequence of (node id, label) pairs.
        """
        labels = []
        node_ids = []
        node_starts = []
        pos = 0
        for node_id, label in nodes:
            if NODE_SEPARATOR in label or SENTINEL in label:
                raise ValueError(f"label of node {node_id} contains a reserved character")
            node_ids.append(node_id)
            node_starts.append(pos)
            labels.append(label)
            pos += len(label) + 1
        text = NODE_SEPARATOR.join(labels) + SENTINEL
        sa = np.array(cls._suffix_array(text), dtype=np.int64)
        return cls(text, sa, np.array(node_ids, dtype=np.int64), np.array(node_starts, dtype=np.int64), step)

    @classmethod
    def load(cls, file: Union[str, IO]) -> "FMIndex":
        name = file if isinstance(file, str) else getattr(file, "name", None) or "<stream>"
        try:
            with np.load(file, allow_pickle=False) as data:
                arrays = {key: data[key] for key in _ARRAYS}
        except (OSError, ValueError, EOFError, KeyError, zipfile.BadZipFile) as e:
            raise ResourceOpenError(str(name), str(e)) from e
        except (AttributeError, TypeError) as e:
            # a plain .npy array, not an archive
            raise ResourceOpenError(str(name), "not an index archive") from e

        text = str(arrays["text"])
        if not cls._consistent(text, arrays["sa"], arrays["node_ids"], arrays["node_starts"]):
            raise ResourceOpenError(str(name), "corrupt index archive")
        return cls(text, arrays["sa"], arrays["node_ids"], arrays["node_starts"])

    @staticmethod
    def _consistent(text: str, sa: np.ndarray, node_ids: np.ndarray, node_starts: np.ndarray) -> bool:
        """sa is a permutation of the text positions, node starts are sorted and inside the text."""
        n = len(text)
        if not text.endswith(SENTINEL) or sa.ndim != 1 or len(sa) != n:
            return False
        for array in (sa, node_ids, node_starts):
            if array.size and not np.issubdtype(array.dtype, np.integer):
                return False
        if not np.array_equal(np.sort(sa), np.arange(n)):
            return False
        if node_ids.ndim != 1 or node_starts.ndim != 1 or len(node_ids) != len(node_starts):
            return False
        if len(node_starts):
            if node_starts[0] != 0 or node_starts[-1] >= n or np.any(np.diff(node_starts) <= 0):
                return False
        return True

    def save(self, file: Union[str, IO]):
        np.savez_compressed(
            file,
            text=np.array(self.text),
            sa=self.sa,
            node_ids=self.node_ids,
            node_starts=self.node_starts,
        )

    @staticmethod
    def _suffix_array(s: str) -> List[int]:
        n = len(s)
        k = 1
        sa = list(range(n))
        rank = [ord(c) for c in s]
        tmp = [0] * n
        while True:
            sa.sort(key=lambda i: (rank[i], rank[i + k] if i + k < n else -1))
            tmp[sa[0]] = 0
            for i in range(1, n):
                a, b = sa[i - 1], sa[i]
                tmp[b] = tmp[a] + (
                    rank[b] != rank[a] or
                    (rank[b + k] if b + k < n else -1) != (rank[a + k] if a + k < n else -1)
                )
            rank, tmp = tmp, rank
            if rank[sa[-1]] == n - 1:
                break
            k <<= 1
        return sa

    @staticmethod
    def _bwt_from_sa(s: str, sa: np.ndarray) -> str:
        return "".join(s[p - 1] if p != 0 else s[-1] for p in sa.tolist())

    @staticmethod
    def _build_C(bwt: str) -> Dict[str, int]:
        counts = defaultdict(int)
        for ch in bwt:
            counts[ch] += 1
        total = 0
        C = {}
        for ch in sorted(counts):
            C[ch] = total
            total += counts[ch]
        return C

    @staticmethod
    def _build_occ(bwt: str, alphabet: List[str], step: int):
        n = len(bwt)
        chk = {ch: np.zeros((n + step - 1) // step + 1, dtype=np.int64) for ch in alphabet}
        run = {ch: 0 for ch in alphabet}
        for i, ch in enumerate(bwt):
            if i % step == 0:
                bi = i // step
                for a in alphabet:
                    chk[a][bi] = run[a]
            run[ch] += 1
        bi = n // step
        for a in alphabet:
            chk[a][bi] = run[a]
        return chk, step

    def _occ(self, ch: str, i: int) -> int:
        if i <= 0:
            return 0
        block = i // self.step
        base = int(self.occ_chk[ch][block])
        start = block * self.step
        return base + self.bwt.count(ch, start, i)

    def find(self, pattern: str) -> SearchRange:
        if not pattern:
            return SearchRange(0, self.n - 1)
        if NODE_SEPARATOR in pattern or SENTINEL in pattern:
            return SearchRange.empty()
        l, r = 0, self.n - 1
        for ch in reversed(pattern):
            if ch not in self.C:
                return SearchRange.empty()
            l = self.C[ch] + self._occ(ch, l)
            r = self.C[ch] + self._occ(ch, r + 1) - 1
            if l > r:
                return SearchRange.empty()
        return SearchRange(l, r)

    def count(self, searchRange: SearchRange) -> int:
        return len(searchRange)

    def locate(self, searchRange: SearchRange, sort: bool = True) -> List[Occurrence]:
        if searchRange.is_empty():
            return []
        positions = self.sa[searchRange.first:searchRange.last + 1]
        nodes = np.searchsorted(self.node_starts, positions, side="right") - 1
        offsets = positions - self.node_starts[nodes]
        occurrences = [
            Occurrence(node_id=int(node_id), offset=int(offset))
            for node_id, offset in zip(self.node_ids[nodes].tolist(), offsets.tolist())
        ]
        if sort:
            occurrences = sorted(set(occurrences))
        return occurrences
