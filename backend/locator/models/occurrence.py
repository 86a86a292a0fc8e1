from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Occurrence:
    node_id:    int             # graph node the seed was found in
    offset:     int             # 0-based offset within the node label


@dataclass(frozen=True)
class SearchRange:
    """Inclusive range [first, last] of suffix array rows; empty when first > last."""
    first:  int
    last:   int

    @classmethod
    def empty(cls) -> "SearchRange":
        return cls(1, 0)

    def is_empty(self) -> bool:
        return self.first > self.last

    def __len__(self) -> int:
        return 0 if self.is_empty() else self.last - self.first + 1
