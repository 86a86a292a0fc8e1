from enum import Enum
from typing import List, Sequence


class SeedStrategy(Enum):
    """
    Seeding strategies.

    OVERLAPPING             every k-mer, step 1
    NON_OVERLAPPING         consecutive k-mers, step k, a short tail is dropped
    GREEDY_NON_OVERLAPPING  like NON_OVERLAPPING, but the last seed is moved
                            back to end at the last character
    """
    OVERLAPPING = "overlapping"
    NON_OVERLAPPING = "non-overlapping"
    GREEDY_NON_OVERLAPPING = "greedy"


def _check_positive(name: str, value: int):
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value}")


def seeding(sequences: Sequence[str], k: int, step: int) -> List[str]:
    """
    Add every k-mer of each sequence starting at offsets 0, step, 2*step, ...

    Args:
    sequences: ordered sequence set
    k: seed length
    step: distance between the start of two consecutive seeds

    Returns:
    Seeds in sequence order, then left to right within a sequence.
    A sequence shorter than k contributes nothing.
    """
    _check_positive("seed length", k)
    _check_positive("step", step)

    seeds = []
    for seq in sequences:
        n = len(seq)
        i = 0
        while i + k <= n:
            seeds.append(seq[i:i+k])
            i += step
    return seeds


def _greedy_non_overlapping(sequences: Sequence[str], k: int) -> List[str]:
    seeds = []
    for seq in sequences:
        n = len(seq)
        if n < k:
            continue
        for i in range(0, n - k, k):
            seeds.append(seq[i:i+k])
        # last seed ends at the last character and may overlap its predecessor
        last = n - k
        seeds.append(seq[last:])
    return seeds


def generate(
        sequences: Sequence[str],
        k: int,
        strategy: SeedStrategy = SeedStrategy.OVERLAPPING
        ) -> List[str]:
    """Extract the seeds of `sequences` under `strategy`."""
    if strategy is SeedStrategy.OVERLAPPING:
        return seeding(sequences, k, 1)
    if strategy is SeedStrategy.NON_OVERLAPPING:
        return seeding(sequences, k, k)
    if strategy is SeedStrategy.GREEDY_NON_OVERLAPPING:
        _check_positive("seed length", k)
        return _greedy_non_overlapping(sequences, k)
    raise ValueError(f"unknown seeding strategy: {strategy!r}")
