from dataclasses import dataclass
from typing import IO, Optional, Union

from ..seed.seeder import SeedStrategy


@dataclass
class LocatorInput:
    # required fields
    sequenceFile: Union[str, IO]
    indexFile: Union[str, IO]
    outputLocation: str
    seedLength: int

    # optional fields
    strategy: SeedStrategy = SeedStrategy.OVERLAPPING
    distance: Optional[int] = None      # overrides strategy when set
    trackMemory: bool = False


@dataclass
class LocatorOutput:
    outputLocation: str
    numberOfSequences: int = 0
    numberOfSeeds: int = 0
    numberOfMatchedSeeds: int = 0
    numberOfMatchedPaths: int = 0
    numberOfOccurrences: int = 0
