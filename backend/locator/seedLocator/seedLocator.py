import io
import os
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import IO, List, Optional, Type

import psutil

from ..constants.constants import FIND_TIMER, LOCATE_TIMER, PATTERNS_TIMER, SEQUENCES_TIMER
from ..errors import ConfigurationError, ResourceOpenError
from ..index.base import AIndex
from ..index.fm_index import FMIndex
from ..models.locator import LocatorInput, LocatorOutput
from ..models.occurrence import Occurrence, SearchRange
from ..models.occurrenceWriter import OccurrenceWriter
from ..seed.seeder import generate, seeding
from ..seq_parser.parser import SequenceParser
from ..timer.progress import ProgressMonitor
from ..timer.timer import format_duration


def get_memory_usage():
    """Get current memory usage in bytes using psutil"""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss


class PipelineState(Enum):
    IDLE = "idle"
    INDEX_LOADED = "index loaded"
    SEQUENCES_LOADED = "sequences loaded"
    SEEDS_GENERATED = "seeds generated"
    SEARCHING = "searching"
    LOCATING_OCCURRENCES = "locating occurrences"
    DONE = "done"
    FAILED = "failed"


class ASeedLocator(ABC):
    @abstractmethod
    def locateSeeds(self, inputData: LocatorInput) -> LocatorOutput:
        pass


class SeedLocator(ASeedLocator):
    """
    Seeds a sequence set and locates every seed in an index.

    load index -> load sequences -> generate seeds -> find ranges
    -> locate occurrences -> write output

    Any failure leaves the locator in FAILED and is re-raised. The output file
    is only opened once every occurrence is resolved.
    """
    def __init__(self, monitor: ProgressMonitor = None, indexType: Type[AIndex] = FMIndex, output: IO = None):
        self.monitor = monitor if monitor is not None else ProgressMonitor()
        self.indexType = indexType
        self.output = output
        self.state = PipelineState.IDLE

        self.index: Optional[AIndex] = None
        self.sequences: List[str] = []
        self.seeds: List[str] = []
        self.ranges: List[SearchRange] = []
        self.matchedPaths = 0
        self.occurrences: List[Occurrence] = []

    def _print(self, message: str):
        print(message, file=self.output if self.output is not None else sys.stdout, flush=True)

    def locateSeeds(self, inputData: LocatorInput) -> LocatorOutput:
        try:
            self._checkInput(inputData)
            self.monitor.counters.reset()
            baselineMemory = get_memory_usage() if inputData.trackMemory else 0
            self.loadIndex(inputData.indexFile)
            if inputData.trackMemory:
                self._printMemory("Memory Usage After Loading Index", baselineMemory)
            self.loadSequences(inputData.sequenceFile)
            self.generateSeeds(inputData)
            self.findSeeds()
            self.locateRanges()
            if inputData.trackMemory:
                self._printMemory("Memory Usage After Locating", baselineMemory)
            self.writeOccurrences(inputData.outputLocation)
        except Exception:
            self.state = PipelineState.FAILED
            raise

        return LocatorOutput(
            outputLocation=inputData.outputLocation,
            numberOfSequences=len(self.sequences),
            numberOfSeeds=len(self.seeds),
            numberOfMatchedSeeds=len(self.ranges),
            numberOfMatchedPaths=self.matchedPaths,
            numberOfOccurrences=len(self.occurrences),
        )

    def _printMemory(self, title: str, baselineMemory: int):
        memory = get_memory_usage()
        self._print(f"\n{title}")
        self._print(f"Total memory used: {(memory - baselineMemory) / 10**6:.2f} MB")

    def _checkInput(self, inputData: LocatorInput):
        if inputData.seedLength is None or inputData.seedLength < 1:
            raise ConfigurationError(f"seed length must be a positive integer, got {inputData.seedLength}")
        if inputData.distance is not None and inputData.distance < 1:
            raise ConfigurationError(f"seed distance must be a positive integer, got {inputData.distance}")

    def _expect(self, state: PipelineState):
        if self.state is not state:
            raise RuntimeError(f"locator is in state '{self.state.value}', expected '{state.value}'")

    def loadIndex(self, indexFile):
        self._expect(PipelineState.IDLE)
        self._print("Loading index...")
        self.index = self.indexType.load(indexFile)
        self.state = PipelineState.INDEX_LOADED

    def loadSequences(self, sequenceFile):
        self._expect(PipelineState.INDEX_LOADED)
        self._print("Loading sequences...")
        with self.monitor.timer(SEQUENCES_TIMER):
            if isinstance(sequenceFile, str):
                try:
                    handle: IO = open(sequenceFile, "r")
                except OSError as e:
                    raise ResourceOpenError(sequenceFile, e.strerror) from e
                with handle:
                    self.sequences = self._readSequences(handle, sequenceFile)
            else:
                self.sequences = self._readSequences(sequenceFile, getattr(sequenceFile, "name", None) or "<stream>")
        self._print(f"Loaded {len(self.sequences)} sequences in "
                    f"{format_duration(self.monitor.elapsed(SEQUENCES_TIMER))}.")
        self.state = PipelineState.SEQUENCES_LOADED

    @staticmethod
    def _readSequences(handle: IO, name) -> List[str]:
        if not isinstance(handle, io.TextIOBase):
            handle = io.TextIOWrapper(handle, encoding='utf-8')
        try:
            return SequenceParser(handle).parseAllSequences()
        except (OSError, UnicodeDecodeError) as e:
            raise ResourceOpenError(str(name), str(e)) from e

    def generateSeeds(self, inputData: LocatorInput):
        self._expect(PipelineState.SEQUENCES_LOADED)
        self._print("Generating patterns...")
        with self.monitor.timer(PATTERNS_TIMER):
            if inputData.distance:
                self.seeds = seeding(self.sequences, inputData.seedLength, inputData.distance)
            else:
                self.seeds = generate(self.sequences, inputData.seedLength, inputData.strategy)
        self.monitor.counters.set_total(len(self.seeds))
        self._print(f"Generated {len(self.seeds)} patterns in "
                    f"{format_duration(self.monitor.elapsed(PATTERNS_TIMER))}.")
        self.state = PipelineState.SEEDS_GENERATED

    def findSeeds(self):
        self._expect(PipelineState.SEEDS_GENERATED)
        self.state = PipelineState.SEARCHING
        self._print("Locating patterns...")
        self.ranges = []
        self.matchedPaths = 0
        with self.monitor.timer(FIND_TIMER):
            for seed in self.seeds:
                searchRange: SearchRange = self.index.find(seed)
                # no match is not an error, the seed is dropped
                if searchRange.is_empty():
                    continue
                self.ranges.append(searchRange)
                self.matchedPaths += self.index.count(searchRange)
        self._print(f"Found {len(self.ranges)} patterns matching {self.matchedPaths} paths in "
                    f"{format_duration(self.monitor.elapsed(FIND_TIMER))}.")

    def locateRanges(self):
        self._expect(PipelineState.SEARCHING)
        self.state = PipelineState.LOCATING_OCCURRENCES
        self.occurrences = []
        with self.monitor.timer(LOCATE_TIMER):
            for searchRange in self.ranges:
                located = self.index.locate(searchRange)
                self.occurrences.extend(located)
                self.monitor.counters.advance(len(located))
        self._print(f"Located {len(self.occurrences)} occurrences in "
                    f"{format_duration(self.monitor.elapsed(LOCATE_TIMER))}.")

    def writeOccurrences(self, outputLocation: str):
        self._expect(PipelineState.LOCATING_OCCURRENCES)
        try:
            outputFile: IO = open(outputLocation, "w")
        except OSError as e:
            raise ResourceOpenError(outputLocation, e.strerror) from e
        with outputFile:
            OccurrenceWriter(outputFile).writeAll(self.occurrences)
        self.state = PipelineState.DONE
