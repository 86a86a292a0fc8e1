from typing import IO, Iterable

from .occurrence import Occurrence


class OccurrenceWriter:
    """
    Writer for located seed occurrences.

    One record per line, two tab-separated integer fields: node identifier,
    then offset.
    """
    def __init__(self, outputFile: IO):
        """
        Parameters
        ----------
        outputFile : IO
            An open writable text handle.
        """
        self.outputFile = outputFile
        self.written = 0

    def writeOccurrence(self, occurrence: Occurrence):
        self.outputFile.write(f"{occurrence.node_id}\t{occurrence.offset}\n")
        self.written += 1

    def writeAll(self, occurrences: Iterable[Occurrence]) -> int:
        for occurrence in occurrences:
            self.writeOccurrence(occurrence)
        return self.written
