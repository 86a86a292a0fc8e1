from typing import IO, List, Optional


class SequenceParser:
    """Reads one sequence per line; no header."""
    def __init__(self, sequenceFile: IO):
        self.sequenceFile = sequenceFile

    def parseNextSequence(self) -> Optional[str]:
        line = self.sequenceFile.readline()
        if not line:
            return None
        # removing the line terminator only, other whitespace is sequence content
        if line.endswith('\n'):
            line = line[:-1]
        if line.endswith('\r'):
            line = line[:-1]
        return line

    def parseAllSequences(self) -> List[str]:
        sequences: List[str] = []

        while True:
            sequence = self.parseNextSequence()
            if sequence is None:
                break
            sequences.append(sequence)

        return sequences
