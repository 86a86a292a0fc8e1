from abc import ABC, abstractmethod
from typing import IO, List, Union

from ..models.occurrence import Occurrence, SearchRange


class AIndex(ABC):
    """
    Searchable index queried by the seed locator.

    load    deserialize from a path or binary handle, fails on bad input
    find    range of index rows prefixed by a pattern, SearchRange.empty() if none
    count   number of matching paths in a range
    locate  occurrences of a range
    """

    @classmethod
    @abstractmethod
    def load(cls, file: Union[str, IO]) -> "AIndex":
        pass

    @abstractmethod
    def find(self, pattern: str) -> SearchRange:
        pass

    @abstractmethod
    def count(self, searchRange: SearchRange) -> int:
        pass

    @abstractmethod
    def locate(self, searchRange: SearchRange, sort: bool = True) -> List[Occurrence]:
        pass
