from .base import AIndex
from .fm_index import FMIndex

__all__ = ["AIndex", "FMIndex"]
