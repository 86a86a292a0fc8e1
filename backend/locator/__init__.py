"""
gcsa_locate:
Locate fixed-length seeds of a sequence set in a prebuilt FM-index.
"""

name = "gcsa_locate"
version = "0.0.6"
short_desc = "GCSA2 seed finder"
desc = "Locate k-mers in the variation graph using GCSA2."

__version__ = version
