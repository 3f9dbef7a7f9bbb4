from .registry import BodyPartEntry, LookupTables, SizingEntry, get_tables

__all__ = [
    "BodyPartEntry",
    "SizingEntry",
    "LookupTables",
    "get_tables",
]
