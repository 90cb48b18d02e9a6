"""Utility modules for the message resolver."""

from .parse_utils import (
    ExtractionPatternSet,
    build_tag_pattern,
    extract_tags,
    normalize_quotes,
    split_key_value,
    split_top_level,
)

__all__ = [
    # Quote handling
    "normalize_quotes",
    # Segment and key/value splitting
    "split_top_level",
    "split_key_value",
    # Bracket tags
    "ExtractionPatternSet",
    "build_tag_pattern",
    "extract_tags",
]
