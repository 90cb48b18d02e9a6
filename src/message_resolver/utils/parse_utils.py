"""Parsing utilities for extracting structure from log message text."""

import re
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from message_resolver.lib.exceptions import InvalidPatternException

# Decorative quote characters and their ASCII replacements
QUOTE_TRANSLATION = str.maketrans({
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
})

OPENERS = '{['
CLOSERS = '}]'
KEY_VALUE_SEPARATORS = ':='

# Tag names must not contain characters that are part of the bracket grammar
TAG_NAME_RE = re.compile(r'[^{}:\s]+')


def normalize_quotes(value: Optional[str]) -> str:
    """
    Replace smart quotes with their straight ASCII counterparts.

    Args:
        value: Text to normalize (None is treated as empty)

    Returns:
        Text where curly double/single quotes became '"' and "'"
    """
    if value is None:
        return ""
    return value.translate(QUOTE_TRANSLATION)


def _active_chars(text: str) -> Iterator[Tuple[int, str]]:
    """
    Yield (index, char) for characters that keep their special meaning.

    Characters inside a double-quoted span and characters directly after a
    backslash are skipped. Quote state only toggles on an unescaped '"'.
    """
    in_quotes = False
    escaped = False

    for i, c in enumerate(text):
        if escaped:
            escaped = False
            continue
        if c == '\\':
            escaped = True
            continue
        if c == '"':
            in_quotes = not in_quotes
            continue
        if not in_quotes:
            yield i, c


def split_top_level(message: str) -> List[str]:
    """
    Split a message on commas that sit outside quotes and brackets.

    Handles:
    - Nested objects and arrays ('{', '[' open, '}', ']' close)
    - Double-quoted spans containing commas
    - Backslash escapes (kept verbatim in the segment)

    Args:
        message: Text to split

    Returns:
        Non-empty segments in order, untrimmed

    Example:
        >>> split_top_level('a: 1, b: {"x": 1, "y": 2}')
        ['a: 1', ' b: {"x": 1, "y": 2}']
    """
    segments = []
    depth = 0
    start = 0

    for i, c in _active_chars(message):
        if c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1
        elif c == ',' and depth == 0:
            if i > start:
                segments.append(message[start:i])
            start = i + 1

    if start < len(message):
        segments.append(message[start:])

    return segments


def split_key_value(segment: str) -> Optional[Tuple[str, str]]:
    """
    Split a segment on its first unquoted ':' or '='.

    A separator at the first or last position means the segment is not a
    key/value pair; no later separator is considered.

    Args:
        segment: Trimmed segment text

    Returns:
        (key, raw_value) both trimmed, or None
    """
    if not segment:
        return None

    for i, c in _active_chars(segment):
        if c in KEY_VALUE_SEPARATORS:
            if i == 0 or i == len(segment) - 1:
                return None
            key = segment[:i].strip()
            if not key:
                return None
            return key, segment[i + 1:].strip()

    return None


def build_tag_pattern(tag_name: str) -> re.Pattern:
    """
    Compile the bracket grammar for one tag name: {tag_name:<captured>}

    Raises:
        InvalidPatternException: If the name is empty or contains '{', '}', ':' or whitespace
    """
    if not tag_name or not TAG_NAME_RE.fullmatch(tag_name):
        raise InvalidPatternException(
            f"Invalid extraction tag name: {tag_name!r}",
            {'tag_name': tag_name}
        )
    return re.compile(r'\{' + re.escape(tag_name) + r':([^}]+)\}')


class ExtractionPatternSet:
    """
    Read-only, ordered table of bracket-tag patterns.

    Table order is extraction order, which is also the key order of the
    extracted tags in the resolved document.
    """

    def __init__(self, tag_names: Iterable[str]):
        patterns: Dict[str, re.Pattern] = {}
        for name in tag_names:
            if name not in patterns:
                patterns[name] = build_tag_pattern(name)
        self._patterns = MappingProxyType(patterns)

    @property
    def patterns(self) -> Mapping[str, re.Pattern]:
        return self._patterns

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self):
        return iter(self._patterns.items())

    def __repr__(self) -> str:
        return f"ExtractionPatternSet({list(self._patterns)!r})"


def extract_tags(
    message: str,
    patterns: ExtractionPatternSet
) -> Tuple[str, Dict[str, Union[str, List[str]]]]:
    """
    Pull bracket tags such as {api:OrderAPI} out of a message.

    Args:
        message: Text to scan
        patterns: Tag table, applied in order

    Returns:
        (remaining_text, tags) where remaining_text has every matched tag
        removed and tags maps each matched name to a string (one match) or
        a list of strings (several matches, in match order)

    Example:
        >>> extract_tags("{proxy:A} then {proxy:B}", ExtractionPatternSet(["proxy"]))
        (' then ', {'proxy': ['A', 'B']})
    """
    tags: Dict[str, Union[str, List[str]]] = {}
    remaining = message

    for name, pattern in patterns:
        matches = pattern.findall(remaining)
        if not matches:
            continue
        remaining = pattern.sub('', remaining)
        tags[name] = matches[0] if len(matches) == 1 else matches

    return remaining, tags
