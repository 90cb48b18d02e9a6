"""
JSON Parse Strategies

Ordered JSON grammars tried one after another when a value might be JSON.
Each strategy reports success or failure through a ParseResult instead of
raising, so the fallback order is an explicit, testable policy.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one parse attempt"""
    ok: bool
    value: Any = None
    strategy: Optional[str] = None
    error: Optional[str] = None


class JsonParseStrategy(ABC):
    """Abstract interface for a single JSON grammar"""

    name = "abstract"

    @abstractmethod
    def parse(self, text: str) -> ParseResult:
        """
        Attempt to parse text as a complete JSON document

        Args:
            text: Candidate JSON text

        Returns:
            ParseResult with ok=True and the parsed value on success
        """
        pass


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


class StrictJsonStrategy(JsonParseStrategy):
    """RFC 8259 JSON; fractions and exponents decode to Decimal"""

    name = "strict"

    def _loads(self, text: str) -> Any:
        return json.loads(text, parse_float=Decimal, parse_constant=_reject_constant)

    def parse(self, text: str) -> ParseResult:
        try:
            return ParseResult(ok=True, value=self._loads(text), strategy=self.name)
        except ValueError as e:
            return ParseResult(ok=False, strategy=self.name, error=str(e))


class LenientJsonStrategy(StrictJsonStrategy):
    """Like strict, but raw control characters are allowed inside strings"""

    name = "lenient"

    def _loads(self, text: str) -> Any:
        return json.loads(
            text,
            parse_float=Decimal,
            parse_constant=_reject_constant,
            strict=False
        )


# Unquoted object names: identifiers, possibly dotted or dashed
BARE_NAME_RE = re.compile(r'[A-Za-z_$][\w$.\-]*')


def _read_quoted(text: str, start: int) -> Tuple[int, str]:
    """
    Read a single- or double-quoted string starting at text[start]

    Returns:
        (index after the closing quote, body re-escaped for double quotes)

    Raises:
        ValueError: If the string is not terminated
    """
    quote = text[start]
    body = []
    i = start + 1
    while i < len(text):
        c = text[i]
        if c == '\\' and i + 1 < len(text):
            nxt = text[i + 1]
            # \' is not a JSON escape
            body.append("'" if nxt == "'" else c + nxt)
            i += 2
            continue
        if c == quote:
            return i + 1, ''.join(body)
        body.append('\\"' if c == '"' else c)
        i += 1
    raise ValueError(f"Unterminated string starting at {start}")


def _next_significant(text: str, start: int) -> str:
    for c in text[start:]:
        if not c.isspace():
            return c
    return ''


def relax_json(text: str) -> str:
    """
    Rewrite relaxed JSON into standard JSON

    Accepts what log authors commonly write by hand:
    - single-quoted strings ('a' -> "a")
    - unquoted object names ({id: 5} -> {"id": 5})
    - trailing commas ([1, 2,] -> [1, 2])

    Args:
        text: Candidate JSON text

    Returns:
        Standard JSON text (not validated)

    Raises:
        ValueError: If a string is not terminated

    Example:
        >>> relax_json("{id: 5, 'tags': ['a',],}")
        '{"id": 5, "tags": ["a"]}'
    """
    out = []
    last = ''
    i = 0
    while i < len(text):
        c = text[i]
        if c in '"\'':
            i, body = _read_quoted(text, i)
            out.append(f'"{body}"')
            last = '"'
            continue
        if c == ',' and _next_significant(text, i + 1) in ('}', ']'):
            i += 1
            continue
        if last in ('{', ','):
            match = BARE_NAME_RE.match(text, i)
            if match and _next_significant(text, match.end()) == ':':
                out.append(f'"{match.group()}"')
                last = '"'
                i = match.end()
                continue
        out.append(c)
        if not c.isspace():
            last = c
        i += 1
    return ''.join(out)


class RelaxedJsonStrategy(LenientJsonStrategy):
    """Lenient JSON after rewriting single quotes, bare names and trailing commas"""

    name = "relaxed"

    def _loads(self, text: str) -> Any:
        return super()._loads(relax_json(text))


# Whole messages: only standard JSON makes a message a document
DOCUMENT_STRATEGIES: Tuple[JsonParseStrategy, ...] = (
    StrictJsonStrategy(),
    LenientJsonStrategy(),
)

# Values inside messages are also read with the relaxed grammar
DEFAULT_STRATEGIES: Tuple[JsonParseStrategy, ...] = DOCUMENT_STRATEGIES + (
    RelaxedJsonStrategy(),
)


def parse_with_strategies(
    text: str,
    strategies: Sequence[JsonParseStrategy] = DEFAULT_STRATEGIES
) -> ParseResult:
    """
    Try each strategy in order and return the first success.

    Args:
        text: Candidate JSON text
        strategies: Grammars in fallback order

    Returns:
        The first successful ParseResult, or the last failure
    """
    result = ParseResult(ok=False, error="no strategies configured")
    for strategy in strategies:
        result = strategy.parse(text)
        if result.ok:
            if strategy is not strategies[0]:
                logger.debug(f"JSON accepted by fallback strategy '{strategy.name}'")
            return result
    return result
