"""
Value Type Conversion Utilities

Converts raw value text from log messages into structured values
(bool, Decimal, str, dict, list, None) and back into JSON-ready
native Python types.
"""

import json
import logging
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Union

from message_resolver.config.constants import DEFAULT_MAX_DEPTH
from message_resolver.lib.json_strategies import (
    DEFAULT_STRATEGIES,
    DOCUMENT_STRATEGIES,
    JsonParseStrategy,
    parse_with_strategies,
)
from message_resolver.utils.parse_utils import normalize_quotes

logger = logging.getLogger(__name__)

StructuredValue = Union[None, bool, int, Decimal, str, Dict[str, Any], List[Any]]

# Plain decimal literal: optional sign, digits with optional point, optional exponent
NUMBER_RE = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')

# Integers longer than this are emitted as floats so json.dumps stays within
# the interpreter's int-to-str digit limit
MAX_INT_DIGITS = 4000


class TypeConverter:
    """
    Leaf coercion and structure walking for resolved log messages

    Both the key/value path and the existing-JSON path go through
    coerce_leaf, so a string value is interpreted the same way wherever it
    appears. Instances hold only read-only settings and can be shared
    between threads.
    """

    BOOLEAN_VALUES = {'true': True, 'false': False}

    def __init__(
        self,
        strategies: Sequence[JsonParseStrategy] = DEFAULT_STRATEGIES,
        max_depth: int = DEFAULT_MAX_DEPTH,
        document_strategies: Sequence[JsonParseStrategy] = DOCUMENT_STRATEGIES
    ):
        """
        Initialize the type converter

        Args:
            strategies: JSON grammars tried in order for JSON-looking values
            max_depth: Maximum number of nested string-to-JSON unpack levels
            document_strategies: JSON grammars for deciding whether a whole
                message is a document
        """
        self.strategies = tuple(strategies)
        self.max_depth = max_depth
        self.document_strategies = tuple(document_strategies)

    @staticmethod
    def looks_like_json(value: str) -> bool:
        """Check whether trimmed text is bracketed like a JSON object or array"""
        return (
            (value.startswith('{') and value.endswith('}'))
            or (value.startswith('[') and value.endswith(']'))
        )

    def parse_number(self, value: str) -> Optional[Decimal]:
        """
        Parse a plain decimal literal

        Args:
            value: Trimmed text

        Returns:
            Decimal, or None if the text is not a plain number
        """
        if not NUMBER_RE.fullmatch(value):
            return None
        try:
            return Decimal(value)
        except InvalidOperation:
            return None

    def coerce_leaf(
        self,
        raw: str,
        allow_json: bool = True,
        depth: int = 0
    ) -> StructuredValue:
        """
        Convert raw value text into a structured value

        Order: embedded JSON, boolean, number, double-quoted string, raw text.

        Args:
            raw: Value text
            allow_json: Whether JSON-looking text may be parsed into a structure
            depth: Number of string-to-JSON unpack levels above this value

        Returns:
            Structured value; the raw text itself when nothing else applies
        """
        if raw is None or not raw.strip():
            return raw

        trimmed = raw.strip()

        if allow_json and self.looks_like_json(trimmed):
            if depth >= self.max_depth:
                logger.debug(f"Nested JSON limit ({self.max_depth}) reached, value kept as text")
            else:
                result = parse_with_strategies(normalize_quotes(trimmed), self.strategies)
                if result.ok:
                    return self.walk(result.value, depth + 1)

        lowered = trimmed.lower()
        if lowered in self.BOOLEAN_VALUES:
            return self.BOOLEAN_VALUES[lowered]

        number = self.parse_number(trimmed)
        if number is not None:
            return number

        if len(trimmed) > 1 and trimmed.startswith('"') and trimmed.endswith('"'):
            return trimmed[1:-1]

        return raw

    def walk(self, value: StructuredValue, depth: int = 0) -> StructuredValue:
        """
        Re-coerce every string leaf of an already parsed document

        String leaves that hold JSON are unpacked one level per call until
        max_depth is reached.

        Args:
            value: Parsed document or sub-document
            depth: Number of unpack levels above this document

        Returns:
            New document with the same shape and key order
        """
        if isinstance(value, str):
            return self.coerce_leaf(value, allow_json=True, depth=depth)
        if isinstance(value, dict):
            return {key: self.walk(item, depth) for key, item in value.items()}
        if isinstance(value, list):
            return [self.walk(item, depth) for item in value]
        return value

    @staticmethod
    def to_native(value: StructuredValue) -> Any:
        """
        Downcast Decimals to the narrowest exact native type

        Integral Decimals without a fractional part become int, everything
        else becomes float. Values a float cannot hold are kept as their
        decimal string.

        Args:
            value: Structured value

        Returns:
            Value built only from types json.dumps understands
        """
        if isinstance(value, Decimal):
            exponent = value.as_tuple().exponent
            if isinstance(exponent, int) and exponent >= 0 and value.adjusted() < MAX_INT_DIGITS:
                return int(value)
            as_float = float(value)
            if math.isinf(as_float) or math.isnan(as_float):
                return str(value)
            return as_float
        if isinstance(value, dict):
            return {key: TypeConverter.to_native(item) for key, item in value.items()}
        if isinstance(value, list):
            return [TypeConverter.to_native(item) for item in value]
        return value


def dumps(value: StructuredValue) -> str:
    """Serialize a structured value to a JSON string"""
    return json.dumps(TypeConverter.to_native(value), ensure_ascii=False)
