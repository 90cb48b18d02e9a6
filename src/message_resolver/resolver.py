"""
Message Resolver

Turns free-form log message text from selected components into structured
documents. Messages that already are JSON objects/arrays are walked so that
string-encoded JSON inside them is unpacked; everything else is read as
comma-separated key/value segments plus bracket tags like {api:OrderAPI}.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from message_resolver.config.constants import (
    DEFAULT_TAG_NAMES,
    DEFAULT_TRUNCATE_LENGTH,
    FALLBACK_TEXT_KEY,
    RESOLVER_NAME,
)
from message_resolver.lib.exceptions import wrap_exception
from message_resolver.lib.json_strategies import parse_with_strategies
from message_resolver.lib.type_converter import StructuredValue, TypeConverter
from message_resolver.utils.parse_utils import (
    ExtractionPatternSet,
    extract_tags,
    normalize_quotes,
    split_key_value,
    split_top_level,
)

logger = logging.getLogger(__name__)


class ComponentFilter:
    """Read-only allowlist of component (logger) names"""

    def __init__(self, components: Iterable[str] = ()):
        self._components: Tuple[str, ...] = tuple(
            c for c in components if isinstance(c, str) and c.strip()
        )

    @property
    def components(self) -> Tuple[str, ...]:
        return self._components

    def is_eligible(self, component_id: Optional[str]) -> bool:
        """
        Check if a component id matches any configured name

        A match is an exact match, a prefix match or a suffix match.

        Args:
            component_id: Logger name of the message source

        Returns:
            True if the message should be structured
        """
        if not isinstance(component_id, str) or not self._components:
            return False

        return any(
            component_id == c or component_id.startswith(c) or component_id.endswith(c)
            for c in self._components
        )

    def __len__(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        return f"ComponentFilter({list(self._components)!r})"


class MessageResolver:
    """
    Converts log messages from eligible components into structured values

    The resolver holds only read-only configuration, so one instance can
    serve any number of threads.
    """

    name = RESOLVER_NAME

    def __init__(
        self,
        components: Union[ComponentFilter, Iterable[str], None] = None,
        patterns: Optional[ExtractionPatternSet] = None,
        converter: Optional[TypeConverter] = None,
        truncate_length: int = DEFAULT_TRUNCATE_LENGTH
    ):
        """
        Initialize the resolver

        Args:
            components: Component allowlist (names or a ComponentFilter)
            patterns: Bracket-tag table (defaults to api, proxy)
            converter: Leaf coercion settings
            truncate_length: Characters of a message echoed in failure warnings
        """
        if isinstance(components, ComponentFilter):
            self.component_filter = components
        else:
            self.component_filter = ComponentFilter(components or ())
        self.patterns = patterns if patterns is not None else ExtractionPatternSet(DEFAULT_TAG_NAMES)
        self.converter = converter if converter is not None else TypeConverter()
        self.truncate_length = truncate_length

        if self.component_filter.components:
            logger.info(
                f"{self.name} resolver initialized with target components: "
                f"{list(self.component_filter.components)}"
            )
        else:
            logger.info(f"No target components were configured for {self.name} resolver")

    def is_eligible(self, component_id: Optional[str]) -> bool:
        """Check whether messages from this component are structured"""
        matches = self.component_filter.is_eligible(component_id)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Component check - logger: '{component_id}', "
                f"targets: {list(self.component_filter.components)}, matches: {matches}"
            )
        return matches

    def try_parse_document(self, text: str) -> Optional[StructuredValue]:
        """
        Parse text as a complete JSON object or array

        Bare scalars are not documents: plain text that happens to be a
        number must go through key/value parsing instead.

        Args:
            text: Quote-normalized message

        Returns:
            Parsed dict or list, or None
        """
        if not text or not text.strip():
            return None

        result = parse_with_strategies(text, self.converter.document_strategies)
        if result.ok and isinstance(result.value, (dict, list)):
            return result.value
        return None

    def parse_message(self, message: str) -> Dict[str, Any]:
        """
        Build a document from key/value segments and bracket tags

        Tags come first in table order, then key/value pairs in segment
        order. A repeated key keeps its first position and takes the last
        value. When no segment is a key/value pair, the leftover text is
        kept under "text".

        Args:
            message: Quote-normalized message

        Returns:
            Ordered dict, possibly empty
        """
        remaining, tags = extract_tags(message, self.patterns)
        result: Dict[str, Any] = dict(tags)
        has_pairs = False

        for segment in split_top_level(remaining):
            pair = split_key_value(segment.strip())
            if pair is None:
                continue
            key, raw_value = pair
            result[key] = self.converter.coerce_leaf(raw_value)
            has_pairs = True

        leftover = remaining.strip()
        if not has_pairs and leftover:
            result[FALLBACK_TEXT_KEY] = leftover

        return result

    def structure(self, message: str) -> StructuredValue:
        """
        Structure a message regardless of its component

        May raise on unexpected failures; resolve() is the guarded entry point.

        Args:
            message: Raw message text

        Returns:
            Walked JSON document, or the key/value document
        """
        normalized = normalize_quotes(message)

        document = self.try_parse_document(normalized)
        if document is not None:
            return self.converter.walk(document)

        return self.parse_message(normalized)

    def resolve(self, message: Optional[str], component_id: Optional[str] = None) -> Union[StructuredValue, str]:
        """
        Resolve a log message into its structured form

        Never raises. Empty messages resolve to "". Non-string messages,
        messages from ineligible components and messages that fail
        unexpectedly come back verbatim.

        Args:
            message: Formatted log message
            component_id: Logger name of the message source

        Returns:
            Structured value, or a plain string
        """
        if message is None:
            return ""
        if not isinstance(message, str):
            return message
        if not message.strip():
            return ""

        if not self.is_eligible(component_id):
            return message

        try:
            return self.structure(message)
        except Exception as e:
            logger.warning(
                f"Failed to process message from component '{component_id}': "
                f"'{self._truncate(message)}', error: {e!r}"
            )
            return message

    def resolve_strict(self, message: Optional[str], component_id: Optional[str] = None) -> Union[StructuredValue, str]:
        """
        Same as resolve(), but unexpected failures are raised

        Raises:
            ResolutionException: If structuring the message failed
        """
        if message is None:
            return ""
        if not isinstance(message, str):
            return message
        if not message.strip():
            return ""

        if not self.is_eligible(component_id):
            return message

        try:
            return self.structure(message)
        except Exception as e:
            raise wrap_exception(e, f"Failed to resolve message from '{component_id}'") from e

    def _truncate(self, message: str) -> str:
        if len(message) <= self.truncate_length:
            return message
        return message[:self.truncate_length] + "..."

    def __repr__(self) -> str:
        return (
            f"MessageResolver(components={list(self.component_filter.components)!r}, "
            f"tags={list(self.patterns.names)!r}, max_depth={self.converter.max_depth})"
        )


__all__ = ["ComponentFilter", "MessageResolver"]
