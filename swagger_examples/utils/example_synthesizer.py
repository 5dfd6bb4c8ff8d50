"""Example payload synthesis for Swagger/OpenAPI schemas.

Turns a schema node into a concrete example value: fixed placeholders for
primitive types, single-element lists for arrays, and dictionaries for
objects, built recursively from their properties.

Recursion is bounded twice:
- a hard depth ceiling on object/array nesting
- a per-schema counter along the current expansion path, which replaces the
  expansion with ``[None]`` once a schema re-enters itself too many times
  (e.g. a ``children`` property whose items are the enclosing type)
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any

from .schema_kinds import SchemaKind, classify

logger = logging.getLogger(__name__)

STRING_PLACEHOLDER = "Example string"
INT32_MAX_VALUE = 2**31 - 1
INT64_MAX_VALUE = 2**63 - 1
DOUBLE_MAX_VALUE = sys.float_info.max
MAX_DEPTH = 10
MAX_RECURSION = 2

# Path-scoped recursion state: schema identity -> expansions on current path
RecursionState = Mapping[Any, int]


class ExampleSynthesizer:
    """Synthesize example values from schema nodes.

    References are followed lazily through the lookup table, so the same
    synthesizer handles self-referential schemas without ever materialising
    an infinite structure.
    """

    def __init__(
        self,
        lookup_table: Mapping[str, Any] | None = None,
        string_placeholder: str = STRING_PLACEHOLDER,
        max_depth: int = MAX_DEPTH,
        max_recursion: int = MAX_RECURSION,
    ) -> None:
        """Initialize synthesizer.

        Args:
            lookup_table: Mapping of reference URI to resolved schema node
            string_placeholder: Value used for every string-typed field
            max_depth: Nesting depth past which objects and arrays are dropped
            max_recursion: Expansions of one schema allowed on a single path
        """
        self.lookup_table = lookup_table or {}
        self.string_placeholder = string_placeholder
        self.max_depth = max_depth
        self.max_recursion = max_recursion
        self.placeholders = {
            SchemaKind.STRING: string_placeholder,
            SchemaKind.INTEGER32: INT32_MAX_VALUE,
            SchemaKind.INTEGER64: INT64_MAX_VALUE,
            SchemaKind.DOUBLE: DOUBLE_MAX_VALUE,
            SchemaKind.BOOLEAN: False,
        }

    def resolve(self, node: Any) -> dict[str, Any] | None:
        """Follow ``$ref`` chains through the lookup table.

        Returns None for absent nodes, dangling references and reference
        loops that never reach a concrete schema.
        """
        seen: set[str] = set()
        while isinstance(node, dict) and classify(node) is SchemaKind.REFERENCE:
            ref = node["$ref"]
            if ref in seen or ref not in self.lookup_table:
                logger.debug("Unresolvable reference %s", ref)
                return None
            seen.add(ref)
            node = self.lookup_table[ref]

        return node if isinstance(node, dict) else None

    def example_for_schema(self, schema: Any, only_required: bool = False) -> Any:
        """Synthesize a top-level example for a request or response schema.

        Object schemas are always assembled property by property, ignoring
        any literal example on the object itself. Any other schema
        (primitive, array) goes through example_value.

        Args:
            schema: Schema node, possibly a reference
            only_required: Restrict objects to their required properties

        Returns:
            Example value, or None when nothing can be synthesized
        """
        node = self.resolve(schema)
        if node is None:
            return None

        kind = classify(node)
        is_object = kind is SchemaKind.OBJECT or (
            kind is SchemaKind.UNTYPED and isinstance(node.get("properties"), dict)
        )
        if is_object:
            return self.build_example(node, only_required, 0, {})

        return self.example_value(None, schema, only_required, 0, {})

    def build_example(
        self,
        node: Any,
        only_required: bool,
        depth: int,
        expanding: RecursionState | None = None,
    ) -> dict[str, Any] | None:
        """Build an example object from an object schema.

        Args:
            node: Object schema node, possibly a reference
            only_required: Restrict to properties listed in ``required``
            depth: Current nesting depth
            expanding: Recursion state for the current path

        Returns:
            Example dictionary, or None if there are no qualifying properties
        """
        node = self.resolve(node)
        if node is None:
            return None

        required = node.get("required")
        if only_required and not isinstance(required, list):
            return None

        properties = node.get("properties")
        if not isinstance(properties, dict):
            return None

        if only_required:
            properties = {name: prop for name, prop in properties.items() if name in required}

        if not properties:
            return None

        if expanding is None:
            expanding = {}

        return {
            name: self.example_value(name, prop, only_required, depth, expanding)
            for name, prop in properties.items()
        }

    def example_value(
        self,
        name: str | None,
        node: Any,
        only_required: bool,
        depth: int,
        expanding: RecursionState | None = None,
    ) -> Any:
        """Synthesize the example value for one schema node.

        Resolution order: literal example, primitive placeholder, depth
        ceiling, recursion guard, then array or object expansion.

        Args:
            name: Property name the node belongs to (None at top level)
            node: Schema node, possibly a reference
            only_required: Restrict nested objects to required properties
            depth: Current nesting depth
            expanding: Recursion state for the current path

        Returns:
            Example value, or None if the node cannot be synthesized
        """
        identity = self._identity(node)
        node = self.resolve(node)
        if node is None:
            return None

        if "example" in node:
            return node["example"]

        kind = classify(node)

        if kind is SchemaKind.UNTYPED:
            return None
        if kind.is_primitive:
            return self.placeholders[kind]

        if depth > self.max_depth:
            return None

        expanding = expanding or {}
        count = expanding.get(identity, 0) + 1
        if count > self.max_recursion:
            logger.debug("Cutting recursive expansion of %s at depth %d", name or "<root>", depth)
            return [None]
        expanding = {**expanding, identity: count}

        if kind is SchemaKind.ARRAY:
            return [self.build_example(node.get("items"), only_required, depth + 1, expanding)]

        return self.build_example(node, only_required, depth + 1, expanding)

    def _identity(self, node: Any) -> Any:
        """Stable identity of a schema for recursion tracking."""
        if isinstance(node, dict) and classify(node) is SchemaKind.REFERENCE:
            return node["$ref"]
        return id(node)
