"""Reference resolution for Swagger/OpenAPI documents.

Builds the reference lookup table used by example synthesis: every ``$ref``
string found in a document, mapped to the schema node it points at.

Resolution itself is delegated to a resolver object. The default
LocalReferenceResolver dereferences local JSON pointers (``#/definitions/Pet``)
with the ``referencing`` library. Self-referential schemas resolve without
error because the table stores the referenced node itself, leaving nested
``$ref`` values in place for the synthesizer to follow lazily.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Protocol

from referencing import Registry, Resource
from referencing.exceptions import Unresolvable, Unretrievable

logger = logging.getLogger(__name__)


class ReferenceResolutionError(ValueError):
    """Raised when a document contains a reference that cannot be resolved."""

    def __init__(self, message: str, ref: str | None = None, location: str | None = None) -> None:
        super().__init__(message)
        self.ref = ref
        self.location = location


@dataclass(frozen=True)
class ResolvedReference:
    """A single resolved reference.

    Attributes:
        uri: The reference string as written in the document
        location: JSON pointer to where the ``$ref`` occurs
        value: The node the reference points at
    """

    uri: str
    location: str
    value: Any


class ReferenceResolver(Protocol):
    """Anything that can resolve the references of a document."""

    async def resolve_refs(self, document: dict[str, Any]) -> list[ResolvedReference]:
        """Resolve every reference in a document."""
        ...


def _escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def iter_refs(obj: Any, location: str = "") -> Iterator[tuple[str, str]]:
    """Yield (location, ref) for every string ``$ref`` in a document.

    Args:
        obj: Document or fragment to walk
        location: JSON pointer of ``obj`` within the document

    Yields:
        Tuples of JSON pointer location and reference string
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            yield location, ref
        for key, value in obj.items():
            if key == "$ref":
                continue
            yield from iter_refs(value, f"{location}/{_escape_pointer_token(str(key))}")
    elif isinstance(obj, list):
        for index, item in enumerate(obj):
            yield from iter_refs(item, f"{location}/{index}")


class LocalReferenceResolver:
    """Resolve document-local references with ``referencing``.

    The document is registered as an opaque resource under ``base_uri`` so
    JSON pointers are walked literally, without JSON Schema ``id`` scoping
    (Swagger definitions routinely carry properties called ``id``).
    """

    def __init__(self, base_uri: str = "") -> None:
        self.base_uri = base_uri

    async def resolve_refs(self, document: dict[str, Any]) -> list[ResolvedReference]:
        """Resolve every reference in ``document``.

        Args:
            document: Swagger/OpenAPI document

        Returns:
            One ResolvedReference per ``$ref`` occurrence

        Raises:
            ReferenceResolutionError: If any reference cannot be resolved
        """
        if not isinstance(document, dict):
            raise ReferenceResolutionError("Cannot resolve references: document is not a mapping")

        registry = Registry().with_resource(self.base_uri, Resource.opaque(document))
        resolver = registry.resolver(base_uri=self.base_uri)

        resolved: list[ResolvedReference] = []
        for location, ref in iter_refs(document):
            try:
                contents = resolver.lookup(ref).contents
            except (Unresolvable, Unretrievable) as e:
                msg = f"Cannot resolve $ref {ref!r} at {location or '#'}"
                raise ReferenceResolutionError(msg, ref=ref, location=location or "#") from e
            resolved.append(ResolvedReference(uri=ref, location=location, value=contents))

        return resolved


async def build_lookup_table(
    spec: dict[str, Any],
    resolver: ReferenceResolver | None = None,
) -> dict[str, Any]:
    """Build the reference lookup table for a specification.

    Args:
        spec: Swagger/OpenAPI specification dictionary
        resolver: Reference resolver. Defaults to LocalReferenceResolver.

    Returns:
        Mapping of reference URI to resolved schema node

    Raises:
        ReferenceResolutionError: Propagated from the resolver
    """
    if resolver is None:
        resolver = LocalReferenceResolver()

    refs = await resolver.resolve_refs(spec)

    lookup_table: dict[str, Any] = {}
    for ref in refs:
        lookup_table[ref.uri] = ref.value

    logger.debug("Resolved %d references into %d lookup entries", len(refs), len(lookup_table))
    return lookup_table
