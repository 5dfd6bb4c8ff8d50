"""Utility modules for Swagger/OpenAPI example enrichment."""

from .example_enricher import ExampleEnricher, ExampleStats
from .example_synthesizer import ExampleSynthesizer
from .reference_resolver import (
    LocalReferenceResolver,
    ReferenceResolutionError,
    ReferenceResolver,
    ResolvedReference,
    build_lookup_table,
)
from .schema_kinds import SchemaKind, classify

__all__ = [
    "ExampleEnricher",
    "ExampleStats",
    "ExampleSynthesizer",
    "LocalReferenceResolver",
    "ReferenceResolutionError",
    "ReferenceResolver",
    "ResolvedReference",
    "SchemaKind",
    "build_lookup_table",
    "classify",
]
