"""Example payload enricher for Swagger/OpenAPI specifications.

Attaches synthesized example payloads to every operation:
- exampleRequest: full example of the request body
- simpleExampleRequest: required-only variant, when it differs from the full one
- exampleResponse: example of the default response body

Request bodies come from the first ``in: body`` parameter (Swagger 2.0) or,
failing that, from ``requestBody.content`` (OpenAPI 3.x). Responses come from
``responses.default``.

The input specification is never mutated: enriched operations are copied
into a new paths tree, everything else is shared with the input.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .example_synthesizer import MAX_DEPTH, MAX_RECURSION, STRING_PLACEHOLDER, ExampleSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_HTTP_METHODS = ["get", "post", "delete", "put", "patch", "head"]
DEFAULT_MEDIA_TYPES = ["application/json"]


@dataclass
class ExampleStats:
    """Statistics from example enrichment."""

    operations_processed: int = 0
    request_examples_added: int = 0
    simple_request_examples_added: int = 0
    response_examples_added: int = 0
    requests_skipped: int = 0
    responses_skipped: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "operations_processed": self.operations_processed,
            "request_examples_added": self.request_examples_added,
            "simple_request_examples_added": self.simple_request_examples_added,
            "response_examples_added": self.response_examples_added,
            "requests_skipped": self.requests_skipped,
            "responses_skipped": self.responses_skipped,
        }


class ExampleEnricher:
    """Add synthesized request/response examples to API operations.

    Configuration-driven from examples.yaml:
    - which HTTP methods are visited, and in which order
    - names of the three example fields
    - string placeholder and recursion limits for the synthesizer
    - preferred media types for OpenAPI 3.x bodies
    """

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize enricher with example configuration.

        Args:
            config_path: Path to examples.yaml config.
                        Defaults to config/examples.yaml.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "examples.yaml"

        self.config_path = config_path
        self.http_methods: list[str] = []
        self.request_field = ""
        self.simple_request_field = ""
        self.response_field = ""
        self.string_placeholder = STRING_PLACEHOLDER
        self.max_depth = MAX_DEPTH
        self.max_recursion = MAX_RECURSION
        self.media_types: list[str] = []
        self.stats = ExampleStats()

        self._load_config()

    def _load_config(self) -> None:
        """Load example configuration from YAML config."""
        self._use_default_config()

        if not self.config_path.exists():
            return

        try:
            with self.config_path.open() as f:
                config = yaml.safe_load(f) or {}

            self.http_methods = [m.lower() for m in config.get("http_methods") or self.http_methods]

            fields = config.get("fields") or {}
            self.request_field = fields.get("request", self.request_field)
            self.simple_request_field = fields.get("simple_request", self.simple_request_field)
            self.response_field = fields.get("response", self.response_field)

            placeholders = config.get("placeholders") or {}
            self.string_placeholder = placeholders.get("string", self.string_placeholder)

            limits = config.get("limits") or {}
            self.max_depth = int(limits.get("max_depth", self.max_depth))
            self.max_recursion = int(limits.get("max_recursion", self.max_recursion))

            self.media_types = list(config.get("media_types") or self.media_types)
        except Exception:
            logger.exception("Error loading example configuration %s, using defaults", self.config_path)
            self._use_default_config()
            return

        logger.info("Loaded example configuration from %s", self.config_path)

    def _use_default_config(self) -> None:
        """Use built-in default example configuration."""
        self.http_methods = list(DEFAULT_HTTP_METHODS)
        self.request_field = "exampleRequest"
        self.simple_request_field = "simpleExampleRequest"
        self.response_field = "exampleResponse"
        self.string_placeholder = STRING_PLACEHOLDER
        self.max_depth = MAX_DEPTH
        self.max_recursion = MAX_RECURSION
        self.media_types = list(DEFAULT_MEDIA_TYPES)

    def create_synthesizer(self, lookup_table: dict[str, Any]) -> ExampleSynthesizer:
        """Create a synthesizer configured like this enricher."""
        return ExampleSynthesizer(
            lookup_table,
            string_placeholder=self.string_placeholder,
            max_depth=self.max_depth,
            max_recursion=self.max_recursion,
        )

    def enrich_spec(
        self,
        spec: dict[str, Any],
        lookup_table: dict[str, Any],
    ) -> dict[str, Any]:
        """Enrich specification operations with example payloads.

        Args:
            spec: Swagger/OpenAPI specification dictionary
            lookup_table: Mapping of reference URI to resolved schema node

        Returns:
            New specification with example fields on each operation
        """
        self.stats = ExampleStats()

        spec_copy = spec.copy()
        paths = spec.get("paths")
        if not isinstance(paths, dict):
            return spec_copy

        synthesizer = self.create_synthesizer(lookup_table)
        enriched_paths: dict[str, Any] = {}

        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                enriched_paths[path] = path_item
                continue

            enriched_item = path_item.copy()
            for method in self.http_methods:
                operation = path_item.get(method)
                if not isinstance(operation, dict):
                    continue
                enriched_item[method] = self._enrich_operation(operation, synthesizer, method, path)

            enriched_paths[path] = enriched_item

        spec_copy["paths"] = enriched_paths

        logger.info("Example enrichment complete: %s", self.stats.to_dict())
        return spec_copy

    def _enrich_operation(
        self,
        operation: dict[str, Any],
        synthesizer: ExampleSynthesizer,
        method: str,
        path: str,
    ) -> dict[str, Any]:
        """Build an enriched copy of a single operation.

        Args:
            operation: Operation definition
            synthesizer: Synthesizer bound to the spec's lookup table
            method: HTTP method
            path: API path

        Returns:
            Copy of the operation carrying the example fields
        """
        self.stats.operations_processed += 1
        enriched = operation.copy()

        request_schema = self._request_schema(operation, synthesizer)
        if request_schema is not None:
            example_request = synthesizer.example_for_schema(request_schema, only_required=False)
            if example_request is not None:
                enriched[self.request_field] = example_request
                self.stats.request_examples_added += 1

                simple_request = synthesizer.example_for_schema(request_schema, only_required=True)
                if simple_request is not None and simple_request != example_request:
                    enriched[self.simple_request_field] = simple_request
                    self.stats.simple_request_examples_added += 1
            else:
                logger.debug("No request example for %s %s", method.upper(), path)
                self.stats.requests_skipped += 1

        response_schema = self._response_schema(operation, synthesizer)
        if response_schema is not None:
            example_response = synthesizer.example_for_schema(response_schema, only_required=False)
            if example_response is not None:
                enriched[self.response_field] = example_response
                self.stats.response_examples_added += 1
            else:
                logger.debug("No response example for %s %s", method.upper(), path)
                self.stats.responses_skipped += 1

        return enriched

    def _request_schema(
        self,
        operation: dict[str, Any],
        synthesizer: ExampleSynthesizer,
    ) -> Any | None:
        """Find the request body schema of an operation.

        The first ``in: body`` parameter wins. Without one, the OpenAPI 3.x
        ``requestBody`` is consulted.
        """
        for parameter in operation.get("parameters") or []:
            parameter = synthesizer.resolve(parameter)
            if parameter is not None and parameter.get("in") == "body":
                return parameter.get("schema")

        request_body = synthesizer.resolve(operation.get("requestBody"))
        if request_body is None:
            return None
        return self._content_schema(request_body)

    def _response_schema(
        self,
        operation: dict[str, Any],
        synthesizer: ExampleSynthesizer,
    ) -> Any | None:
        """Find the default response schema of an operation."""
        responses = operation.get("responses")
        if not isinstance(responses, dict):
            return None

        default = synthesizer.resolve(responses.get("default"))
        if default is None:
            return None

        if "schema" in default:
            return default["schema"]
        return self._content_schema(default)

    def _content_schema(self, container: dict[str, Any]) -> Any | None:
        """Pick a schema from an OpenAPI 3.x ``content`` map.

        Preferred media types are tried in order, then the first entry.
        """
        content = container.get("content")
        if not isinstance(content, dict) or not content:
            return None

        for media_type in self.media_types:
            media = content.get(media_type)
            if isinstance(media, dict) and "schema" in media:
                return media["schema"]

        for media in content.values():
            if isinstance(media, dict) and "schema" in media:
                return media["schema"]

        return None

    def get_stats(self) -> dict[str, int]:
        """Get enrichment statistics.

        Returns:
            Statistics dictionary
        """
        return self.stats.to_dict()
