"""Synthesize example request and response payloads for Swagger/OpenAPI specs."""
