"""OpenAPI document helpers: loading, reference resolution, examples, traversal."""
