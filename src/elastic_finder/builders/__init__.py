"""Entity builders, their registry and the `finder` entry point."""

from elastic_finder.builders.documents import DocumentBuilder
from elastic_finder.builders.generic import Builder, normalize_match_text
from elastic_finder.builders.registry import BuilderRegistry, default_registry, finder

__all__ = [
    "Builder",
    "BuilderRegistry",
    "DocumentBuilder",
    "default_registry",
    "finder",
    "normalize_match_text",
]
