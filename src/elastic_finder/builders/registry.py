"""Explicit entity-type to builder-factory registry and the `finder` entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from elastic_finder.builders.generic import Builder
from elastic_finder.engine import entity_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from elastic_finder.engine import SearchEngine

    BuilderFactory = Callable[..., SearchEngine]


class BuilderRegistry:
    """Map entity types to the factory building their specialized builder.

    Entity types are keyed by name, so a class, one of its instances and its
    name string all resolve to the same entry. Unknown entity types fall back
    to the default factory.
    """

    def __init__(self, default: BuilderFactory = Builder) -> None:
        """Initialize an empty registry.

        Args:
            default (BuilderFactory): Factory used for unregistered entity types.

        """
        self._default = default
        self._factories: dict[str, BuilderFactory] = {}

    def __contains__(self, entity: object) -> bool:
        """Return whether the entity type has its own factory."""
        return entity_name(entity) in self._factories

    def register(self, entity: object, factory: BuilderFactory | None = None) -> Any:
        """Register the builder factory of an entity type.

        Usable directly or as a class decorator::

            @registry.register("Document")
            class DocumentBuilder(Builder): ...

        Args:
            entity (object): Entity class, instance or type name.
            factory (BuilderFactory | None): Factory; omitted when decorating.

        Returns:
            Any: The registered factory, or a decorator registering one.

        """
        key = entity_name(entity)
        if factory is None:

            def decorator(decorated: BuilderFactory) -> BuilderFactory:
                self._factories[key] = decorated
                return decorated

            return decorator

        self._factories[key] = factory
        return factory

    def resolve(self, entity: object) -> BuilderFactory:
        """Return the factory registered for an entity type, or the default."""
        return self._factories.get(entity_name(entity), self._default)


default_registry = BuilderRegistry()


def finder(entity: object, *, registry: BuilderRegistry | None = None, **collaborators: Any) -> SearchEngine:
    """Build the builder of an entity type.

    Args:
        entity (object): Entity class, instance or type name.
        registry (BuilderRegistry | None): Registry to resolve from; the
            default registry when omitted.
        **collaborators (Any): Keyword arguments of the builder constructor
            (`backend`, `records`, `pages`, `index`).

    Returns:
        SearchEngine: Fresh builder, index bootstrapped.

    """
    factory = (registry or default_registry).resolve(entity)
    return factory(entity, **collaborators)
