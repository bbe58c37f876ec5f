"""Read-only registry of entity descriptors."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from pocketsql.config.errors import ConfigurationError

from .errors import NotFoundError
from .metadata import EntityDescriptor

log = logging.getLogger(__name__)


class EntityCatalog:
    """Name to descriptor lookup, populated once and never mutated afterwards.

    Instances are safe to share between threads: every read goes through an immutable
    mapping proxy built during construction.
    """

    __slots__ = ("_descriptors",)

    def __init__(self, descriptors: Iterable[EntityDescriptor]) -> None:
        registry: dict[str, EntityDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in registry:
                raise ConfigurationError(f"entity '{descriptor.name}' registered twice")
            registry[descriptor.name] = descriptor
        self._descriptors: Mapping[str, EntityDescriptor] = MappingProxyType(registry)
        self._validate_children()
        log.debug("Loaded entity catalog with %d entities", len(registry))

    @classmethod
    def of(cls, *descriptors: EntityDescriptor) -> EntityCatalog:
        return cls(descriptors)

    def get(self, name: str) -> EntityDescriptor:
        """Return the descriptor registered under ``name`` or raise ``NotFoundError``."""

        try:
            return self._descriptors[name]
        except KeyError:
            raise NotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._descriptors)

    def descriptors(self) -> tuple[EntityDescriptor, ...]:
        return tuple(self._descriptors.values())

    def is_child_of(self, parent: EntityDescriptor, name: str) -> bool:
        """Return whether ``name`` is a legal nested relation of ``parent``."""

        if parent.declares(name) or name not in self._descriptors:
            return False
        if parent.children is None:
            return True
        return name in parent.children

    def _validate_children(self) -> None:
        for descriptor in self._descriptors.values():
            for child in descriptor.children or ():
                if child not in self._descriptors:
                    raise ConfigurationError(
                        f"entity '{descriptor.name}' declares unknown child relation '{child}'"
                    )
                if descriptor.declares(child):
                    raise ConfigurationError(
                        f"entity '{descriptor.name}' child relation '{child}' "
                        "collides with a declared field"
                    )
