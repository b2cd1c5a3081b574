"""Ordered views over the type registry."""

from __future__ import annotations

from dataclasses import dataclass

from .schema_models import RegisteredType, TypeRegistry

OrderedTypes = tuple[tuple[str, RegisteredType], ...]


def order_types(registry: TypeRegistry, ascending: bool = True) -> OrderedTypes:
    """Return registry entries by title, or longest title first when not ascending.

    The descending view drives auto-linking: a longer title that contains a
    shorter one has to be matched before the shorter one gets a chance.
    """
    if ascending:
        return tuple(sorted(registry.items(), key=lambda item: item[0]))
    return tuple(sorted(registry.items(), key=lambda item: (-len(item[0]), item[0])))


@dataclass(frozen=True)
class TypeViews:
    """Both registry orderings, built once per generation."""

    ascending: OrderedTypes
    descending: OrderedTypes

    @classmethod
    def from_registry(cls, registry: TypeRegistry) -> TypeViews:
        return cls(
            ascending=order_types(registry, ascending=True),
            descending=order_types(registry, ascending=False),
        )

    @property
    def descending_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.descending)
