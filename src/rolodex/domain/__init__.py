"""Domain layer: entities and value objects. No dependencies on outer layers."""

from rolodex.domain.entities import Contact

__all__ = ["Contact"]
