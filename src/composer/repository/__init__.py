"""Repositories reading startup configuration from external stores."""

from composer.repository.registry_repository import RegistryLoader

__all__ = ["RegistryLoader"]
