from .client import BaseClient

__all__ = ("BaseClient",)
