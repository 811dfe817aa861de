"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .generation_handler import GenerationHandler, to_entity

__all__ = [
    "GenerationHandler",
    "to_entity",
]
