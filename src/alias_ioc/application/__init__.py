"""
Application layer - Registration, resolution and construction.

This layer orchestrates the domain objects to resolve aliases into instances.
It depends only on the Domain layer.
"""

from .builder import Builder
from .container import Container
from .registry import Registry
from .resolution_stack import ResolutionStack
from .shared_cache import SharedInstanceCache

__all__ = [
    "Container",
    "Builder",
    "Registry",
    "SharedInstanceCache",
    "ResolutionStack",
]
