"""
Domain layer - Core models and contracts.

This layer contains the registration model, the error hierarchy and the
interfaces implemented by the application layer. It has no dependencies on
other layers.
"""

from .enums import ConcreteKind
from .exceptions import (
    AmbiguousDependencyError,
    CircularDependencyError,
    DependencyResolutionError,
    IoCException,
    NonInstantiableTypeError,
    UnregisteredAliasError,
)
from .interfaces import IBuilder, IContainer, ISharedCache
from .models import (
    Concrete,
    DependencyDescriptor,
    DependencyTarget,
    Factory,
    Instance,
    Registration,
    TypeDescriptor,
    TypeReference,
    qualified_name,
)

__all__ = [
    # Enums
    "ConcreteKind",
    # Exceptions
    "IoCException",
    "UnregisteredAliasError",
    "NonInstantiableTypeError",
    "DependencyResolutionError",
    "CircularDependencyError",
    "AmbiguousDependencyError",
    # Interfaces
    "IContainer",
    "IBuilder",
    "ISharedCache",
    # Models
    "Concrete",
    "DependencyTarget",
    "TypeReference",
    "Factory",
    "Instance",
    "Registration",
    "DependencyDescriptor",
    "TypeDescriptor",
    "qualified_name",
]
