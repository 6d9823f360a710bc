"""
alias-ioc: Minimal alias-keyed inversion of control container with constructor injection.

Public API exports for the alias-ioc package.
"""

# Application exports
from alias_ioc.application.container import Container

# Domain exports
from alias_ioc.domain.enums import ConcreteKind
from alias_ioc.domain.exceptions import (
    AmbiguousDependencyError,
    CircularDependencyError,
    DependencyResolutionError,
    IoCException,
    NonInstantiableTypeError,
    UnregisteredAliasError,
)
from alias_ioc.domain.models import Factory, Instance, TypeReference

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    # Concrete variants
    "ConcreteKind",
    "TypeReference",
    "Factory",
    "Instance",
    # Exceptions
    "IoCException",
    "UnregisteredAliasError",
    "NonInstantiableTypeError",
    "DependencyResolutionError",
    "CircularDependencyError",
    "AmbiguousDependencyError",
]
