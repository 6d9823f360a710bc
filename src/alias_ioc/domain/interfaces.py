from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Sequence

from alias_ioc.domain.models import DependencyTarget, Registration


class IContainer(ABC):
    """Abstract interface for container operations."""

    @abstractmethod
    def register(
        self,
        alias: str,
        concrete: Any = None,
        shared: bool = False,
        dependencies: Optional[Sequence[DependencyTarget]] = None,
    ) -> None:
        """Register a class, factory or pre-built instance under an alias.

        Args:
            alias: Key to register under.
            concrete: Class, dotted class path, factory or instance.
                Defaults to the alias itself as a class path.
            shared: Cache the first built instance.
            dependencies: Explicit constructor dependencies.
        """

    @abstractmethod
    def unregister(self, alias: str) -> None:
        """Remove an alias and its cached shared instance."""

    @abstractmethod
    def has(self, alias: str) -> bool:
        """Return whether the alias is registered."""

    @abstractmethod
    def resolve(self, alias: str) -> Any:
        """Resolve and return the instance registered under the alias."""

    @abstractmethod
    def resolve_type(self, target: DependencyTarget) -> Any:
        """Resolve a dependency from a class or type name.

        Args:
            target: The class or type name declared for a dependency.
        """

    @abstractmethod
    def can_resolve(self, target: DependencyTarget) -> bool:
        """Return whether a class or type name maps to something resolvable."""

    @abstractmethod
    def aliases(self) -> Iterable[str]:
        """Return the registered aliases."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations and cached instances."""

    @abstractmethod
    def get_registry_copy(self) -> Dict[str, Registration]:
        """Get a copy of the current registrations."""


class IBuilder(ABC):
    """Abstract interface for constructing instances by reflection."""

    @abstractmethod
    def build(
        self,
        target: DependencyTarget,
        alias: str,
        container: IContainer,
        dependencies: Optional[Sequence[DependencyTarget]] = None,
    ) -> Any:
        """Instantiate the target with its constructor dependencies injected.

        Args:
            target: The class, or dotted path to it, to build.
            alias: Alias the build was requested for, used in errors.
            container: Container the dependencies are resolved from.
            dependencies: Explicit dependencies that bypass reflection.

        Returns:
            The new instance.

        Raises:
            NonInstantiableTypeError: If the target cannot be constructed.
            DependencyResolutionError: If a parameter cannot be resolved.
        """


class ISharedCache(ABC):
    """Abstract interface for the alias -> shared instance cache."""

    @abstractmethod
    def contains(self, alias: str) -> bool:
        """Return whether an instance is cached for the alias."""

    @abstractmethod
    def get(self, alias: str) -> Any:
        """Return the cached instance for the alias."""

    @abstractmethod
    def store(self, alias: str, instance: Any) -> None:
        """Cache an instance for the alias."""

    @abstractmethod
    def evict(self, alias: str) -> None:
        """Drop the cached instance for the alias, if any."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every cached instance."""
