import functools
import inspect
import logging
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Type

from alias_ioc.application.builder import Builder
from alias_ioc.application.registry import Registry
from alias_ioc.application.resolution_stack import ResolutionStack
from alias_ioc.application.shared_cache import SharedInstanceCache
from alias_ioc.application.type_loader import load_type
from alias_ioc.domain import (
    AmbiguousDependencyError,
    Concrete,
    DependencyTarget,
    Factory,
    IBuilder,
    IContainer,
    Instance,
    ISharedCache,
    Registration,
    TypeReference,
    UnregisteredAliasError,
    qualified_name,
)

logger = logging.getLogger(__name__)


def _as_concrete(alias: str, concrete: Any) -> Concrete:
    """Pick the concrete variant for a value passed to ``register``."""
    if concrete is None:
        return TypeReference(target=alias)
    if isinstance(concrete, (TypeReference, Factory, Instance)):
        return concrete
    if isinstance(concrete, str) or inspect.isclass(concrete):
        return TypeReference(target=concrete)
    if (
        inspect.isfunction(concrete)
        or inspect.ismethod(concrete)
        or inspect.isbuiltin(concrete)
        or isinstance(concrete, functools.partial)
    ):
        return Factory(factory=concrete)
    return Instance(value=concrete)


class Container(IContainer):
    """Inversion of control container keyed by alias.

    Aliases map to a class (built by reflecting its constructor), a
    zero-argument factory, or a pre-built instance. Constructor parameters
    are resolved recursively from their type hints or, for untyped
    parameters, from the types documented in the constructor's docstring.

    All operations are serialised on a re-entrant lock owned by the
    container, so it can be shared between threads.

    Attributes:
        autowire: Build dependency classes that have no registration instead
            of failing. Aliases passed to ``resolve`` must still be registered.
        _registry: Registrations keyed by alias.
        _shared: Cached instances of shared registrations.
        _builder: Component constructing classes by reflection.
        _resolution_stack: Aliases being resolved, for cycle detection.

    Example:
        >>> container = Container()
        >>> container.register("transport", SmtpTransport, shared=True)
        >>> container.register("mailer", Mailer)
        >>> mailer = container.resolve("mailer")
        >>> mailer.transport is container["transport"]
        True
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, *, autowire: bool = False) -> None:
        """Initialize the container.

        Args:
            values: Initial ``alias -> concrete`` registrations, all transient.
            autowire: Build unregistered dependency classes on demand.
        """
        self.autowire = autowire
        self._registry = Registry()
        self._shared: ISharedCache = SharedInstanceCache()
        self._builder: IBuilder = Builder()
        self._resolution_stack = ResolutionStack()
        self._lock = threading.RLock()

        for alias, concrete in (values or {}).items():
            self.register(alias, concrete)

    def register(
        self,
        alias: str,
        concrete: Any = None,
        shared: bool = False,
        dependencies: Optional[Sequence[DependencyTarget]] = None,
    ) -> None:
        """Register a class name, factory or configured object under an alias.

        Dependencies are only resolved when the alias is requested. Any
        previous registration of the alias and its cached instance are
        discarded.

        Args:
            alias: Key to register under.
            concrete: What the alias produces:
                - omitted: the alias is a dotted path to a class;
                - a class or a dotted path string: built on every resolution;
                - a function, lambda, method or ``functools.partial``: called
                  with no arguments on every resolution, never cached;
                - any other object: returned as-is, always shared.
                Wrap values in ``TypeReference``, ``Factory`` or ``Instance``
                to choose the variant explicitly (e.g. a string value or a
                callable object).
            shared: Cache the first built instance for later resolutions.
            dependencies: Aliases or classes passed positionally to the
                constructor instead of reflecting it.

        Raises:
            ValueError: If dependencies are given for a factory or instance.

        Example:
            >>> container.register("app.mail.SmtpTransport", shared=True)
            >>> container.register("clock", lambda: datetime.now())
            >>> container.register("settings", Settings(debug=True))
        """
        concrete = _as_concrete(alias, concrete)
        if dependencies is not None and not isinstance(concrete, TypeReference):
            raise ValueError(f"Dependencies can only be declared for class registrations, not for alias {alias!r}")

        registration = Registration(
            alias=alias,
            concrete=concrete,
            shared=shared,
            dependencies=tuple(dependencies) if dependencies is not None else None,
        )

        with self._lock:
            self._registry.set(registration)
            self._shared.evict(alias)
            if isinstance(concrete, Instance):
                self._shared.store(alias, concrete.value)

        logger.debug("Registered alias %r as %s (shared=%s)", alias, registration.kind, registration.shared)

    def register_shared(self, dependencies: Mapping[str, Any]) -> None:
        """Register several shared aliases at once.

        Args:
            dependencies: Mapping of alias to concrete.

        Example:
            >>> container.register_shared({
            ...     "config": AppConfig,
            ...     "database": DatabaseConnection,
            ... })
        """
        for alias, concrete in dependencies.items():
            self.register(alias, concrete, shared=True)

    def register_transients(self, dependencies: Mapping[str, Any]) -> None:
        """Register several transient aliases at once.

        Args:
            dependencies: Mapping of alias to concrete.
        """
        for alias, concrete in dependencies.items():
            self.register(alias, concrete)

    def unregister(self, alias: str) -> None:
        """Remove an alias and its cached instance. Unknown aliases are ignored."""
        with self._lock:
            self._registry.remove(alias)
            self._shared.evict(alias)

    def has(self, alias: str) -> bool:
        with self._lock:
            return self._registry.contains(alias)

    def resolve(self, alias: str) -> Any:
        """Resolve and return the item registered under an alias.

        Resolution order:
        - a cached shared instance is returned as-is;
        - a factory is called;
        - a pre-built instance is returned;
        - a class is built with its dependencies and cached when shared.

        Args:
            alias: The registered alias.

        Returns:
            The instance.

        Raises:
            UnregisteredAliasError: If the alias, or an alias a dependency
                maps to, is not registered.
            NonInstantiableTypeError: If a class cannot be constructed.
            DependencyResolutionError: If a constructor parameter cannot be
                resolved.
            CircularDependencyError: If the alias is already being resolved
                further up the current call chain.
        """
        with self._lock:
            registration = self._registry.get(alias)
            if registration is None:
                raise UnregisteredAliasError(alias)

            if self._shared.contains(alias):
                logger.debug("Returning shared instance for alias %r", alias)
                return self._shared.get(alias)

            with self._resolution_stack.resolving(alias):
                logger.debug("Resolving %s", " -> ".join(self._resolution_stack.chain()))
                return self._produce(registration)

    def _produce(self, registration: Registration) -> Any:
        concrete = registration.concrete

        if isinstance(concrete, Factory):
            # Factories run on every resolution, shared or not
            if registration.shared:
                logger.debug("Alias %r is a factory; shared flag ignored", registration.alias)
            return concrete.factory()

        if isinstance(concrete, Instance):
            return concrete.value

        instance = self._builder.build(concrete.target, registration.alias, self, registration.dependencies)
        if registration.shared:
            self._shared.store(registration.alias, instance)
        return instance

    def resolve_type(self, target: DependencyTarget) -> Any:
        """Resolve a dependency declared by class or type name.

        The alias is looked up in this order:
        - an alias equal to the type's qualified name, qualname or name;
        - registrations producing exactly that class;
        - registrations producing a subclass or an instance of it.
        String targets are first tried as aliases and registered class names,
        then imported when dotted.

        Args:
            target: The class or type name.

        Returns:
            The resolved instance.

        Raises:
            UnregisteredAliasError: If nothing is registered for the type and
                autowiring is off.
            AmbiguousDependencyError: If several registrations match equally.
        """
        with self._lock:
            alias, cls = self._lookup(target)
            if alias is not None:
                return self.resolve(alias)
            if self.autowire and cls is not None and self._is_constructible(cls):
                return self._build_unregistered(cls)
            raise UnregisteredAliasError(target if isinstance(target, str) else qualified_name(target))

    def can_resolve(self, target: DependencyTarget) -> bool:
        with self._lock:
            alias, cls = self._lookup(target)
        if alias is not None:
            return True
        return self.autowire and cls is not None and self._is_constructible(cls)

    def build(self, target: DependencyTarget, dependencies: Optional[Sequence[DependencyTarget]] = None) -> Any:
        """Build a class that is not registered, injecting its dependencies.

        The result is never cached.

        Args:
            target: The class or dotted path to it.
            dependencies: Explicit constructor dependencies.

        Returns:
            The new instance.
        """
        with self._lock:
            return self._build_unregistered(target, dependencies)

    def _build_unregistered(
        self,
        target: DependencyTarget,
        dependencies: Optional[Sequence[DependencyTarget]] = None,
    ) -> Any:
        name = target if isinstance(target, str) else qualified_name(target)
        with self._resolution_stack.resolving(name):
            return self._builder.build(target, name, self, dependencies)

    def _lookup(self, target: DependencyTarget) -> Tuple[Optional[str], Optional[Type]]:
        """Find the alias serving a dependency.

        Returns:
            The matching alias (or None) and the class the target denotes,
            when it could be determined.
        """
        if isinstance(target, str):
            if self._registry.contains(target):
                return target, None

            aliases = self._registry.find_by_name(target)
            if aliases:
                return self._single(target, aliases), None

            if "." not in target:
                return None, None
            try:
                loaded = load_type(target)
            except ImportError:
                return None, None
            if not inspect.isclass(loaded):
                return None, None
            target = loaded

        cls = target
        alias = self._registry.alias_for_name(qualified_name(cls), cls.__qualname__, cls.__name__)
        if alias is not None:
            return alias, cls

        aliases = self._registry.find_by_type(cls)
        if aliases:
            return self._single(qualified_name(cls), aliases), cls
        return None, cls

    @staticmethod
    def _single(type_name: str, aliases: List[str]) -> str:
        if len(aliases) > 1:
            raise AmbiguousDependencyError(type_name, aliases)
        return aliases[0]

    @staticmethod
    def _is_constructible(cls: Type) -> bool:
        return not inspect.isabstract(cls) and not getattr(cls, "_is_protocol", False)

    def aliases(self) -> List[str]:
        with self._lock:
            return self._registry.aliases()

    def get_registry_copy(self) -> Dict[str, Registration]:
        """Get a copy of the registrations, e.g. to seed another container."""
        with self._lock:
            return self._registry.copy()

    def set_registry(self, registry: Mapping[str, Registration]) -> None:
        """Replace all registrations, dropping every cached instance.

        Pre-built instances in the new registrations are cached again.

        Args:
            registry: Registrations keyed by alias.
        """
        with self._lock:
            self._registry.replace(dict(registry))
            self._shared.clear()
            for registration in self._registry:
                if isinstance(registration.concrete, Instance):
                    self._shared.store(registration.alias, registration.concrete.value)

    def clear(self) -> None:
        """Clear all registrations and cached instances.

        Useful for testing or resetting the container state.
        """
        with self._lock:
            self._registry.clear()
            self._shared.clear()
            self._resolution_stack.clear()

    def __getitem__(self, alias: str) -> Any:
        return self.resolve(alias)

    def __setitem__(self, alias: str, concrete: Any) -> None:
        self.register(alias, concrete)

    def __delitem__(self, alias: str) -> None:
        self.unregister(alias)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and self.has(alias)

    def __iter__(self) -> Iterator[str]:
        return iter(self.aliases())

    def __len__(self) -> int:
        with self._lock:
            return len(self._registry)
