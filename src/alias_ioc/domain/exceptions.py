from typing import List, Optional


class IoCException(Exception):
    """Base exception for container errors."""


class UnregisteredAliasError(IoCException, LookupError):
    """Raised when resolving an alias that has no registration.

    Attributes:
        alias: The alias that was requested.
    """

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f'Alias "{alias}" is not registered')


class NonInstantiableTypeError(IoCException):
    """Raised when the type behind an alias cannot be constructed.

    This occurs when:
    - The type name cannot be imported.
    - The target is not a class.
    - The class is abstract or a protocol.

    Attributes:
        type_name: Name of the type that could not be instantiated.
        alias: The alias the type was registered under.
        reason: Optional reason for the failure.
    """

    def __init__(self, type_name: str, alias: str, reason: Optional[str] = None) -> None:
        self.type_name = type_name
        self.alias = alias
        self.reason = reason
        message = f'Unable to instantiate "{type_name}" attached to alias: {alias}'
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class DependencyResolutionError(IoCException):
    """Raised when a constructor parameter's dependency cannot be determined.

    Attributes:
        parameter: Name of the constructor parameter.
        owner: Name of the type whose constructor declares the parameter.
        reason: Optional reason for the failure.
    """

    def __init__(self, parameter: str, owner: str, reason: Optional[str] = None) -> None:
        self.parameter = parameter
        self.owner = owner
        self.reason = reason
        message = f"Cannot resolve parameter '{parameter}' of {owner}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class CircularDependencyError(IoCException):
    """Raised when an alias reappears on the resolution stack.

    Attributes:
        dependency_chain: Aliases from the first occurrence to the repeat.
    """

    def __init__(self, dependency_chain: List[str]) -> None:
        self.dependency_chain = dependency_chain
        super().__init__(f"Circular dependency detected: {' -> '.join(dependency_chain)}")


class AmbiguousDependencyError(IoCException):
    """Raised when a dependency type matches more than one registration.

    Attributes:
        type_name: Name of the requested type.
        aliases: The registered aliases that all match it.
    """

    def __init__(self, type_name: str, aliases: List[str]) -> None:
        self.type_name = type_name
        self.aliases = aliases
        super().__init__(f"Type {type_name} matches several aliases: {', '.join(aliases)}")
