import builtins
import inspect
import logging
import re
import sys
from types import UnionType
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, Union, get_args, get_origin, get_type_hints

from alias_ioc.application.docblock import parse_parameter_types
from alias_ioc.application.type_loader import load_type
from alias_ioc.domain import (
    DependencyDescriptor,
    DependencyResolutionError,
    DependencyTarget,
    IBuilder,
    IContainer,
    NonInstantiableTypeError,
    TypeDescriptor,
    qualified_name,
)

logger = logging.getLogger(__name__)

_TYPE_NAME = re.compile(r"[A-Za-z_][\w.]*")
_OPTIONAL_NAME = re.compile(r"(?:typing\.)?Optional\[\s*([A-Za-z_][\w.]*)\s*\]")
_UNTYPED_NAMES = {"Any", "None", "array", "boolean", "callable", "integer", "mixed", "object", "string", "void"}


def _is_untyped_name(type_name: str) -> bool:
    return type_name in _UNTYPED_NAMES or isinstance(getattr(builtins, type_name, None), type)


def usable_type(declared: Any) -> Optional[DependencyTarget]:
    """Reduce a declared type to something the container can look up.

    Classes defined outside ``builtins`` are used as they are, ``Optional[X]``
    reduces to ``X``, and string forward references are kept as type names.
    Primitive types, ``Any`` and other typing constructs yield None.
    """
    if declared is None:
        return None

    if isinstance(declared, str):
        declared = declared.strip().strip("'\"")
        optional = _OPTIONAL_NAME.fullmatch(declared)
        if optional:
            declared = optional.group(1)
        if _TYPE_NAME.fullmatch(declared) and not _is_untyped_name(declared):
            return declared
        return None

    if get_origin(declared) in (Union, UnionType):
        members = [arg for arg in get_args(declared) if arg is not type(None)]
        if len(members) != 1:
            return None
        declared = members[0]

    if not inspect.isclass(declared) or declared is Any:
        return None
    if declared.__module__ in ("builtins", "typing"):
        return None
    return declared


class Builder(IBuilder):
    """Constructs classes by reflecting their constructor.

    Each constructor parameter is resolved through the container from its
    type hint, or, for untyped parameters, from the type documented for it
    in the constructor's docstring. Bare type names, documented or left as
    unevaluated annotations, refer to the class of that name in the
    constructor's module when there is one, and are otherwise looked up by
    name.
    """

    def build(
        self,
        target: DependencyTarget,
        alias: str,
        container: IContainer,
        dependencies: Optional[Sequence[DependencyTarget]] = None,
    ) -> Any:
        """Instantiate a class with its constructor dependencies injected.

        Args:
            target: The class, or dotted path to it.
            alias: Alias the build was requested for.
            container: Container dependencies are resolved from.
            dependencies: Explicit dependencies passed positionally instead
                of reflecting the constructor.

        Returns:
            The new instance.

        Raises:
            NonInstantiableTypeError: If the target cannot be loaded, is not a
                class, or is abstract.
            DependencyResolutionError: If a parameter's dependency cannot be
                determined.

        Example:
            >>> class Mailer:
            ...     def __init__(self, transport: SmtpTransport):
            ...         self.transport = transport
            >>>
            >>> mailer = Builder().build(Mailer, "mailer", container)
        """
        cls = self._load(target, alias)

        if dependencies is not None:
            args = [container.resolve_type(dependency) for dependency in dependencies]
            logger.debug("Building %s with %d declared dependencies", qualified_name(cls), len(args))
            return cls(*args)

        descriptor = self.describe(cls)
        if descriptor is None or not descriptor.parameters:
            logger.debug("Building %s without arguments", qualified_name(cls))
            return cls()

        args, kwargs = self.resolve_dependencies(descriptor, container)
        logger.debug("Building %s with %d injected arguments", descriptor.owner_name, len(args) + len(kwargs))
        return cls(*args, **kwargs)

    def describe(self, cls: Type) -> Optional[TypeDescriptor]:
        """Reflect the constructor parameters of a class.

        Returns:
            The parameter list, or None when the signature cannot be read
            (some builtin and extension types).
        """
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            return None

        hints = self._type_hints(cls)
        documented = self._documented_types(cls)

        parameters = []
        for name, param in signature.parameters.items():
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            declared = hints.get(name, param.annotation)
            parameters.append(
                DependencyDescriptor(
                    name=name,
                    positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                    declared_type=None if declared is inspect.Parameter.empty else declared,
                    annotated_type=documented.get(name),
                    has_default=param.default is not inspect.Parameter.empty,
                )
            )

        return TypeDescriptor(target=cls, parameters=tuple(parameters))

    def resolve_dependencies(
        self,
        descriptor: TypeDescriptor,
        container: IContainer,
    ) -> Tuple[List[Any], Dict[str, Any]]:
        """Resolve every constructor parameter of a described class.

        Positional-only parameters are returned positionally, the rest by
        keyword, so a parameter left to its default never shifts the others.

        Returns:
            Positional arguments and keyword arguments for the constructor.

        Raises:
            DependencyResolutionError: If a parameter without a default has
                neither a usable type hint nor a documented type.
        """
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        omitted_positional: Optional[str] = None

        for param in descriptor.parameters:
            target = self._bind_name(usable_type(param.declared_type), descriptor.target) or self._bind_name(
                usable_type(param.annotated_type), descriptor.target
            )

            if target is None and not param.has_default:
                raise DependencyResolutionError(
                    param.name,
                    descriptor.owner_name,
                    "no type hint or docstring annotation names a resolvable type",
                )

            if target is None or (param.has_default and not container.can_resolve(target)):
                if param.positional_only:
                    omitted_positional = param.name
                continue

            if param.positional_only:
                if omitted_positional is not None:
                    raise DependencyResolutionError(
                        param.name,
                        descriptor.owner_name,
                        f"follows positional-only parameter '{omitted_positional}' which was left to its default",
                    )
                args.append(container.resolve_type(target))
            else:
                kwargs[param.name] = container.resolve_type(target)

        return args, kwargs

    def _load(self, target: DependencyTarget, alias: str) -> Type:
        if isinstance(target, str):
            try:
                cls = load_type(target)
            except ImportError as exc:
                raise NonInstantiableTypeError(target, alias, str(exc)) from exc
            type_name = target
        else:
            cls = target
            type_name = qualified_name(cls) if inspect.isclass(cls) else repr(cls)

        if not inspect.isclass(cls):
            raise NonInstantiableTypeError(type_name, alias, "not a class")
        if inspect.isabstract(cls):
            raise NonInstantiableTypeError(type_name, alias, "abstract class")
        if getattr(cls, "_is_protocol", False):
            raise NonInstantiableTypeError(type_name, alias, "protocol class")
        return cls

    @staticmethod
    def _constructor(cls: Type) -> Optional[Callable[..., Any]]:
        init = getattr(cls, "__init__", None)
        if init is None or init is object.__init__:
            return None
        return init

    def _type_hints(self, cls: Type) -> Dict[str, Any]:
        """Evaluate the constructor's annotations.

        When some annotation cannot be evaluated (typically a name imported
        only under ``TYPE_CHECKING``), the others are evaluated one by one
        and the failing ones are kept as strings.
        """
        init = self._constructor(cls)
        if init is None:
            return {}
        try:
            return get_type_hints(init)
        except (NameError, TypeError, AttributeError):
            pass

        namespace = getattr(init, "__globals__", {})
        hints: Dict[str, Any] = {}
        for name, annotation in getattr(init, "__annotations__", {}).items():
            if isinstance(annotation, str):
                try:
                    annotation = eval(annotation, namespace)
                except (NameError, TypeError, AttributeError, SyntaxError):
                    logger.debug("Keeping annotation %r of %s unevaluated", annotation, qualified_name(cls))
            hints[name] = annotation
        return hints

    def _bind_name(self, type_name: Optional[DependencyTarget], owner: Type) -> Optional[DependencyTarget]:
        """Bind a bare type name to the class of that name in the constructor's module."""
        if not isinstance(type_name, str) or "." in type_name:
            return type_name
        module = getattr(self._constructor(owner), "__module__", None) or owner.__module__
        found = getattr(sys.modules.get(module), type_name, None)
        return usable_type(found) if inspect.isclass(found) else type_name

    def _documented_types(self, cls: Type) -> Dict[str, str]:
        documented = parse_parameter_types(cls.__doc__)
        init = self._constructor(cls)
        if init is not None:
            documented.update(parse_parameter_types(init.__doc__))
        return documented
