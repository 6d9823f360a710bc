from typing import Annotated, Any, Callable, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from alias_ioc.domain.enums import ConcreteKind

DependencyTarget = Union[Type, str]


def qualified_name(cls: Type) -> str:
    """Return the importable dotted name of a class."""
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", cls.__name__)
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


class TypeReference(BaseModel):
    """Concrete variant naming a class to be built on demand.

    Attributes:
        target: The class itself or a dotted import path to it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[ConcreteKind.TYPE] = ConcreteKind.TYPE
    target: DependencyTarget = Field(..., description="Class or dotted path of the class to build.")

    @property
    def type_name(self) -> str:
        if isinstance(self.target, str):
            return self.target
        return qualified_name(self.target)


class Factory(BaseModel):
    """Concrete variant wrapping a zero-argument callable."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[ConcreteKind.FACTORY] = ConcreteKind.FACTORY
    factory: Callable[[], Any] = Field(..., description="Callable invoked on every resolution.")


class Instance(BaseModel):
    """Concrete variant holding a pre-built object."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[ConcreteKind.INSTANCE] = ConcreteKind.INSTANCE
    value: Any = Field(..., description="The object returned for every resolution.")


Concrete = Annotated[Union[TypeReference, Factory, Instance], Field(discriminator="kind")]


class Registration(BaseModel):
    """Value object representing one alias registration.

    Attributes:
        alias: Key the registration is stored under.
        concrete: How the instance is produced.
        shared: Whether the first built instance is cached for the alias.
            Always true for pre-built instances.
        dependencies: Optional explicit list of aliases or classes passed
            positionally to the constructor instead of reflecting it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    alias: str = Field(..., description="The alias the concrete is registered under.")
    concrete: Concrete = Field(..., description="Instructions for producing the instance.")
    shared: bool = Field(default=False, validate_default=True, description="Cache the first instance.")
    dependencies: Optional[Tuple[DependencyTarget, ...]] = Field(
        default=None,
        description="Explicit constructor dependencies, in positional order.",
    )

    @field_validator("shared")
    @classmethod
    def _instances_are_shared(cls, value: bool, info: ValidationInfo) -> bool:
        if isinstance(info.data.get("concrete"), Instance):
            return True
        return value

    @property
    def kind(self) -> ConcreteKind:
        return self.concrete.kind


class DependencyDescriptor(BaseModel):
    """Describes one constructor parameter during a build.

    Attributes:
        name: Parameter name.
        positional_only: Whether the argument must be passed positionally.
        declared_type: Type hint of the parameter, a string for forward
            references that could not be evaluated, or None.
        annotated_type: Type name found for the parameter in the
            constructor's docstring, or None.
        has_default: Whether the parameter declares a default value.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    positional_only: bool = False
    declared_type: Optional[Any] = None
    annotated_type: Optional[str] = None
    has_default: bool = False


class TypeDescriptor(BaseModel):
    """Constructor parameter list of a class, in declaration order."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: Type
    parameters: Tuple[DependencyDescriptor, ...] = ()

    @property
    def owner_name(self) -> str:
        return qualified_name(self.target)
