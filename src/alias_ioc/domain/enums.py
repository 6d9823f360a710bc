from enum import Enum


class ConcreteKind(str, Enum):
    """Defines how a registration produces its instance.

    Attributes:
        TYPE: A class (or dotted path to one) built on demand.
        FACTORY: A zero-argument callable invoked on every resolution.
        INSTANCE: A pre-built object, always shared.
    """

    TYPE = "type"
    FACTORY = "factory"
    INSTANCE = "instance"

    def __str__(self) -> str:
        return self.value
