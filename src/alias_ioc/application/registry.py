import inspect
import logging
from typing import Callable, Dict, Iterator, List, Optional, Type

from alias_ioc.domain import Instance, Registration, TypeReference, qualified_name

logger = logging.getLogger(__name__)


def _type_names(cls: Type) -> List[str]:
    return [qualified_name(cls), cls.__qualname__, cls.__name__]


def _short_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]


class Registry:
    """Stores registrations by alias and looks aliases up by type.

    Attributes:
        _entries: Registrations keyed by alias, in registration order.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Registration] = {}

    def set(self, registration: Registration) -> None:
        """Store a registration, replacing any previous one for its alias."""
        if registration.alias in self._entries:
            logger.debug("Replacing registration for alias %r", registration.alias)
        self._entries[registration.alias] = registration

    def get(self, alias: str) -> Optional[Registration]:
        return self._entries.get(alias)

    def remove(self, alias: str) -> None:
        self._entries.pop(alias, None)

    def contains(self, alias: str) -> bool:
        return alias in self._entries

    def aliases(self) -> List[str]:
        return list(self._entries)

    def copy(self) -> Dict[str, Registration]:
        return self._entries.copy()

    def replace(self, entries: Dict[str, Registration]) -> None:
        self._entries = dict(entries)

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[Registration]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def alias_for_name(self, *names: str) -> Optional[str]:
        """Return the first of the given names that is itself a registered alias."""
        for name in names:
            if name in self._entries:
                return name
        return None

    def find_by_type(self, cls: Type) -> List[str]:
        """Return the aliases whose registration produces ``cls``.

        Exact matches (the class itself, or an instance of exactly that class)
        take precedence over subclass and ``isinstance`` matches. Type
        references given as dotted paths match on name only.

        Args:
            cls: The class a dependency is declared as.

        Returns:
            Aliases of the best tier of matches, possibly empty.
        """
        names = set(_type_names(cls))

        def exact(registration: Registration) -> bool:
            concrete = registration.concrete
            if isinstance(concrete, TypeReference):
                if isinstance(concrete.target, str):
                    return concrete.target in names
                return concrete.target is cls
            if isinstance(concrete, Instance):
                return type(concrete.value) is cls
            return False

        def compatible(registration: Registration) -> bool:
            concrete = registration.concrete
            try:
                if isinstance(concrete, TypeReference) and inspect.isclass(concrete.target):
                    return issubclass(concrete.target, cls)
                if isinstance(concrete, Instance):
                    return isinstance(concrete.value, cls)
            except TypeError:
                # non runtime-checkable protocols refuse subclass checks
                return False
            return False

        return self._first_tier(exact, compatible)

    def find_by_name(self, type_name: str) -> List[str]:
        """Return the aliases whose type reference is named ``type_name``.

        A dotted name must match a class's qualified name exactly; a bare name
        matches the class name or the last segment of a dotted path.
        """
        dotted = "." in type_name

        def matches(registration: Registration) -> bool:
            concrete = registration.concrete
            if isinstance(concrete, Instance):
                candidates = _type_names(type(concrete.value))
            elif isinstance(concrete, TypeReference):
                if isinstance(concrete.target, str):
                    candidates = [concrete.target, _short_name(concrete.target)]
                else:
                    candidates = _type_names(concrete.target)
            else:
                return False
            if dotted:
                return type_name == candidates[0]
            return type_name in candidates[1:]

        return self._first_tier(matches)

    def _first_tier(self, *predicates: Callable[[Registration], bool]) -> List[str]:
        for predicate in predicates:
            found = [registration.alias for registration in self._entries.values() if predicate(registration)]
            if found:
                return found
        return []
