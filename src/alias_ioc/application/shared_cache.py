import logging
from typing import Any, Dict

from alias_ioc.domain import ISharedCache

logger = logging.getLogger(__name__)


class SharedInstanceCache(ISharedCache):
    """Holds instances of shared registrations, keyed by alias.

    Entries are created on the first resolution of a shared type registration
    (or on registration of a pre-built instance) and live until the alias is
    evicted or re-registered.

    Attributes:
        _instances: Cached instances by alias.
    """

    def __init__(self) -> None:
        self._instances: Dict[str, Any] = {}

    def contains(self, alias: str) -> bool:
        return alias in self._instances

    def get(self, alias: str) -> Any:
        """Return the cached instance for the alias.

        Raises:
            KeyError: If nothing is cached for the alias.
        """
        return self._instances[alias]

    def store(self, alias: str, instance: Any) -> None:
        logger.debug("Caching shared instance for alias %r", alias)
        self._instances[alias] = instance

    def evict(self, alias: str) -> None:
        self._instances.pop(alias, None)

    def clear(self) -> None:
        """Drop every cached instance.

        Useful for testing or resetting container state.
        """
        self._instances.clear()
