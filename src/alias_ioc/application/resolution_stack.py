"""Application layer - Aliases being resolved, for cycle detection."""

import threading
from contextlib import contextmanager
from typing import Iterator, List, Tuple

from alias_ioc.domain import CircularDependencyError


class ResolutionStack:
    """Aliases whose resolution is in progress, innermost last.

    Each thread has its own stack, so concurrent resolutions of the same
    alias on different threads are not mistaken for a cycle.

    Attributes:
        _local: Thread-local storage holding the stack.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    @property
    def _aliases(self) -> List[str]:
        if not hasattr(self._local, "aliases"):
            self._local.aliases = []
        return self._local.aliases

    @contextmanager
    def resolving(self, alias: str) -> Iterator[None]:
        """Mark an alias as being resolved for the duration of the block.

        Args:
            alias: The alias, or qualified class name for unregistered builds.

        Raises:
            CircularDependencyError: If the alias is already being resolved
                further up the chain. The error carries the aliases from its
                first occurrence to the repeat.

        Example:
            >>> with stack.resolving("mailer"):
            ...     with stack.resolving("transport"):
            ...         stack.chain()
            ('mailer', 'transport')
        """
        aliases = self._aliases
        if alias in aliases:
            raise CircularDependencyError(aliases[aliases.index(alias):] + [alias])

        aliases.append(alias)
        try:
            yield
        finally:
            # The stack may have been cleared inside the block
            if aliases:
                aliases.pop()

    def chain(self) -> Tuple[str, ...]:
        """Return the aliases being resolved on the current thread."""
        return tuple(self._aliases)

    def clear(self) -> None:
        """Forget the current thread's stack."""
        self._aliases.clear()
