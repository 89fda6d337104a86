"""Token-keyed registry mapping native observers to query instances."""
import itertools
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

# Shared across registries so tokens stay unique for the process lifetime.
_token_counter = itertools.count(1)


class InstanceRegistry(Generic[T]):
    """Lookup table from observer token to the query that owns it.

    Not synchronized: all registration and dispatch happen on the thread
    that runs the event loop.
    """

    def __init__(self) -> None:
        self._instances: dict[int, T] = {}

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, token: object) -> bool:
        return token in self._instances

    def register(self, instance: T, identity: int | None = None) -> int:
        """Insert an instance under a token.

        Args:
            instance: Query instance to register.
            identity: Explicit token. A fresh token is generated when None.
                An existing entry with the same token is overwritten.

        Returns:
            The token the instance is registered under.
        """
        token = next(_token_counter) if identity is None else identity
        if token in self._instances:
            logger.warning("registry_entry_overwritten", token=token)
        self._instances[token] = instance
        return token

    def lookup(self, token: int) -> T | None:
        """Return the instance registered under token, or None."""
        return self._instances.get(token)

    def unregister(self, token: int) -> bool:
        """Remove the entry for token.

        Args:
            token: Token returned by register().

        Returns:
            True if an entry was removed.
        """
        return self._instances.pop(token, None) is not None
