"""Transaction boundary contract used by the services and the SQL ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    One transaction, exposed as a context manager.

    Implementations carry ``users``, ``refresh_tokens`` and ``tenants``
    repositories that share the transaction. Leaving the block cleanly persists
    the work; leaving it with an exception discards it.
    """

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
