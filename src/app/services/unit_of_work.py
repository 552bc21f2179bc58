"""Unit of Work Interface

Single transaction boundary for a use case. Everything a use case writes
through its repositories becomes visible together on commit, or not at all.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction"""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Roll back the current transaction, discarding every pending write"""
        pass
