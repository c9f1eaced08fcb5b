"""Unit of Work Interface

A unit of work wraps one storage transaction. Everything a use case writes
between two commits is applied together or not at all. Change events
recorded during the unit are only published after a successful commit.
"""

from abc import ABC, abstractmethod
from src.domain.change_event import ChangeEvent


class UnitOfWork(ABC):

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        """Commit the storage transaction, then publish recorded events in order"""
        pass

    @abstractmethod
    async def rollback(self):
        """Roll back the storage transaction and drop recorded events"""
        pass

    @abstractmethod
    def record(self, event: ChangeEvent) -> None:
        """Buffer a change event until commit"""
        pass
