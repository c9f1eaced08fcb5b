from .unit_of_work import SqlAlchemyUnitOfWork
from .change_feed import InMemoryChangeFeed, QueueSubscription

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryChangeFeed",
    "QueueSubscription",
]
