"""Unit of work interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Transaction boundary shared by the repositories of one request.

    Use cases commit before reporting success, so a response never claims a
    change the store has not kept.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Commit the changes made so far.

        Raises:
            PersistenceError: If the commit fails
        """
        pass
