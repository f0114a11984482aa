"""Ideal fingerprint values per workspace."""

from abc import ABC, abstractmethod

from repodrift.models.schemas import Ideal


class MissingIdealError(LookupError):
    """Raised when a fingerprint kind has no recorded ideal."""

    def __init__(self, workspace_id: str, type: str, name: str):
        self.workspace_id = workspace_id
        self.type = type
        self.name = name
        super().__init__(f"No ideal recorded for {type}/{name} in workspace {workspace_id}")


class IdealStore(ABC):
    """Store of the desired value for each fingerprint kind."""

    @abstractmethod
    async def store_ideal(self, workspace_id: str, ideal: Ideal) -> None:
        ...

    @abstractmethod
    async def load_ideal(self, workspace_id: str, type: str, name: str) -> Ideal | None:
        """Load the ideal for a fingerprint kind.

        Returns:
            The ideal, or None if none has been recorded.
        """
        ...

    async def require_ideal(self, workspace_id: str, type: str, name: str) -> Ideal:
        """Load the ideal for a fingerprint kind.

        Raises:
            MissingIdealError: If no ideal has been recorded.
        """
        ideal = await self.load_ideal(workspace_id, type, name)
        if ideal is None:
            raise MissingIdealError(workspace_id, type, name)
        return ideal


class InMemoryIdealStore(IdealStore):
    """Ideal store held in process memory."""

    def __init__(self):
        self._ideals: dict[tuple[str, str, str], Ideal] = {}

    async def store_ideal(self, workspace_id: str, ideal: Ideal) -> None:
        self._ideals[(workspace_id, ideal.type, ideal.name)] = ideal

    async def load_ideal(self, workspace_id: str, type: str, name: str) -> Ideal | None:
        return self._ideals.get((workspace_id, type, name))
