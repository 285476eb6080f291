"""Abstract port for the remote relational mirror."""

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]


class RemoteStore(ABC):
    """Port for the remote store — table rows use snake_case external keys.

    Implementations raise :class:`atelier.domain.exceptions.RemoteStoreError`
    on failure; callers decide whether to swallow it.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name used in logs and errors (e.g. "database", "postgrest")."""
        ...

    @abstractmethod
    async def fetch_rows(self, table: str) -> list[Row]:
        """Return every row of *table*."""
        ...

    @abstractmethod
    async def upsert_rows(self, table: str, rows: list[Row]) -> None:
        """Insert or update *rows* keyed by their ``id``."""
        ...

    @abstractmethod
    async def replace_children(
        self, table: str, parent_column: str, parent_id: str, rows: list[Row]
    ) -> None:
        """Delete every child row of *parent_id*, then insert *rows*."""
        ...

    @abstractmethod
    async def delete_rows(self, table: str, ids: list[str]) -> None:
        """Delete rows whose ``id`` is in *ids*."""
        ...
