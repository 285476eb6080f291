"""JSON file snapshot store — the durable local copy of the business data set.

The whole aggregate is one camelCase JSON document. Writes go to a
temporary file in the same directory and are moved into place with
``os.replace`` so a crash never leaves a half-written snapshot.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from atelier.application.interfaces import SnapshotStore
from atelier.application.schemas.snapshot import AppDataDocument
from atelier.domain.entities import AppData, BusinessSettings

logger = logging.getLogger(__name__)


class JsonSnapshotStore(SnapshotStore):
    """Infrastructure adapter for the local snapshot file."""

    def __init__(self, path: str | Path, seed_settings: BusinessSettings | None = None):
        self._path = Path(path)
        self._seed_settings = seed_settings or BusinessSettings()

    @property
    def path(self) -> Path:
        return self._path

    def _seed(self) -> AppData:
        return AppData(settings=self._seed_settings)

    def load(self) -> AppData:
        if not self._path.exists():
            logger.info("No snapshot at %s; starting from seed data", self._path)
            return self._seed()
        try:
            raw = json.loads(self._path.read_text("utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("snapshot root is not an object")
            return AppDataDocument.model_validate(raw).to_app_data()
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable snapshot %s (%s); starting from seed data", self._path, exc)
            return self._seed()

    def save(self, data: AppData) -> None:
        payload = AppDataDocument.from_app_data(data).to_json_dict()
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Snapshot saved to %s", self._path)
