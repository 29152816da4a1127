"""JSON persistence for environments, history and saved requests.

Every load answers with a safe default on any error and every save swallows
its failure after logging it, so the interactive session is never interrupted
by the disk.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence, Type, TypeVar

from pydantic import BaseModel

from .environments import default_environments
from .models import (
    Accepted,
    EnvironmentsConfig,
    HistoryEntry,
    SavedRequest,
    dump,
    validate_entry,
)

logger = logging.getLogger("restman.storage")

M = TypeVar("M", bound=BaseModel)

DEFAULT_HISTORY_LIMIT = 100


class JsonFileStore:
    name = "data"

    def __init__(self, path: Path):
        self.path = Path(path)

    def _ensure_directory(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> Any:
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write(self, data: Any) -> None:
        self._ensure_directory()
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def _load_list(self, model: Type[M]) -> List[M]:
        try:
            self._ensure_directory()
            if not self.path.exists():
                return []
            raw = self._read()
        except (OSError, ValueError) as e:
            logger.error("Failed to load %s from %s: %s", self.name, self.path, e)
            return []

        if not isinstance(raw, list):
            logger.error("Failed to load %s from %s: expected a JSON array", self.name, self.path)
            return []

        entries: List[M] = []
        for index, item in enumerate(raw):
            result = validate_entry(model, item)
            if isinstance(result, Accepted):
                entries.append(result.value)
            else:
                logger.warning("Dropping %s entry #%d: %s", self.name, index, result.reason)
        return entries

    def _save(self, data: Any) -> None:
        try:
            self._write(data)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save %s to %s: %s", self.name, self.path, e)


class EnvironmentStore(JsonFileStore):
    name = "environments"

    def load(self) -> EnvironmentsConfig:
        try:
            self._ensure_directory()
            if not self.path.exists():
                return self._reset()
            raw = self._read()
        except (OSError, ValueError) as e:
            logger.error("Failed to load environments from %s: %s", self.path, e)
            return self._reset()

        result = validate_entry(EnvironmentsConfig, raw)
        if isinstance(result, Accepted):
            return result.value
        logger.warning("Invalid environments file %s: %s", self.path, result.reason)
        return self._reset()

    def save(self, config: EnvironmentsConfig) -> None:
        self._save(dump(config, exclude_none=False))

    def _reset(self) -> EnvironmentsConfig:
        config = default_environments()
        self.save(config)
        return config


class HistoryStore(JsonFileStore):
    name = "history"

    def __init__(self, path: Path, limit: int = DEFAULT_HISTORY_LIMIT):
        super().__init__(path)
        self.limit = limit

    def load(self) -> List[HistoryEntry]:
        return self._load_list(HistoryEntry)

    def save(self, history: Sequence[HistoryEntry]) -> None:
        self._save([dump(entry) for entry in list(history)[-self.limit:]])


class SavedRequestStore(JsonFileStore):
    name = "saved requests"

    def load(self) -> List[SavedRequest]:
        return self._load_list(SavedRequest)

    def save(self, saved: Sequence[SavedRequest]) -> None:
        self._save([dump(entry) for entry in saved])
