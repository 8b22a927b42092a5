import json
import os
from abc import ABC, abstractmethod
from typing import Any

from financeflow_categorizer.logger import get_logger

logger = get_logger(__name__)

Record = dict[str, Any]


class Persistence(ABC):
    """Where a store keeps its records. Stores never know the storage format."""

    @abstractmethod
    def load(self) -> list[Record]:
        pass

    @abstractmethod
    def save(self, records: list[Record]) -> None:
        pass


class InMemoryPersistence(Persistence):
    def __init__(self, records: list[Record] | None = None):
        self.records: list[Record] = list(records or [])

    def load(self) -> list[Record]:
        return [dict(record) for record in self.records]

    def save(self, records: list[Record]) -> None:
        self.records = [dict(record) for record in records]


class JsonFilePersistence(Persistence):
    def __init__(self, data_path: str):
        self.data_path = data_path

    def load(self) -> list[Record]:
        if not os.path.exists(self.data_path):
            return []
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("[STORE] Corrupt JSON in %s; starting empty.", self.data_path)
            return []
        if not isinstance(data, list):
            logger.warning("[STORE] Expected a list in %s; starting empty.", self.data_path)
            return []
        return [record for record in data if isinstance(record, dict)]

    def save(self, records: list[Record]) -> None:
        directory = os.path.dirname(self.data_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.data_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
