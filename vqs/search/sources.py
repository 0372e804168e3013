"""
Candidate sources.

A candidate source returns the raw video records stored for one keyword.
Sources are async so the engine can fan out over several keywords; the
engine only relies on the `fetch(keyword)` coroutine.
"""
import json
import logging
import os
from typing import Dict, Iterable, List, Mapping, Protocol

logger = logging.getLogger(__name__)

KEYWORD_KEYS = ("collectionKeyword", "collection_keyword")


class CandidateSource(Protocol):
    async def fetch(self, keyword: str) -> List[dict]:
        ...


def _record_keyword(record: Mapping) -> str:
    for key in KEYWORD_KEYS:
        if record.get(key):
            return str(record[key])
    return ""


class InMemorySource:
    """Serves pre-grouped records: {keyword: [record, ...]}."""

    def __init__(self, records_by_keyword: Mapping[str, Iterable[dict]]):
        self._records = {k: list(v) for k, v in records_by_keyword.items()}

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "InMemorySource":
        """Group flat records by their collection keyword."""
        grouped: Dict[str, List[dict]] = {}
        for record in records:
            if not isinstance(record, Mapping):
                # Kept so scoring can count it as malformed
                grouped.setdefault("", []).append(record)
                continue
            grouped.setdefault(_record_keyword(record), []).append(record)
        return cls(grouped)

    @property
    def keywords(self) -> List[str]:
        return [k for k in self._records if k]

    async def fetch(self, keyword: str) -> List[dict]:
        return list(self._records.get(keyword, []))


class JsonFileSource(InMemorySource):
    """Records loaded from a JSON file.

    The file holds either a list of records (grouped by collection
    keyword) or an object mapping keyword -> list of records.
    """

    def __init__(self, path: str):
        if not os.path.exists(path):
            raise FileNotFoundError(f"Candidate file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            grouped = InMemorySource.from_records(data)._records
        elif isinstance(data, dict):
            grouped = {k: list(v) for k, v in data.items()}
        else:
            raise ValueError(
                f"Expected a list or object in {path}, got {type(data).__name__}"
            )

        super().__init__(grouped)
        self.path = path
        logger.info(
            "Loaded %d records for %d keywords from %s",
            sum(len(v) for v in grouped.values()), len(grouped), path,
        )
