"""In-process cache of analysis records keyed by upload name."""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from .models import AnalysisRecord


logger = logging.getLogger(__name__)


class AnalysisStore:
    """Thread-safe mapping of document keys to their analysis record.

    Records are inserted whole and never mutated afterwards. Entries live for
    the lifetime of the process; there is no eviction.
    """

    def __init__(self) -> None:
        self._records: Dict[str, AnalysisRecord] = {}
        self._lock = threading.Lock()

    def put(self, key: str, record: AnalysisRecord) -> None:
        """Store *record* under *key*, replacing any previous entry."""

        with self._lock:
            replaced = key in self._records
            self._records[key] = record
            size = len(self._records)

        if replaced:
            logger.warning("Replaced cached analysis for %s", key)
        logger.debug("Cached analysis for %s (%s entries)", key, size)

    def get(self, key: str) -> Optional[AnalysisRecord]:
        with self._lock:
            return self._records.get(key)

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._records

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
