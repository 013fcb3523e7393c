from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from skillcanon.core.config import settings
from skillcanon.errors import MalformedContent
from skillcanon.parsing.envelope import extract_text
from skillcanon.parsing.fenced import parse_fenced

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class StoredInteraction:
    interaction_id: int
    created_at: datetime
    request_body: Any
    response_body: Any
    http_status_code: int

    @property
    def successful(self) -> bool:
        return 200 <= self.http_status_code <= 299


class InteractionStore:
    """Request/response log for generation calls, kept in a local sqlite file."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self._db_path = Path(db_path or settings.interactions_db_path)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is not None:
                return self._conn
            if str(self._db_path) != ":memory:":
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False, timeout=5)
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS interactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at TEXT NOT NULL,
                    request_body TEXT NOT NULL,
                    response_body TEXT NOT NULL,
                    http_status_code INTEGER NOT NULL
                )
                """
            )
            self._conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_interactions_created_at
                ON interactions (created_at)
                """
            )
            self._conn.commit()
            return self._conn

    def record(self, request_payload: Any, response_envelope: Any, status_code: int = 200) -> int:
        conn = self._get_connection()
        with self._lock:
            cur = conn.execute(
                """
                INSERT INTO interactions (created_at, request_body, response_body, http_status_code)
                VALUES (?, ?, ?, ?)
                """,
                (
                    _utc_now(),
                    json.dumps(request_payload, ensure_ascii=False),
                    json.dumps(response_envelope, ensure_ascii=False),
                    int(status_code),
                ),
            )
            conn.commit()
            return int(cur.lastrowid)

    def _select(self, where: str = "", params: tuple[Any, ...] = (), limit: int | None = None) -> list[StoredInteraction]:
        conn = self._get_connection()
        sql = "SELECT id, created_at, request_body, response_body, http_status_code FROM interactions"
        if where:
            sql += f" WHERE {where}"
        sql += " ORDER BY id DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params = params + (int(limit),)
        with self._lock:
            rows = conn.execute(sql, params).fetchall()
        return [
            StoredInteraction(
                interaction_id=row[0],
                created_at=datetime.fromisoformat(row[1]),
                request_body=json.loads(row[2]),
                response_body=json.loads(row[3]),
                http_status_code=row[4],
            )
            for row in rows
        ]

    def latest(self, count: int = 1) -> list[StoredInteraction]:
        """Most recent interactions, oldest first."""
        return list(reversed(self._select(limit=max(1, count))))

    def successful(self) -> list[StoredInteraction]:
        return list(reversed(self._select("http_status_code BETWEEN 200 AND 299")))

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def record_safely(store: InteractionStore | None, request_payload: Any, response_envelope: Any, status_code: int = 200) -> int | None:
    if store is None or not settings.interactions_enabled:
        return None
    try:
        return store.record(request_payload, response_envelope, status_code)
    except (sqlite3.Error, OSError, TypeError, ValueError) as exc:
        logger.warning("interaction_store_failed: %s", exc)
        return None


def interaction_results(interaction: StoredInteraction) -> list[Any]:
    if not interaction.successful:
        return []
    try:
        return parse_fenced(extract_text(interaction.response_body), "json")
    except MalformedContent as exc:
        logger.warning("interaction_parse_failed id=%s: %s", interaction.interaction_id, exc)
        return []


def historical_results(store: InteractionStore) -> list[Any]:
    results: list[Any] = []
    for interaction in store.successful():
        results.extend(interaction_results(interaction))
    return results


def validation_statistics(results: list[Any]) -> dict[str, Any]:
    records = [item for item in results if isinstance(item, dict)]
    if not records:
        return {}

    valid = [item for item in records if item.get("is_valid") is True]
    review = [item for item in records if item.get("requires_review") is True]
    cluster_counts: Counter[int] = Counter()
    for item in valid:
        for cluster_id in item.get("clusters") or []:
            cluster_counts[cluster_id] += 1

    return {
        "total_skills": len(records),
        "valid_skills": len(valid),
        "invalid_skills": len(records) - len(valid),
        "review_needed": len(review),
        "validation_rate": len(valid) / len(records),
        "cluster_distribution": dict(cluster_counts.most_common()),
    }
