from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from realty_demo.models.demo_snapshot import DemoSnapshot
from realty_demo.schemas.demo import DemoState
from realty_demo.services.sample_library import build_empty_state, build_sample_state

logger = logging.getLogger("realty_demo.snapshot_storage")

# Bump whenever DemoState changes shape; older payloads are then ignored.
SNAPSHOT_VERSION = 2


# =========================================================
# SERIALIZATION
# =========================================================

def serialize_state(state: DemoState) -> str:
    envelope = {
        "version": SNAPSHOT_VERSION,
        "state": state.model_dump(mode="json"),
    }
    return json.dumps(envelope)


def _parse_envelope(raw: str) -> Optional[Dict[str, Any]]:
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Snapshot payload is not valid JSON; using defaults.")
        return None

    if not isinstance(envelope, dict) or not isinstance(envelope.get("state"), dict):
        logger.warning("Snapshot payload has no state object; using defaults.")
        return None

    version = envelope.get("version")
    if version != SNAPSHOT_VERSION:
        logger.warning(
            "Snapshot version %r does not match %s; using defaults.",
            version,
            SNAPSHOT_VERSION,
        )
        return None

    return envelope["state"]


def deserialize_state(raw: Optional[str], now: datetime) -> Optional[DemoState]:
    """
    Rebuild state from a persisted payload.

    Returns None when there is nothing usable and the caller should keep its
    defaults. A payload saved outside sample mode restores the empty live
    state. Otherwise persisted fields win over fresh sample defaults, except
    that an empty lead list falls back to seed leads, the follow-up draft is
    dropped, and follow-ups already marked sent are dropped.
    """
    if not raw:
        return None

    persisted = _parse_envelope(raw)
    if persisted is None:
        return None

    if not persisted.get("is_sample_mode"):
        return build_empty_state()

    defaults = build_sample_state(now).model_dump(mode="json")
    merged = {**defaults}
    merged.update({k: v for k, v in persisted.items() if v is not None and k in defaults})
    merged["is_sample_mode"] = True
    if not persisted.get("leads"):
        merged["leads"] = defaults["leads"]
    merged["follow_up_draft"] = None
    merged["scheduled_follow_ups"] = [
        item
        for item in merged.get("scheduled_follow_ups") or []
        if isinstance(item, dict) and item.get("status") != "sent"
    ]

    try:
        return DemoState.model_validate(merged)
    except ValidationError as exc:
        logger.warning("Snapshot failed validation (%d errors); using defaults.", exc.error_count())
        return None


# =========================================================
# STORAGE BACKENDS
# =========================================================

class SnapshotStorage(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, payload: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemorySnapshotStorage:
    def __init__(self) -> None:
        self.items: Dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def save(self, key: str, payload: str) -> None:
        self.items[key] = payload

    def delete(self, key: str) -> None:
        self.items.pop(key, None)


class SqlSnapshotStorage:
    """One row per storage key in the demo_snapshots table."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def load(self, key: str) -> Optional[str]:
        session: Session = self.session_factory()
        try:
            row = session.get(DemoSnapshot, key)
            return row.payload if row is not None else None
        except SQLAlchemyError:
            logger.exception("Failed to load snapshot %s", key)
            raise
        finally:
            session.close()

    def save(self, key: str, payload: str) -> None:
        session: Session = self.session_factory()
        try:
            row = session.get(DemoSnapshot, key)
            if row is None:
                row = DemoSnapshot(key=key, version=SNAPSHOT_VERSION, payload=payload)
                session.add(row)
            else:
                row.version = SNAPSHOT_VERSION
                row.payload = payload
                row.updated_at = datetime.utcnow()
            session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save snapshot %s; rolling back.", key)
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, key: str) -> None:
        session: Session = self.session_factory()
        try:
            row = session.get(DemoSnapshot, key)
            if row is not None:
                session.delete(row)
                session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to delete snapshot %s; rolling back.", key)
            session.rollback()
            raise
        finally:
            session.close()
