"""Persistence utilities for the savings ledger."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from decimal import InvalidOperation
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from .exceptions import PersistenceError
from .models import LedgerState

logger = logging.getLogger(__name__)


class JSONStorage:
    """Simple file-based key-value store: one JSON document per key, crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {self._base_path}") from exc

    def load(self, resource: str) -> Optional[Any]:
        """Return the stored document, or ``None`` when the key was never written."""
        path = self._base_path / resource
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def save(self, resource: str, payload: Any) -> None:
        self.save_many({resource: payload})

    def save_many(self, documents: Mapping[str, Any]) -> None:
        """Write several keys so that either all of them change or none do.

        Every document is written to its ``.tmp`` file first; the real files
        are only replaced once all of those writes succeeded.
        """
        staged: List[Tuple[Path, Path]] = []
        try:
            for resource, payload in documents.items():
                path = self._base_path / resource
                temp_path = path.with_suffix(path.suffix + ".tmp")
                try:
                    with temp_path.open("w", encoding="utf-8") as handle:
                        json.dump(payload, handle, indent=2, ensure_ascii=False)
                        handle.flush()
                except (OSError, TypeError, ValueError) as exc:
                    if temp_path.is_file():
                        temp_path.unlink()
                    raise PersistenceError(f"Unable to write to {path}") from exc
                staged.append((temp_path, path))
        except PersistenceError:
            for temp_path, _ in staged:
                temp_path.unlink(missing_ok=True)
            raise

        for temp_path, path in staged:
            try:
                # Use replace for atomic move on POSIX; ensures crash-safe persistence.
                temp_path.replace(path)
            except OSError as exc:
                raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path


class LedgerRepository:
    """Loads and saves a whole :class:`LedgerState` through a key-value store.

    Each part of the state lives under its own key. When no key was ever
    written :meth:`load` returns ``None``; when only ``savings_categories`` is
    missing the state comes back with an empty ``accounts`` mapping and the
    remaining keys intact.
    """

    CATEGORIES = "savings_categories.json"
    EXPENSES = "expenses.json"
    TOTAL_ADDED = "total_money_added.json"
    TOTAL_REMOVED = "total_money_removed.json"

    def __init__(self, storage: JSONStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> JSONStorage:
        return self._storage

    def load(self) -> Optional[LedgerState]:
        raw_accounts = self._storage.load(self.CATEGORIES)
        raw_expenses = self._storage.load(self.EXPENSES)
        raw_added = self._storage.load(self.TOTAL_ADDED)
        raw_removed = self._storage.load(self.TOTAL_REMOVED)
        if raw_accounts is None and raw_expenses is None and raw_added is None and raw_removed is None:
            return None
        if raw_accounts is not None and not isinstance(raw_accounts, dict):
            raise PersistenceError(f"Expected an object in {self.CATEGORIES}")
        if raw_expenses is not None and not isinstance(raw_expenses, list):
            raise PersistenceError(f"Expected a list in {self.EXPENSES}")

        try:
            state = LedgerState.from_dict(
                {
                    "accounts": raw_accounts or {},
                    "expenses": raw_expenses or [],
                    "total_money_added": raw_added or "0",
                    "total_money_removed": raw_removed or "0",
                }
            )
        except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise PersistenceError("Stored ledger data is malformed") from exc
        if raw_accounts is None:
            logger.warning("No saved categories in %s; keeping the other saved data", self._storage.base_path)
            state = replace(state, accounts={})

        logger.debug(
            "Loaded ledger with %s expenses from %s", len(state.expenses), self._storage.base_path
        )
        return state

    def save(self, state: LedgerState) -> None:
        payload = state.to_dict()
        self._storage.save_many(
            {
                self.EXPENSES: payload["expenses"],
                self.CATEGORIES: payload["accounts"],
                self.TOTAL_ADDED: payload["total_money_added"],
                self.TOTAL_REMOVED: payload["total_money_removed"],
            }
        )
