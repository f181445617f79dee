"""Append-only JSON log of submitted transactions."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from ..exceptions import ValidationError
from ..types import UNKNOWN_VAULT_ID, SubmittedTransaction, TransactionLogEntry

logger = logging.getLogger(__name__)

LOG_FILE_MODE = 0o644


def now_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class TransactionLog:
    """A JSON array of :class:`TransactionLogEntry`, rewritten whole on every update.

    Not safe for concurrent writers: two processes sharing a file can lose
    each other's updates.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> list[TransactionLogEntry]:
        if not self._path.exists():
            return []

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError as exc:
            raise ValidationError(
                f"Failed to decode existing data in {self._path}",
                field="path",
                value=str(self._path),
                details={"error": str(exc)},
            ) from exc

        if not isinstance(raw, list):
            raise ValidationError(
                f"{self._path} does not contain a JSON array", field="path", value=str(self._path)
            )
        try:
            return [TransactionLogEntry.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(
                f"Malformed transaction entry in {self._path}",
                field="path",
                value=str(self._path),
                details={"error": str(exc)},
            ) from exc

    def append(self, entry: TransactionLogEntry) -> None:
        entries = self.read()
        entries.append(entry)
        self._write(entries)
        logger.info("Transaction details saved to %s", self._path)

    def record(
        self,
        tx: SubmittedTransaction,
        tx_hash: str,
        vault_id: int = UNKNOWN_VAULT_ID,
    ) -> TransactionLogEntry:
        entry = TransactionLogEntry(
            timestamp=now_timestamp(), tx=tx, tx_hash=tx_hash, vault_id=vault_id
        )
        self.append(entry)
        return entry

    def patch_last_vault_id(self, vault_id: int) -> TransactionLogEntry | None:
        """Set ``vault_id`` on the most recent entry; returns it, or ``None`` if empty."""

        entries = self.read()
        if not entries:
            logger.warning("No transactions found in %s to update", self._path)
            return None

        entries[-1].vault_id = vault_id
        self._write(entries)
        logger.info("Transaction details updated in %s (vault_id=%s)", self._path, vault_id)
        return entries[-1]

    def _write(self, entries: list[TransactionLogEntry]) -> None:
        data = json.dumps([entry.to_dict() for entry in entries], indent=2)
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", delete=False, dir=directory, suffix=".tmp"
        ) as tmp:
            tmp_path = Path(tmp.name)
            try:
                tmp.write(data + "\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            except OSError:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise
        try:
            os.chmod(tmp_path, LOG_FILE_MODE)
            tmp_path.replace(self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
