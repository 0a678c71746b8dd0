"""
Flat-file JSON document store.

Holds every entity collection in memory and rewrites the whole document to
disk on each mutating operation. Single process, no locking: running two
processes against the same file is unsupported.

Lifecycle:
    store = JsonStore(path, default_settings)
    store.open()      # load (or fall back to an empty document)
    ...               # services mutate store.document, then call store.save()
    store.close()     # flush only if a save failed and left changes unwritten
"""

import os
import secrets
import string
import time
from pathlib import Path

from pydantic import ValidationError

from app.infrastructure.observability.logging import get_logger
from app.models.domain.ambassador_domain import (
    ApprovalRecord,
    Contact,
    CreditHistoryEntry,
    SettingEntry,
    StoreDocument,
    User,
)

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


class PersistenceError(Exception):
    """Raised when the document cannot be serialized or written."""

    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(message)
        self.operation = operation


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Time-prefixed opaque id: base-36 epoch milliseconds + 9 random base-36 chars.
    Collisions are unlikely but not impossible.
    """
    prefix = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return prefix + suffix


class JsonStore:
    """In-memory document with whole-file write-through persistence."""

    def __init__(self, path: str | Path, default_settings: dict[str, str] | None = None):
        self.path = Path(path)
        self.default_settings = dict(default_settings or {})
        self.document = self._default_document()
        self._opened = False
        self._dirty = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> "JsonStore":
        self.load()
        self._opened = True
        logger.info(
            "Store opened",
            path=str(self.path),
            users=len(self.document.users),
            contacts=len(self.document.contacts),
        )
        return self

    def close(self) -> None:
        if not self._opened:
            return
        if self._dirty:
            self.save()
        self._opened = False
        logger.info("Store closed", path=str(self.path))

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def _default_document(self) -> StoreDocument:
        return StoreDocument(
            settings=[SettingEntry(key=k, value=v) for k, v in self.default_settings.items()]
        )

    def load(self) -> StoreDocument:
        """
        Read the backing file into memory.

        An absent, unparseable or schema-invalid file yields the default
        document. The file itself is left untouched until the next successful
        save.
        """
        self._dirty = False
        if not self.path.exists():
            logger.info("Store file not found, starting empty", path=str(self.path))
            self.document = self._default_document()
            return self.document

        try:
            raw = self.path.read_text(encoding="utf-8")
            self.document = StoreDocument.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(
                "Store file unreadable, falling back to empty document",
                path=str(self.path),
                error=str(e),
                error_type=type(e).__name__,
            )
            self.document = self._default_document()

        return self.document

    def save(self) -> None:
        """Serialize the full document and overwrite the backing file."""
        self._dirty = True
        try:
            payload = self.document.model_dump_json(indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
        except (OSError, TypeError, ValueError) as e:
            logger.error(
                "Failed to write store",
                path=str(self.path),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceError(f"Failed to write store: {e}", operation="save") from e
        self._dirty = False

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @property
    def users(self) -> list[User]:
        return self.document.users

    @property
    def contacts(self) -> list[Contact]:
        return self.document.contacts

    @property
    def approvals(self) -> list[ApprovalRecord]:
        return self.document.approvals

    @property
    def credits_history(self) -> list[CreditHistoryEntry]:
        return self.document.credits_history

    def find_user(self, user_id: str) -> User | None:
        return next((u for u in self.document.users if u.id == user_id), None)

    def find_contact(self, contact_id: str) -> Contact | None:
        return next((c for c in self.document.contacts if c.id == contact_id), None)

    def generate_id(self) -> str:
        return generate_id()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        for entry in self.document.settings:
            if entry.key == key:
                return entry.value
        return default

    def get_int_setting(self, key: str, default: int) -> int:
        value = self.get_setting(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Non-integer setting, using default", key=key, value=value)
            return default

    def set_setting(self, key: str, value: str) -> None:
        for entry in self.document.settings:
            if entry.key == key:
                entry.value = str(value)
                break
        else:
            self.document.settings.append(SettingEntry(key=key, value=str(value)))
        self.save()

    def health_check(self) -> dict:
        """Report whether the store is open and its backing directory is writable."""
        directory = self.path.parent
        writable = os.access(directory, os.W_OK) if directory.exists() else True
        return {
            "healthy": self._opened and writable,
            "path": str(self.path),
            "users": len(self.document.users),
            "contacts": len(self.document.contacts),
        }
