"""License key store.

Keeps active license keys and the latest key issued per email. When a
``storage_file`` is configured the store is persisted as JSON and rewritten
wholesale on every change; otherwise it lives in memory only.
"""
from __future__ import annotations

import json
import logging
import secrets
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional, Set

from sna.constants import LICENSE_KEY_ALPHABET, LICENSE_KEY_PREFIX

logger = logging.getLogger(__name__)


def generate_license_key() -> str:
    """Generate a key of the form ``SCRY-XXXX-XXXX-XXXX``."""
    chunks = ["".join(secrets.choice(LICENSE_KEY_ALPHABET) for _ in range(4)) for _ in range(3)]
    return "-".join([LICENSE_KEY_PREFIX, *chunks])


class LicenseStore:
    """Service for managing license keys."""

    def __init__(self, storage_file: Optional[str] = None, seed_keys: Iterable[str] = ()):
        self.storage_file = Path(storage_file) if storage_file else None
        self._seed_keys = [key for key in seed_keys if key]
        self._keys: Set[str] = set(self._seed_keys)
        self._email_index: Dict[str, str] = {}
        self._is_loaded = self.storage_file is None
        self._last_error: Optional[str] = None

    @property
    def backend(self) -> str:
        return "json" if self.storage_file else "memory"

    async def load(self) -> None:
        """Load persisted keys from file, once."""
        if self._is_loaded:
            return

        try:
            if self.storage_file.exists():
                with open(self.storage_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self._keys.update(data.get("licenses", []))
                self._email_index.update(data.get("emails", {}))
                logger.info(f"Loaded {len(self._keys)} licenses from {self.storage_file}")
            else:
                logger.info("No license store file found - starting with seed keys")
            self._last_error = None
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load license store: {e}")
            self._last_error = str(e)
        self._is_loaded = True

    def _save(self) -> None:
        if self.storage_file is None:
            return
        payload = {
            "saved_at": datetime.utcnow().isoformat(),
            "licenses": sorted(self._keys),
            "emails": self._email_index,
        }
        try:
            self.storage_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.storage_file, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            self._last_error = None
        except IOError as e:
            logger.error(f"Failed to write license store: {e}")
            self._last_error = str(e)
            raise

    async def is_valid(self, key: Optional[str]) -> bool:
        """Check whether a license key is active."""
        if not key:
            return False
        await self.load()
        return key in self._keys

    async def add(self, key: str, email: Optional[str] = None) -> bool:
        """Activate ``key``, indexing it under ``email`` when given.

        Returns False if the key was already active.
        """
        await self.load()
        if key in self._keys:
            return False

        email = email.lower() if email else None
        previous = self._email_index.get(email) if email else None
        self._keys.add(key)
        if email:
            self._email_index[email] = key
        try:
            self._save()
        except IOError:
            # Unpersisted keys must not stay active
            self._keys.discard(key)
            if email:
                if previous is None:
                    self._email_index.pop(email, None)
                else:
                    self._email_index[email] = previous
            raise
        return True

    async def find_by_email(self, email: Optional[str]) -> Optional[str]:
        """Return the latest key issued to ``email``."""
        if not email:
            return None
        await self.load()
        return self._email_index.get(email.lower())

    def count(self) -> int:
        return len(self._keys)

    def is_connected(self) -> bool:
        """Report whether the last read or write of the backing file succeeded."""
        return self._last_error is None
