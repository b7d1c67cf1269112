from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from coachbot.db.models import UserRecord

logger = logging.getLogger(__name__)


class UserStore:
    """
    In-memory user collection shadowing a single JSON file.

    Callers get records through find/upsert/users and must call save()
    after mutating them. The list itself never leaves this class.
    """

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)
        self._users: List[UserRecord] = []
        self._index: dict[str, UserRecord] = {}
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def __len__(self) -> int:
        return len(self._users)

    # -------------------- load / save --------------------

    async def load(self) -> List[UserRecord]:
        raw = await asyncio.to_thread(self._read_file)
        users: List[UserRecord] = []
        seen: set[str] = set()
        for item in raw:
            try:
                u = UserRecord.from_dict(item)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed user record %r: %s", item, e)
                continue
            if u.identity in seen:
                logger.warning("Duplicate identity %s in %s, keeping the first", u.identity, self._path)
                continue
            seen.add(u.identity)
            users.append(u)

        self._users = users
        self._index = {u.identity: u for u in users}
        logger.info("Loaded %d users from %s", len(users), self._path)
        return list(users)

    def _read_file(self) -> List[Any]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, starting with no users: %s", self._path, e)
            return []
        if not isinstance(data, list):
            logger.warning("%s does not hold a list, starting with no users", self._path)
            return []
        return data

    async def save(self) -> None:
        # snapshot before the first await so the file matches this moment
        payload = json.dumps([u.to_dict() for u in self._users], ensure_ascii=False, indent=2)
        async with self._write_lock:
            try:
                await asyncio.to_thread(self._write_file, payload)
            except OSError:
                logger.exception("Failed to save users to %s", self._path)

    def _write_file(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self._path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    # -------------------- lookups --------------------

    def find(self, identity: str) -> Optional[UserRecord]:
        return self._index.get(identity)

    def upsert(self, identity: str, now: datetime) -> UserRecord:
        u = self._index.get(identity)
        if u is None:
            u = UserRecord(identity=identity, registered_at=now, usage_count=0)
            self._users.append(u)
            self._index[identity] = u
        return u

    def users(self) -> List[UserRecord]:
        return list(self._users)
