from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Callable, Iterable, List

logger = logging.getLogger(__name__)


class SessionBackup:
    """
    Timestamped copies of the session/auth file and the users file.

    Each source becomes <stem>_backup_<epoch_ms><suffix> in backup_dir.
    Only the newest `keep` snapshots per source are retained.
    """

    def __init__(
        self,
        sources: Iterable[str | Path],
        backup_dir: str | Path,
        *,
        keep: int = 24,
        clock: Callable[[], float] = time.time,
    ):
        self.sources = [Path(s) for s in sources]
        self.backup_dir = Path(backup_dir)
        self.keep = keep
        self.clock = clock

    def run(self) -> List[Path]:
        written: List[Path] = []
        stamp = int(self.clock() * 1000)
        for src in self.sources:
            if not src.is_file():
                logger.debug("Backup source %s not found, skipping", src)
                continue
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            dest = self.backup_dir / f"{src.stem}_backup_{stamp}{src.suffix}"
            shutil.copy2(src, dest)
            written.append(dest)
            self._prune(src)
        if written:
            logger.info("Backed up %d file(s) to %s", len(written), self.backup_dir)
        return written

    def _prune(self, src: Path) -> None:
        if self.keep <= 0:
            return
        snapshots = sorted(
            self.backup_dir.glob(f"{src.stem}_backup_*{src.suffix}"),
            key=lambda p: _stamp_of(p, src),
        )
        for old in snapshots[: -self.keep]:
            old.unlink(missing_ok=True)


def _stamp_of(path: Path, src: Path) -> int:
    raw = path.name[len(f"{src.stem}_backup_"):]
    if src.suffix:
        raw = raw[: -len(src.suffix)]
    return int(raw) if raw.isdigit() else -1
