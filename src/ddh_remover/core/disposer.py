"""Deletion or relocation of the duplicates selected for removal."""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from send2trash import send2trash

from ddh_remover.core.errors import FileNameError
from ddh_remover.core.resolver import RetentionPolicy

logger = logging.getLogger(__name__)

DRY_RUN_REASON = "dry run"


class Outcome(str, Enum):
    """What happened to a path selected for removal."""

    deleted = "deleted"
    trashed = "trashed"
    moved = "moved"
    skipped = "skipped"
    failed = "failed"


@dataclass(frozen=True)
class PathResult:
    """Outcome of disposing of a single path."""

    path: str
    outcome: Outcome
    destination: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "outcome": self.outcome.value,
            "destination": self.destination,
            "reason": self.reason,
        }


def destination_for(path: str, destination: Path) -> Path:
    """
    Build the path a duplicate is moved to.

    Args:
        path: Source path
        destination: Target directory

    Returns:
        ``destination / <file name of path>``

    Raises:
        FileNameError: If the path has no final segment (empty, root, ``..``)
    """
    file_name = Path(path).name
    if not file_name or file_name == "..":
        raise FileNameError(path)
    return Path(destination) / file_name


class Disposer:
    """Applies a policy's disposition to removal sets, one path at a time."""

    def __init__(self, policy: RetentionPolicy):
        """
        Initialize the disposer.

        Args:
            policy: Retention policy (decides move vs delete and dry run)
        """
        self.policy = policy

    def dispose(self, paths: Iterable[str]) -> List[PathResult]:
        """
        Delete or move every path, in order.

        A failing path is reported and the remaining paths are still
        processed.

        Args:
            paths: Removal set for one group

        Returns:
            One result per path, in the same order
        """
        results = []
        for path in paths:
            if self.policy.dry_run:
                result = self._simulate(path)
            elif self.policy.moves:
                result = self._move(path)
            else:
                result = self._delete(path)
            results.append(result)
        return results

    def _simulate(self, path: str) -> PathResult:
        destination = None
        if self.policy.moves and Path(path).name not in ("", ".."):
            destination = str(destination_for(path, self.policy.destination))
        logger.debug(f"Dry run, leaving {path} in place")
        return PathResult(path, Outcome.skipped, destination=destination, reason=DRY_RUN_REASON)

    def _move(self, path: str) -> PathResult:
        try:
            target = destination_for(path, self.policy.destination)
        except FileNameError as e:
            logger.warning(str(e))
            return PathResult(path, Outcome.failed, reason=str(e))

        try:
            if os.path.isdir(path):
                raise IsADirectoryError(f"Not a file: {path}")
            if target.exists():
                raise FileExistsError(f"Destination already exists: {target}")
            # Renames on the same device, copies then removes across devices
            shutil.move(path, str(target))
        except OSError as e:
            logger.warning(f"Failed to move {path} to {target}: {e}")
            return PathResult(path, Outcome.failed, destination=str(target), reason=str(e))

        logger.info(f"Moved {path} -> {target}")
        return PathResult(path, Outcome.moved, destination=str(target))

    def _delete(self, path: str) -> PathResult:
        try:
            if self.policy.use_trash:
                if not os.path.lexists(path):
                    raise FileNotFoundError(f"No such file: {path}")
                send2trash(path)
                outcome = Outcome.trashed
            else:
                os.remove(path)
                outcome = Outcome.deleted
        except OSError as e:
            logger.warning(f"Failed to remove {path}: {e}")
            return PathResult(path, Outcome.failed, reason=str(e))

        logger.info(f"Removed {path} ({outcome.value})")
        return PathResult(path, outcome)
