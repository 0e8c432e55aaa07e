"""Retention policy: decide which duplicates of a group get disposed of."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ddh_remover.core.errors import ConfigError
from ddh_remover.core.report import DuplicateGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetentionPolicy:
    """
    How many duplicates to keep and what to do with the rest.

    Attributes:
        keep_count: Paths to retain when no preferred substring applies.
            With a preferred substring it caps how many non-matching paths
            are disposed of.
        preferred_substring: Paths containing it are always kept
        destination: Move the duplicates here instead of deleting them
        dry_run: Report what would happen without touching the filesystem
        use_trash: Send deleted files to the recycle bin (delete mode only)
    """

    keep_count: int = 1
    preferred_substring: Optional[str] = None
    destination: Optional[Path] = None
    dry_run: bool = False
    use_trash: bool = False

    @property
    def moves(self) -> bool:
        return self.destination is not None

    def validate(self) -> None:
        """
        Check the policy before any group is disposed of.

        Raises:
            ConfigError: If the keep count is not a non-negative int or the move
                destination is not an existing directory
        """
        if not isinstance(self.keep_count, int) or isinstance(self.keep_count, bool):
            raise ConfigError(f"keep count must be an integer (got {self.keep_count!r})")
        if self.keep_count < 0:
            raise ConfigError(f"keep count must not be negative (got {self.keep_count})")

        if self.destination is None:
            return
        if not str(self.destination):
            raise ConfigError("move destination is empty")
        if not Path(self.destination).is_dir():
            raise ConfigError(f"move destination is not a directory: {self.destination}")


def resolve(paths: Sequence[str], policy: RetentionPolicy) -> List[str]:
    """
    Compute the ordered removal set for one group.

    With a preferred substring, the paths that do not contain it are
    selected in their original order, capped to the first ``keep_count``.
    Otherwise the paths are sorted and everything past the first
    ``keep_count`` is selected.

    Args:
        paths: The group's paths (left untouched)
        policy: Retention policy

    Returns:
        Paths to dispose of, possibly empty
    """
    if policy.preferred_substring is not None:
        logger.debug(f"Keeping paths containing {policy.preferred_substring!r}")
        to_remove = [p for p in paths if policy.preferred_substring not in p]
        # When nothing matches this still keeps every non-matching path past
        # keep_count; the cap is shared with the skip branch.
        if len(to_remove) > policy.keep_count:
            to_remove = to_remove[: policy.keep_count]
    else:
        logger.debug(f"Keeping the first {policy.keep_count} sorted paths")
        to_remove = sorted(paths)[policy.keep_count:]

    logger.debug(f"Paths to remove: {to_remove}")
    return to_remove


def is_eligible(group: DuplicateGroup) -> bool:
    """A group is acted on only with two or more paths and a hash from ddh."""
    return len(group.paths) >= 2 and group.has_hash


@dataclass(frozen=True)
class WorkItem:
    """A group together with the paths selected for disposal."""

    group: DuplicateGroup
    policy: RetentionPolicy
    to_remove: Tuple[str, ...]

    @classmethod
    def from_group(cls, group: DuplicateGroup, policy: RetentionPolicy) -> "WorkItem":
        return cls(group=group, policy=policy, to_remove=tuple(resolve(group.paths, policy)))
