"""Runs the retention policy over every group of a report."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from ddh_remover.core.disposer import Disposer, PathResult
from ddh_remover.core.errors import ConfigError
from ddh_remover.core.report import DuplicateGroup
from ddh_remover.core.resolver import RetentionPolicy, WorkItem, is_eligible

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


@dataclass
class GroupReport:
    """What was done with one group of the report."""

    index: int
    group: DuplicateGroup
    eligible: bool
    to_remove: Tuple[str, ...] = ()
    results: List[PathResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "eligible": self.eligible,
            "file_paths": list(self.group.paths),
            "to_remove": list(self.to_remove),
            "results": [result.to_dict() for result in self.results],
        }


def process_group(index: int, group: DuplicateGroup, disposer: Disposer) -> GroupReport:
    """
    Resolve and dispose of a single group.

    Ineligible groups are returned untouched with no results.
    """
    if not is_eligible(group):
        logger.debug(f"Group {index} has no duplicates to act on: {list(group.paths)}")
        return GroupReport(index=index, group=group, eligible=False)

    item = WorkItem.from_group(group, disposer.policy)
    logger.debug(f"Group {index}: removing {len(item.to_remove)} of {len(group.paths)} paths")
    results = disposer.dispose(item.to_remove)
    return GroupReport(
        index=index,
        group=group,
        eligible=True,
        to_remove=item.to_remove,
        results=results,
    )


def process_groups(
    groups: Sequence[DuplicateGroup],
    policy: RetentionPolicy,
    max_workers: Optional[int] = None,
    show_progress: bool = False,
) -> List[GroupReport]:
    """
    Apply the policy to every group, one worker task per group.

    Args:
        groups: Decoded report
        policy: Retention policy shared (read-only) by every task
        max_workers: Worker pool size (default: DEFAULT_WORKERS)
        show_progress: Show a progress bar over completed groups

    Returns:
        One report per group, in input order

    Raises:
        ConfigError: If the policy or worker count is invalid; raised before
            any group starts
    """
    policy.validate()
    workers = DEFAULT_WORKERS if max_workers is None else max_workers
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ConfigError(f"worker count must be a positive integer (got {workers!r})")
    disposer = Disposer(policy)

    logger.info(
        f"Processing {len(groups)} duplicate groups with {workers} workers"
        f"{' (dry run)' if policy.dry_run else ''}"
    )

    reports: List[Optional[GroupReport]] = [None] * len(groups)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(process_group, index, group, disposer): index
            for index, group in enumerate(groups)
        }

        completed = as_completed(futures)
        if show_progress:
            completed = tqdm(completed, total=len(futures), desc="Disposing", unit="group")

        for future in completed:
            reports[futures[future]] = future.result()

    failed = sum(1 for report in reports if report is not None and not report.ok)
    if failed:
        logger.warning(f"{failed} groups had paths that could not be disposed of")

    return [report for report in reports if report is not None]
