"""Decoding of the duplicates report produced by ddh."""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ddh_remover.core.errors import ReportError

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1


@dataclass(frozen=True)
class DuplicateGroup:
    """A set of paths ddh believes hold identical content."""

    length: int
    paths: Tuple[str, ...]
    full_hash: Optional[int] = None
    partial_hash: Optional[int] = None

    @property
    def has_hash(self) -> bool:
        """True when ddh confirmed the group with a full or partial hash."""
        return self.full_hash is not None or self.partial_hash is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: Optional[int] = None) -> "DuplicateGroup":
        """
        Build a group from one decoded JSON record.

        Args:
            data: Record with file_length, file_paths, full_hash, partial_hash
            index: Position of the record in the report, for error messages

        Returns:
            DuplicateGroup

        Raises:
            ReportError: If a field is missing or has the wrong type/range
        """
        if not isinstance(data, dict):
            raise ReportError("expected an object", index)

        length = data.get("file_length")
        if not _is_uint(length, U64_MAX):
            raise ReportError(f"invalid file_length: {length!r}", index)

        paths = data.get("file_paths")
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ReportError("file_paths must be a list of strings", index)

        hashes = {}
        for field in ("full_hash", "partial_hash"):
            value = data.get(field)
            if value is not None and not _is_uint(value, U128_MAX):
                raise ReportError(f"invalid {field}: {value!r}", index)
            hashes[field] = value

        return cls(length=length, paths=tuple(paths), **hashes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the ddh record layout."""
        return {
            "file_length": self.length,
            "file_paths": list(self.paths),
            "full_hash": self.full_hash,
            "partial_hash": self.partial_hash,
        }


def _is_uint(value: Any, maximum: int) -> bool:
    # bool is an int subclass but never a valid size or hash
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= maximum
    )


def parse_report(text: str) -> List[DuplicateGroup]:
    """
    Decode a ddh JSON report.

    A single malformed record rejects the whole report.

    Args:
        text: JSON text (an array of duplicate records)

    Returns:
        List of duplicate groups in report order

    Raises:
        ReportError: If the text is not valid JSON or a record is malformed
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReportError(f"Error decoding the json report ({e})") from e

    if not isinstance(data, list):
        raise ReportError("the report must be a JSON array of duplicate groups")

    groups = [DuplicateGroup.from_dict(record, index) for index, record in enumerate(data)]
    logger.debug(f"Decoded {len(groups)} duplicate groups")
    return groups


def read_report(source: Optional[Path] = None) -> List[DuplicateGroup]:
    """
    Read and decode a report from a file, or from stdin when no file is given.

    Raises:
        ReportError: If the report is malformed or not UTF-8
        OSError: If the file cannot be read
    """
    try:
        if source is None:
            logger.debug("Reading the report from stdin")
            text = sys.stdin.read()
        else:
            logger.debug(f"Reading the report from {source}")
            with open(source, "r", encoding="utf-8") as f:
                text = f.read()
    except UnicodeDecodeError as e:
        raise ReportError(f"the report is not valid UTF-8 ({e})") from e
    return parse_report(text)
