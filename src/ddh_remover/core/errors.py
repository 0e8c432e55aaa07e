"""Exceptions raised by ddh-remover."""

from typing import Optional


class DDHRemoverError(Exception):
    """Base class for all ddh-remover errors."""


class FileNameError(DDHRemoverError):
    """A selected path has no file name segment to move under the destination."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot get the file name of {path!r}")


class ConfigError(DDHRemoverError):
    """The retention policy cannot be applied (e.g. unusable move destination)."""


class ReportError(DDHRemoverError):
    """The duplicates report could not be decoded."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"record {index}: {message}"
        super().__init__(message)
