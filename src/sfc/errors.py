# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Error types raised by the file collection engine."""

from typing import Literal

CollectionOperation = Literal["read", "parse", "license", "snippet"]


class PathError(ValueError):
    """Represent a file path that does not lie under its declared root."""


class ReadError(RuntimeError):
    """Represent a file whose bytes could not be fully read."""


class ConfigurationError(ValueError):
    """Represent invalid collector input such as duplicate targets."""


class CollectionError(RuntimeError):
    """Represent a failed collection run for one file.

    Attributes:
        file_name: Stable name of the file being collected.
        operation: Sub-operation that failed.
    """

    def __init__(self, file_name: str, operation: CollectionOperation, message: str) -> None:
        super().__init__(f"{file_name}: {operation} failed: {message}")
        self.file_name = file_name
        self.operation: CollectionOperation = operation
