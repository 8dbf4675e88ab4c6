from __future__ import annotations


class TrackerError(Exception):
    """Base class for failures surfaced to the caller."""


class StorageUnavailableError(TrackerError):
    pass


class StaleWriteError(TrackerError):
    """A collection changed between the read and the write of an update."""

    def __init__(self, key: str, expected_version: int | None, actual_version: int | None):
        super().__init__(
            f"Collection '{key}' was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        self.key = key
        self.expected_version = expected_version
        self.actual_version = actual_version


class MalformedImportError(TrackerError):
    pass
