"""Custom exceptions for dirdigest."""


class DirdigestError(Exception):
    """Base exception for dirdigest operations."""


class DirectoryNotFoundError(DirdigestError):
    """Scan root does not exist or is not a directory."""


class ScanCancelledError(DirdigestError):
    """Scan was cancelled by the caller."""


class EmptyDigestError(DirdigestError):
    """There is nothing to export or copy."""
