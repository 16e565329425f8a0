"""Exception hierarchy shared across cleansafe packages."""


class CleansafeError(Exception):
    """Base exception for all cleansafe errors."""
