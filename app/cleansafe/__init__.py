"""cleansafe - safety layer for destructive cleanup operations.

Validates candidate paths, moves them to the OS trash or a private
quarantine, and keeps enough metadata to undo the operation later.
"""

__version__ = "0.1.0"
