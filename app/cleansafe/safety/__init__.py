"""Deletion safety layer.

This module exports the value objects, the system path policy and the
validator. The orchestrator lives in cleansafe.safety.manager.
"""

from cleansafe.safety.models import (
    CandidatePath,
    ConfirmationCallback,
    ConfirmationPrompt,
    ConfirmationResult,
    ConfirmationSession,
    DeletionMethod,
    DeletionOptions,
    DeletionResult,
    PathKind,
    ProgressCallback,
    ValidationResult,
)
from cleansafe.safety.protected import SystemPathPolicy
from cleansafe.safety.validator import PathValidator

__all__ = [
    "CandidatePath",
    "ConfirmationCallback",
    "ConfirmationPrompt",
    "ConfirmationResult",
    "ConfirmationSession",
    "DeletionMethod",
    "DeletionOptions",
    "DeletionResult",
    "PathKind",
    "PathValidator",
    "ProgressCallback",
    "SystemPathPolicy",
    "ValidationResult",
]
