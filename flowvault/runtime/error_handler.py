"""
Error classification for node failures.

Turns an exception raised while a node handles a message into structured
context for the diagnostic channel.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from flowvault.constants import ErrorCategory
from flowvault.vault.errors import VaultError

logger = logging.getLogger(__name__)


@dataclass
class ErrorContext:
    """Structured error information for logging."""
    category: ErrorCategory
    message: str
    original_error: str
    error_type: str
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "original_error": self.original_error,
            "error_type": self.error_type,
            "suggestion": self.suggestion,
        }


class ErrorClassifier:
    """Classifies errors raised by nodes."""

    # Fallback patterns for exceptions that are not VaultErrors
    PATTERNS = {
        ErrorCategory.CONFIGURATION_ERROR: [
            "configuration", "not configured", "missing config", "invalid config"
        ],
        ErrorCategory.RESOURCE_NOT_FOUND: [
            "not found", "does not exist", "no such"
        ],
        ErrorCategory.VALIDATION_ERROR: [
            "validation", "invalid", "required field"
        ],
        ErrorCategory.ASSIGNMENT_ERROR: [
            "cannot set", "non-container", "out of range"
        ],
    }

    SUGGESTIONS = {
        ErrorCategory.CONFIGURATION_ERROR: "Review the node configuration and its vault-config reference.",
        ErrorCategory.VALIDATION_ERROR: "Check each rule has a group, a property and an output like 'msg.path'.",
        ErrorCategory.RESOURCE_NOT_FOUND: "Check the group and property names; they are case-sensitive.",
        ErrorCategory.ASSIGNMENT_ERROR: "The output path runs through a value that is not an object.",
        ErrorCategory.DECODE_ERROR: "Re-save the vault-config node to rewrite its store.",
        ErrorCategory.SCRIPT_ERROR: "Check the function node's code.",
        ErrorCategory.UNKNOWN: "An unexpected error occurred. Check the logs for details.",
    }

    @classmethod
    def classify(cls, error: Exception) -> ErrorContext:
        """Classify an error and return structured context."""
        original_error = str(error)

        if isinstance(error, VaultError):
            category = error.category
        else:
            category = ErrorCategory.UNKNOWN
            error_str = original_error.lower()
            for candidate, patterns in cls.PATTERNS.items():
                if any(pattern in error_str for pattern in patterns):
                    category = candidate
                    break

        return ErrorContext(
            category=category,
            message=original_error or error.__class__.__name__,
            original_error=original_error,
            error_type=error.__class__.__name__,
            suggestion=cls.SUGGESTIONS.get(category),
        )
