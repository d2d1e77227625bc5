"""
Structured error handling for Rextool.

Every failure the evaluation core knows about is described by an error code,
a user-facing message, a severity and optional recovery actions, so the
terminal front end can render it without inspecting exception types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from rextool.constants import utcnow


class ErrorCode(IntEnum):
    """Internal error codes for categorization."""

    # Pattern Errors (1000-1999)
    PATTERN_COMPILE_FAILED = 1001
    PATTERN_SYNTAX_INVALID = 1002
    PATTERN_FORM_UNSUPPORTED = 1003

    # Backend Errors (2000-2999)
    BACKEND_UNAVAILABLE = 2001
    BACKEND_TIMEOUT = 2002
    BACKEND_EXIT_FAILED = 2003
    BACKEND_OUTPUT_MALFORMED = 2004
    BACKEND_UNKNOWN = 2005
    BACKEND_INPUT_UNENCODABLE = 2006

    # Configuration Errors (3000-3999)
    INVALID_CONFIG = 3001


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class RecoveryAction:
    """Suggested action to recover from an error."""

    description: str
    command: str | None = None
    automated: bool = False


@dataclass
class ErrorContext:
    """Context information for an error."""

    operation: str | None = None
    backend: str | None = None
    frontend: str | None = None
    component: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
    stack: str | None = None
    additional_info: dict[str, Any] = field(default_factory=dict)


class RextoolError(Exception):
    """Base error class for Rextool."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        user_message: str,
        severity: str = ErrorSeverity.MEDIUM,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.severity = severity
        self.user_message = user_message
        self.context = context or ErrorContext()
        self.recovery_actions = recovery_actions or []
        self.original_error = original_error

        self.context.timestamp = utcnow()
        if original_error:
            self.context.stack = str(original_error.__traceback__)

    def get_formatted_message(self) -> str:
        """Get a formatted error message for display to users."""
        parts = [
            f"[Error] {self.user_message}",
            f"   Code: {self.code.value}",
        ]

        if self.context.operation:
            parts.append(f"   Operation: {self.context.operation}")
        if self.context.backend:
            parts.append(f"   Backend: {self.context.backend}")
        if self.context.component:
            parts.append(f"   Component: {self.context.component}")
        detail = str(self)
        if detail and detail != self.user_message:
            parts.append(f"   Detail: {detail}")

        if self.recovery_actions:
            parts.append("")
            parts.append("Suggested actions:")
            for i, action in enumerate(self.recovery_actions, 1):
                parts.append(f"   {i}. {action.description}")
                if action.command:
                    parts.append(f"      Run: {action.command}")

        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.__class__.__name__,
            "code": self.code.value,
            "message": str(self),
            "user_message": self.user_message,
            "severity": self.severity,
            "context": {
                "operation": self.context.operation,
                "backend": self.context.backend,
                "frontend": self.context.frontend,
                "component": self.context.component,
                "timestamp": self.context.timestamp.isoformat(),
                "additional_info": self.context.additional_info,
            },
            "recovery_actions": [
                {"description": a.description, "command": a.command, "automated": a.automated}
                for a in self.recovery_actions
            ],
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ConfigurationError(RextoolError):
    """Error related to configuration issues."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CONFIG,
            message=message,
            user_message=user_message or "Configuration error occurred.",
            severity=ErrorSeverity.HIGH,
            context=context,
            recovery_actions=recovery_actions,
            original_error=original_error,
        )


class PatternCompileError(RextoolError):
    """A symbolic pattern could not be read or lowered to a regex.

    Raised by the symbolic reader and lowering; the pattern compiler turns
    it into an absent pattern unless asked to compile strictly.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PATTERN_COMPILE_FAILED,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            user_message=user_message or "Pattern could not be compiled.",
            severity=ErrorSeverity.LOW,
            context=context,
            original_error=original_error,
        )


class BackendProcessError(RextoolError):
    """The external matching process failed for this evaluation."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.BACKEND_UNKNOWN,
        user_message: str | None = None,
        context: ErrorContext | None = None,
        recovery_actions: list[RecoveryAction] | None = None,
        original_error: Exception | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            user_message=user_message or "External matching backend failed.",
            severity=ErrorSeverity.HIGH,
            context=context,
            recovery_actions=recovery_actions,
            original_error=original_error,
        )
        self.stderr = stderr
