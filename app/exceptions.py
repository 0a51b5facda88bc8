"""Custom exception classes for Skill Scope.

All exceptions serialize to the same error envelope:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "details": {}  # optional
    }
}

Only InvalidRoleError and ValidationError are meant to reach callers.
ExternalServiceError is raised by fetch collaborators and is always
recovered inside the recommendation engine.
"""

from __future__ import annotations

from typing import Any


class SkillScopeError(Exception):
    """Base exception for Skill Scope."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class InvalidRoleError(SkillScopeError):
    """Role is not part of the configured taxonomy."""

    def __init__(self, role: str, known_roles: list[str] | None = None) -> None:
        details: dict[str, Any] = {"role": role}
        if known_roles:
            details["known_roles"] = sorted(known_roles)
        super().__init__(
            code="INVALID_ROLE",
            message=f"Unknown role: {role}",
            status_code=422,
            details=details,
        )
        self.role = role


class ValidationError(SkillScopeError):
    """Input validation error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class ExternalServiceError(SkillScopeError):
    """External collaborator (template source, analysis provider) unavailable."""

    def __init__(self, service: str, message: str = "Service unavailable") -> None:
        super().__init__(
            code=f"{service.upper()}_SERVICE_ERROR",
            message=message,
            status_code=502,
            details={"service": service},
        )


class CatalogError(SkillScopeError):
    """Static template catalog could not be read or parsed."""

    def __init__(self, message: str = "Template catalog unavailable") -> None:
        super().__init__(
            code="CATALOG_ERROR",
            message=message,
            status_code=500,
        )
