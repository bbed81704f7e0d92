"""
dwlr_ingest/validators/role_validator.py

Validation for resolved field-role maps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence

if TYPE_CHECKING:
    from dwlr_ingest.mappers.schema_detector import FieldRoleMap


@dataclass(frozen=True)
class RoleErrorDetail:
    """
    Structured role resolution error detail.
    """

    code: str
    message: str
    role: str | None = None
    context: dict[str, Any] | None = None


class SchemaDetectionError(ValueError):
    """
    Raised when required roles cannot be resolved from a header row.
    """

    def __init__(self, *, message: str, errors: Sequence[RoleErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "role": error.role,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class RoleMapValidator:
    """
    Checks that every required role resolved to a source field.
    """

    def __init__(
        self,
        *,
        required_roles: Sequence[str],
        missing_messages: Mapping[str, str] | None = None,
    ) -> None:
        self._required_roles = tuple(required_roles)
        self._missing_messages = dict(missing_messages or {})

    def validate(
        self,
        *,
        role_map: FieldRoleMap,
        source_headers: Sequence[str],
    ) -> None:
        """
        Raise SchemaDetectionError listing every unresolved required role.
        """

        errors: list[RoleErrorDetail] = []
        for role in self._required_roles:
            if role_map.get(role) is not None:
                continue
            errors.append(
                RoleErrorDetail(
                    code="required_role_unresolved",
                    message=self._missing_messages.get(
                        role,
                        f"Required role '{role}' has no matching column.",
                    ),
                    role=role,
                    context={"source_headers": list(source_headers)},
                )
            )

        if errors:
            # The first unresolved role in required order is the headline.
            raise SchemaDetectionError(message=errors[0].message, errors=errors)
