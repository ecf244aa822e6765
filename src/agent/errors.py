"""Agent error taxonomy.

Every way a command can be rejected maps to one exception class carrying the HTTP status and the
user-facing message. Only the API/CLI layer turns these into response envelopes.
"""

from __future__ import annotations

from collections.abc import Sequence


class AgentCommandError(ValueError):
    """Base class for rejected or failed agent commands."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingCommandError(AgentCommandError):
    """Raised when the request carries no usable command text."""

    def __init__(self) -> None:
        super().__init__("Command is required. Provide a command for the agent to execute.")


class UnknownActionError(AgentCommandError):
    """Raised when no action keyword matches the command text."""

    def __init__(self) -> None:
        super().__init__("Unknown action. Couldn't understand the requested action.")


class UnknownEntityError(AgentCommandError):
    """Raised when no entity keyword matches the command text."""

    def __init__(self) -> None:
        super().__init__("Unknown entity. Couldn't determine which record type to manage.")


class UnsupportedActionError(AgentCommandError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Unsupported action '{action}'. This action is not implemented yet.")


class MissingRecordIdError(AgentCommandError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Missing record id. Provide the record id to {action}.")


class EmptyUpdateError(AgentCommandError):
    def __init__(self) -> None:
        super().__init__("No fields to update. Include at least one field to update.")


class MissingFieldsError(AgentCommandError):
    """Raised when a create payload lacks required fields."""

    status_code = 422

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class RecordNotFoundError(AgentCommandError):
    status_code = 404

    def __init__(self, label: str, record_id: str) -> None:
        super().__init__(f"Record not found. No {label} exists with id {record_id}.")


class ConfirmationRequiredError(AgentCommandError):
    """Raised when a destructive action is submitted without `confirm=true`."""

    status_code = 409

    def __init__(self) -> None:
        super().__init__(
            "Confirmation required. Deletion must be resubmitted with { confirm: true }."
        )


class AgentExecutionError(AgentCommandError):
    """Raised when the record store fails; the store exception is chained as `__cause__`."""

    status_code = 500

    def __init__(self, action: str, label: str) -> None:
        super().__init__(f"Agent failed to {action} the {label}.")
