"""Exceptions raised by the Lookbook browse engine and its data access layer."""


class LookbookError(Exception):
    """Base exception for all Lookbook errors."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FetchError(LookbookError):
    """Raised when the data source cannot serve a read."""


class EntityNotFoundError(LookbookError):
    """Raised when a slug does not resolve to a profile or project."""

    def __init__(self, entity_type: str, identifier: str) -> None:
        super().__init__(
            f"{entity_type} not found: {identifier}",
            details={"entity_type": entity_type, "identifier": identifier},
        )


class ValidationError(LookbookError):
    """Raised when filter, route or configuration input is invalid."""


class InvalidTransitionError(LookbookError):
    """Raised when a browse state transition is requested from the wrong state."""

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(
            f"Invalid transition: {from_state} -> {to_state}",
            details={"from_state": from_state, "to_state": to_state},
        )
