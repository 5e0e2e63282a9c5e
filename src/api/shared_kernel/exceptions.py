"""Exceptions shared across bounded contexts."""


class BackingStoreUnavailableError(Exception):
    """Raised when a lookup against the hosted backing store fails.

    Resolution-layer callers (session, organization context) degrade to
    absence; decision-layer callers (capability, resource access) deny.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Backing store unavailable during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
