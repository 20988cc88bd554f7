"""Exception hierarchy for the Lark CLI."""


class LarkClientError(Exception):
    """Base exception for Lark CLI errors."""


class LarkConfigError(LarkClientError):
    """Configuration file or environment error."""


class LarkAuthError(LarkClientError):
    """Auth requirement resolution error."""


class UnknownServiceError(LarkAuthError):
    """A service name is not present in the service registry.

    When raised while resolving a command, ``command`` is set: the command
    itself matched a mapping, but the mapping references a service that the
    registry does not know about.
    """

    def __init__(self, service: str, command: str | None = None, hint: str | None = None):
        message = f"unknown service {service!r}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
        self.service = service
        self.command = command


class ScopeRequestError(LarkAuthError, ValueError):
    """Invalid user OAuth scope request (flags, service selection)."""
