"""Exceptions raised by shopcat components."""


class ShopcatError(Exception):
    """Base class for all shopcat errors."""


class InvalidSelection(ShopcatError):
    """The user picked something that is not in the displayed listing."""

    def __init__(self, selection, count: int):
        self.selection = selection
        self.count = count
        super().__init__(
            f"Invalid selection '{selection}': choose a number between 1 and {count}"
            if count
            else f"Invalid selection '{selection}': nothing to choose from"
        )


class UnsupportedFormat(ShopcatError):
    """Export was requested in a format we cannot write."""

    def __init__(self, token: str, supported: list[str]):
        self.token = token
        self.supported = supported
        super().__init__(
            f"Unsupported export format '{token}'. Supported formats: {', '.join(supported)}"
        )


class WriteFailed(ShopcatError):
    """Writing an export file failed; the destination was left untouched."""

    def __init__(self, destination, cause: Exception):
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to write {destination}: {cause}")


class NavigationError(ShopcatError):
    """A category was used in a way the navigation rules forbid."""
