"""Exceptions raised while resolving buildpacks and scanning applications."""


class BuildpackUsageError(RuntimeError):
    """Base class for failures that end an invocation."""


class TransportError(BuildpackUsageError):
    """Represents failures when communicating with the platform API."""


class BuildpackNotFoundError(BuildpackUsageError):
    """No buildpack in the collection carries the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Could not find buildpack {name}")
        self.name = name


class InvalidSelectionError(BuildpackUsageError):
    """The interactive prompt could not produce a buildpack."""


class TooManyAttemptsError(InvalidSelectionError):
    def __init__(self, attempts: int) -> None:
        super().__init__(f"No valid buildpack selected after {attempts} attempts")
        self.attempts = attempts
