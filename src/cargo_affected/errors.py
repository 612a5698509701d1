class AffectedError(Exception):
    """Base class for failures that abort an affected-set computation."""


class ManifestError(AffectedError):
    """The dependency manifest is malformed or inconsistent."""


class DiffError(AffectedError):
    """A diff base could not be resolved or the VCS provider failed."""


class ConfigError(AffectedError, ValueError):
    """A configured pattern is syntactically invalid."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
