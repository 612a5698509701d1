from enum import Enum

from pydantic import BaseModel, ConfigDict


class Package(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    root: str
    dependencies: tuple[str, ...] = ()
    has_binary_target: bool = False


class ResolutionStrategy(str, Enum):
    EXPLICIT_OVERRIDE = "explicit_override"
    PULL_REQUEST_DEFAULT = "pull_request_default"
    PUSH_DEFAULT = "push_default"
    FIRST_PUSH_FALLBACK = "first_push_fallback"
    PROVIDED = "provided"


class EventContext(BaseModel):
    """What the CI platform tells us about the triggering event."""

    model_config = ConfigDict(frozen=True)

    event_name: str = "push"
    pr_base_ref: str | None = None
    before_ref: str | None = None
    head_ref: str = "HEAD"


class ChangeSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_ref: str | None
    strategy: ResolutionStrategy
    changed_files: tuple[str, ...] = ()


class PatternPurpose(str, Enum):
    FORCE_TRIGGER = "force_trigger"
    EXCLUDE = "exclude"


class AffectedResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    changed: tuple[str, ...] = ()
    affected: tuple[str, ...] = ()
    affected_binaries: tuple[str, ...] = ()
    force_all: bool = False
