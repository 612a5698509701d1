"""Choose the diff base for an event and collect the changed files against it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from cargo_affected.core.ports.vcs import VcsProvider
from cargo_affected.errors import DiffError
from cargo_affected.models import ChangeSet, EventContext, ResolutionStrategy

logger = logging.getLogger(__name__)

DEFAULT_MAIN_BRANCH = "origin/main"
_PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})


def is_null_ref(ref: str | None) -> bool:
    """True for a missing reference or the all-zero SHA sent on first push."""
    if ref is None:
        return True
    ref = ref.strip()
    return not ref or set(ref) == {"0"}


def select_strategy(context: EventContext, override: str | None = None) -> ResolutionStrategy:
    if not is_null_ref(override):
        return ResolutionStrategy.EXPLICIT_OVERRIDE
    if context.event_name in _PULL_REQUEST_EVENTS and not is_null_ref(context.pr_base_ref):
        return ResolutionStrategy.PULL_REQUEST_DEFAULT
    if not is_null_ref(context.before_ref):
        return ResolutionStrategy.PUSH_DEFAULT
    return ResolutionStrategy.FIRST_PUSH_FALLBACK


def _require(ref: str | None, what: str) -> str:
    if ref is None or is_null_ref(ref):
        raise DiffError(f"no {what} to diff against")
    return ref.strip()


def _explicit_override(
    context: EventContext, vcs: VcsProvider, override: str | None, main_branch: str
) -> str:
    return _require(override, "base override")


def _pull_request_default(
    context: EventContext, vcs: VcsProvider, override: str | None, main_branch: str
) -> str:
    return _require(context.pr_base_ref, "pull request base")


def _push_default(context: EventContext, vcs: VcsProvider, override: str | None, main_branch: str) -> str:
    return _require(context.before_ref, "previous HEAD")


def _first_push_fallback(
    context: EventContext, vcs: VcsProvider, override: str | None, main_branch: str
) -> str:
    return vcs.merge_base(context.head_ref, main_branch)


_BASE_RESOLVERS: dict[ResolutionStrategy, Callable[[EventContext, VcsProvider, str | None, str], str]] = {
    ResolutionStrategy.EXPLICIT_OVERRIDE: _explicit_override,
    ResolutionStrategy.PULL_REQUEST_DEFAULT: _pull_request_default,
    ResolutionStrategy.PUSH_DEFAULT: _push_default,
    ResolutionStrategy.FIRST_PUSH_FALLBACK: _first_push_fallback,
}


def resolve_base(
    context: EventContext,
    vcs: VcsProvider,
    override: str | None = None,
    main_branch: str = DEFAULT_MAIN_BRANCH,
) -> tuple[ResolutionStrategy, str]:
    """Return the strategy chosen for *context* and the base reference it yields.

    Raises ``DiffError`` (from the VCS provider) when the merge-base fallback
    cannot be computed.
    """
    strategy = select_strategy(context, override)
    base_ref = _BASE_RESOLVERS[strategy](context, vcs, override, main_branch)
    logger.info("Diff base resolved via %s: %s", strategy.value, base_ref)
    return strategy, base_ref


def resolve_change_set(
    context: EventContext,
    vcs: VcsProvider,
    override: str | None = None,
    main_branch: str = DEFAULT_MAIN_BRANCH,
) -> ChangeSet:
    """Resolve the base for *context* and list the files changed since it.

    A pull request keeps its base tip as the recorded reference but is diffed
    from the fork point, so commits that landed on the base branch after the
    branch was cut are not attributed to the pull request.
    """
    strategy, base_ref = resolve_base(context, vcs, override, main_branch)
    diff_base = base_ref
    if strategy is ResolutionStrategy.PULL_REQUEST_DEFAULT:
        diff_base = vcs.merge_base(base_ref, context.head_ref)
    changed = [path for path in vcs.changed_files(diff_base, context.head_ref) if path.strip()]
    logger.info("%d changed file(s) between %s and %s", len(changed), base_ref, context.head_ref)
    return ChangeSet(base_ref=base_ref, strategy=strategy, changed_files=tuple(changed))


def provided_change_set(paths: Sequence[str]) -> ChangeSet:
    """Wrap a caller-supplied changed-file list; no VCS lookup happens."""
    changed = tuple(p for p in paths if p.strip())
    logger.info("Using %d caller-provided changed file(s)", len(changed))
    return ChangeSet(base_ref=None, strategy=ResolutionStrategy.PROVIDED, changed_files=changed)
