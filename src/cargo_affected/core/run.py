from cargo_affected.config import AffectedConfig
from cargo_affected.core.affected import compute_affected
from cargo_affected.core.graph import build_workspace
from cargo_affected.core.output import apply_exclusions
from cargo_affected.core.patterns import compile_patterns
from cargo_affected.core.ports.manifest import ManifestProvider
from cargo_affected.core.ports.vcs import VcsProvider
from cargo_affected.core.resolve import provided_change_set, resolve_change_set
from cargo_affected.models import AffectedResult, ChangeSet, EventContext, PatternPurpose


def collect_change_set(config: AffectedConfig, context: EventContext, vcs: VcsProvider) -> ChangeSet:
    if config.changed_files is not None:
        return provided_change_set(config.changed_files)
    return resolve_change_set(context, vcs, override=config.base_sha, main_branch=config.main_branch)


def run_affected(
    config: AffectedConfig,
    manifest: ManifestProvider,
    vcs: VcsProvider,
    context: EventContext,
) -> AffectedResult:
    """Run the whole pipeline: graph, change set, closure, binaries, exclusions.

    Any ``ManifestError`` or ``DiffError`` propagates; nothing is partially returned.
    """
    graph, index = build_workspace(manifest.load())
    change_set = collect_change_set(config, context, vcs)

    triggers = compile_patterns(config.force_triggers, PatternPurpose.FORCE_TRIGGER)
    exclusions = compile_patterns(config.excluded_members, PatternPurpose.EXCLUDE)

    result = compute_affected(graph, index, change_set.changed_files, triggers)
    return apply_exclusions(result, graph, exclusions)
