"""GitHub Actions wiring: event context in, step outputs out."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from cargo_affected.models import EventContext

logger = logging.getLogger(__name__)


def _load_event_payload(event_path: str | None) -> dict[str, Any]:
    if not event_path:
        return {}
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Cannot read event payload %s: %s", event_path, exc)
        return {}
    return payload if isinstance(payload, dict) else {}


def event_context_from_env(environ: Mapping[str, str] | None = None) -> EventContext:
    env = os.environ if environ is None else environ
    event_name = env.get("GITHUB_EVENT_NAME", "push")
    payload = _load_event_payload(env.get("GITHUB_EVENT_PATH"))

    pull_request = payload.get("pull_request") or {}
    pr_base = (pull_request.get("base") or {}).get("sha")
    pr_head = (pull_request.get("head") or {}).get("sha")
    head = pr_head or payload.get("after") or env.get("GITHUB_SHA") or "HEAD"

    return EventContext(
        event_name=event_name,
        pr_base_ref=pr_base,
        before_ref=payload.get("before"),
        head_ref=head,
    )


def write_outputs(outputs: Mapping[str, str], output_path: str | Path) -> None:
    """Append ``key=value`` lines to the step output file in one write."""
    text = "".join(f"{key}={value}\n" for key, value in outputs.items())
    with open(output_path, "a", encoding="utf-8") as handle:
        handle.write(text)
