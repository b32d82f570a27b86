import subprocess
from dataclasses import dataclass
from pathlib import Path

from .console import log
from .errors import ReleaseEnvironmentError
from .transaction import PublishTransaction
from .versions import (
    GateDecision,
    check_release,
    fetch_latest_version,
    read_version,
    require_proceed,
    resolve_upstream,
)


@dataclass(frozen=True)
class ReleaseOutcome:
    decision: GateDecision
    version: str
    context: object = None


def check_repository_root(git, cwd):
    try:
        toplevel = git.toplevel()
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ReleaseEnvironmentError(f"{cwd} is not inside a git repository") from exc
    if Path(toplevel).resolve() != Path(cwd).resolve():
        raise ReleaseEnvironmentError(
            f"Run this tool from the repository root ({toplevel}), not {cwd}"
        )


def run_release(config, git, npm, confirm=None, latest_version=None):
    check_repository_root(git, config.root)
    npm.ensure_available()

    upstream = resolve_upstream(config.upstream_root)
    persisted = read_version(config.root_manifest)
    log(f"Upstream {config.upstream_module}: {upstream.version} ({upstream.base_path})")
    log(f"Released version: {persisted}")

    latest = None
    if config.check_latest:
        if latest_version is None:
            latest_version = fetch_latest_version
        latest = latest_version(config.upstream_module, config.registry)

    prompt = confirm if config.confirm_on_newer_upstream else None
    decision = check_release(
        upstream.version, persisted, latest, config.supported_major, confirm=prompt
    )
    if not require_proceed(decision):
        return ReleaseOutcome(decision=decision, version=upstream.version)

    context = PublishTransaction(config, upstream, git, npm).run()
    return ReleaseOutcome(decision=decision, version=upstream.version, context=context)
