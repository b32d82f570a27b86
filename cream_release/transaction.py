from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from .console import log, warn
from .errors import ReleaseError
from .manifests import load_manifest, save_manifest
from .materialize import materialize_targets, prepare_targets
from .umbrella import update_umbrella
from .versions import SEMVER_RE, is_newer


class TxState(Enum):
    IDLE = "idle"
    MATERIALIZING = "materializing"
    PUBLISHING = "publishing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ReleaseContext:
    upstream: object
    dry_run: bool = True
    state: TxState = TxState.IDLE
    binary_paths: tuple = ()
    restore_paths: tuple = ()
    umbrella_manifest: Path = None
    results: tuple = ()
    umbrella: object = None

    def advance(self, state):
        return replace(self, state=state)

    def planned(self, plans, umbrella_manifest):
        return replace(
            self,
            binary_paths=tuple(plan.binary_path for plan in plans),
            restore_paths=tuple(plan.package_dir for plan in plans),
            umbrella_manifest=umbrella_manifest,
        )

    def materialized(self, aggregate):
        return replace(self, results=aggregate.results)

    def umbrella_updated(self, update):
        return replace(self, umbrella=update)

    @property
    def keeps_umbrella(self):
        return self.state is TxState.SUCCEEDED and not self.dry_run


def remove_file(path):
    path.unlink(missing_ok=True)
    return path


def remove_binaries(paths):
    if not paths:
        return
    with ThreadPoolExecutor() as pool:
        for path in pool.map(remove_file, paths):
            log(f"CLEANUP: removed {path}")


def cleanup(context, git):
    paths = list(context.restore_paths)
    if context.umbrella_manifest is not None and not context.keeps_umbrella:
        paths.append(context.umbrella_manifest)
    try:
        remove_binaries(context.binary_paths)
    finally:
        if paths:
            log(f"CLEANUP: restoring {len(paths)} paths")
            git.checkout(paths)


def record_release(config, version, git):
    data = load_manifest(config.root_manifest)
    previous = data.get("version")
    if isinstance(previous, str) and SEMVER_RE.match(previous):
        if not is_newer(version, previous):
            raise ReleaseError(
                f"Refusing to move released version back from {previous} to {version}"
            )
    data["version"] = version
    save_manifest(config.root_manifest, data)
    git.commit_all(f"Update to {version}")
    git.tag(f"v{version}")
    log(f"Tagged v{version}")


class PublishTransaction:
    """Materialize every target, publish once, and always put the tree back.

    The released version in the root manifest only moves after a real publish
    went through; a dry run or any failure leaves it and the tags alone.
    """

    def __init__(self, config, upstream, git, npm):
        self.config = config
        self.git = git
        self.npm = npm
        self.context = ReleaseContext(upstream=upstream, dry_run=config.dry_run_publish)

    def run(self):
        try:
            self._materialize()
            self._publish()
        except BaseException:
            self.context = self.context.advance(TxState.FAILED)
            try:
                cleanup(self.context, self.git)
            except Exception as exc:
                warn(f"cleanup failed: {exc}")
            raise
        cleanup(self.context, self.git)

        if self.context.keeps_umbrella:
            record_release(self.config, self.context.upstream.version, self.git)
        return self.context

    def _materialize(self):
        config = self.config
        upstream = self.context.upstream
        self.context = self.context.advance(TxState.MATERIALIZING)
        plans = prepare_targets(config.targets, upstream, config)
        self.context = self.context.planned(plans, config.umbrella_dir / "package.json")
        aggregate = materialize_targets(plans, upstream)
        self.context = self.context.materialized(aggregate)
        update = update_umbrella(config, upstream, aggregate)
        self.context = self.context.umbrella_updated(update)

    def _publish(self):
        self.context = self.context.advance(TxState.PUBLISHING)
        mode = "dry run" if self.context.dry_run else "public"
        log(f"PUBLISH: {len(self.context.results) + 1} packages ({mode})")
        self.npm.publish(dry_run=self.context.dry_run)
        self.context = self.context.advance(TxState.SUCCEEDED)
