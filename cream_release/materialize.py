import shutil
from dataclasses import dataclass
from pathlib import Path

from .console import log
from .errors import ArtifactMissingError, ManifestError, UnsupportedTargetError
from .manifests import load_manifest, save_manifest


@dataclass(frozen=True)
class TargetPlan:
    target: object
    name: str
    package_dir: Path
    manifest_path: Path
    manifest: dict
    source: Path
    binary_path: Path


@dataclass(frozen=True)
class MaterializationResult:
    dist_id: str
    version: str
    binary_path: Path


@dataclass(frozen=True)
class AggregateResult:
    results: tuple
    binary_paths: tuple

    def dependencies(self):
        return {result.dist_id: result.version for result in self.results}


def upstream_binary(upstream, target, module):
    return upstream.base_path / "build" / module / target.build_id / f"{module}.node"


def prepare_target(target, upstream, config):
    package_dir = config.target_dir(target)
    if not package_dir.is_dir():
        raise UnsupportedTargetError(
            f"No package directory {package_dir} for target {target.build_id}"
        )
    manifest_path = package_dir / "package.json"
    manifest = load_manifest(manifest_path)
    main_entry = manifest.get("main")
    if not isinstance(main_entry, str) or not main_entry.strip():
        raise ManifestError(f"{manifest_path} must declare a main entry")

    source = upstream_binary(upstream, target, config.upstream_module)
    if not source.is_file():
        raise ArtifactMissingError(
            f"Missing {source} for target {target.build_id} in {upstream.version}"
        )
    return TargetPlan(
        target=target,
        name=config.target_name(target),
        package_dir=package_dir,
        manifest_path=manifest_path,
        manifest=manifest,
        source=source,
        binary_path=package_dir / main_entry.strip(),
    )


def prepare_targets(targets, upstream, config):
    return tuple(prepare_target(target, upstream, config) for target in targets)


def materialize_target(plan, upstream):
    target = plan.target
    binary_path = plan.binary_path
    binary_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(plan.source, binary_path)
    log(f"TARGET {target.build_id}: copy {plan.source.name} -> {binary_path}")

    manifest = dict(plan.manifest)
    manifest["name"] = plan.name
    manifest["version"] = upstream.version
    manifest["os"] = [target.platform]
    manifest["cpu"] = [target.arch]
    if target.libc:
        manifest["libc"] = [target.libc]
    else:
        manifest.pop("libc", None)
    save_manifest(plan.manifest_path, manifest)
    log(f"TARGET {target.build_id}: {plan.name}@{upstream.version}")

    return MaterializationResult(
        dist_id=plan.name, version=upstream.version, binary_path=binary_path
    )


def materialize_targets(plans, upstream):
    results = []
    for plan in plans:
        results.append(materialize_target(plan, upstream))
    return AggregateResult(
        results=tuple(results),
        binary_paths=tuple(result.binary_path for result in results),
    )
