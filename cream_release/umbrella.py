import re
from dataclasses import dataclass
from pathlib import Path

from .console import log
from .errors import ManifestError, TypingsRewriteError
from .manifests import load_manifest, save_manifest

UPSTREAM_TYPINGS = "index.d.ts"


@dataclass(frozen=True)
class UmbrellaUpdate:
    manifest_path: Path
    manifest: dict
    typings_path: Path


def rewrite_typings(text, upstream_module, umbrella_module):
    pattern = re.compile(r"""(['"])""" + re.escape(upstream_module) + r"\1")
    rewritten, count = pattern.subn(
        lambda match: f"{match.group(1)}{umbrella_module}{match.group(1)}",
        text,
        count=1,
    )
    if not count:
        raise TypingsRewriteError(
            f"Module identifier '{upstream_module}' not found in type declarations"
        )
    return rewritten


def update_umbrella(config, upstream, aggregate):
    manifest_path = config.umbrella_dir / "package.json"
    manifest = load_manifest(manifest_path)
    name = manifest.get("name")
    types_entry = manifest.get("types") or manifest.get("typings")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"{manifest_path} must declare a name")
    if not isinstance(types_entry, str) or not types_entry:
        raise ManifestError(f"{manifest_path} must declare a types entry")

    source = upstream.base_path / UPSTREAM_TYPINGS
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TypingsRewriteError(f"Missing upstream type declarations {source}") from None
    typings = rewrite_typings(text, config.upstream_module, name)

    manifest = dict(manifest)
    manifest["version"] = upstream.version
    manifest["optionalDependencies"] = aggregate.dependencies()

    typings_path = config.umbrella_dir / types_entry
    typings_path.write_text(typings, encoding="utf-8")
    save_manifest(manifest_path, manifest)
    log(f"UMBRELLA: {name}@{upstream.version} with {len(aggregate.results)} targets")
    log(f"UMBRELLA: typings {source.name} -> {typings_path}")

    return UmbrellaUpdate(
        manifest_path=manifest_path, manifest=manifest, typings_path=typings_path
    )
