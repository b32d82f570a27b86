import json
import re
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import USER_AGENT
from .console import log, warn
from .errors import (
    ManifestError,
    RegistryError,
    UnsupportedMajorError,
    UserDeclinedError,
)
from .manifests import load_manifest

SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


class GateDecision(Enum):
    PROCEED = "proceed"
    SKIP = "skip"
    ABORT_USER_DECLINED = "abort-user-declined"


@dataclass(frozen=True)
class UpstreamRelease:
    version: str
    base_path: Path


def semver_key(version):
    if not SEMVER_RE.match(version):
        raise ValueError(f"Invalid version {version}")
    core = version.split("+", 1)[0]
    release, _, prerelease = core.partition("-")
    major, minor, patch = (int(part) for part in release.split("."))
    prerelease_key = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in prerelease.split(".")
        if part
    )
    return (major, minor, patch, not prerelease, prerelease_key)


def major_of(version):
    return semver_key(version)[0]


def is_newer(candidate, current):
    return semver_key(candidate) > semver_key(current)


def read_version(manifest_path):
    data = load_manifest(manifest_path)
    version = data.get("version")
    if not isinstance(version, str) or not SEMVER_RE.match(version.strip()):
        raise ManifestError(f"{manifest_path} has no valid version field")
    return version.strip()


def resolve_upstream(upstream_root):
    upstream_root = Path(upstream_root)
    if not upstream_root.is_dir():
        raise ManifestError(f"Upstream package not installed at {upstream_root}")
    version = read_version(upstream_root / "package.json")
    return UpstreamRelease(version=version, base_path=upstream_root.resolve())


def fetch_latest_version(package_name, registry):
    quoted = urllib.parse.quote(package_name, safe="@")
    url = f"{registry.rstrip('/')}/{quoted}/latest"
    req = urllib.request.Request(
        url, headers={"Accept": "application/json", "User-Agent": USER_AGENT}
    )
    try:
        with urllib.request.urlopen(req) as resp:
            data = json.load(resp)
    except urllib.error.HTTPError as exc:
        raise RegistryError(f"Failed to query {package_name} on {registry}: {exc}")
    except OSError:
        warn(f"failed to query {registry} for {package_name}")
        return None
    except ValueError as exc:
        raise RegistryError(f"Invalid response for {package_name} from {registry}: {exc}")
    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not SEMVER_RE.match(version):
        raise RegistryError(f"Registry returned no version for {package_name}")
    return version


def check_release(installed, persisted, latest, supported_major, confirm=None):
    """Decide whether the installed upstream version needs releasing.

    ``latest`` may be None when the registry could not be queried. With a
    ``confirm`` callable a newer upstream on the registry asks the operator
    whether to go on; without one it only warns.
    """
    if major_of(installed) != supported_major:
        raise UnsupportedMajorError(
            f"Installed upstream version {installed} is not a "
            f"{supported_major}.x release"
        )

    if not is_newer(installed, persisted):
        log(f"Nothing to update ({installed} already released as {persisted})")
        return GateDecision.SKIP

    if latest is not None and is_newer(latest, installed):
        warn(f"a newer upstream version is available ({latest} > {installed})")
        if confirm is not None:
            if not confirm(f"Continue releasing {installed} anyway?"):
                return GateDecision.ABORT_USER_DECLINED
    return GateDecision.PROCEED


def require_proceed(decision):
    if decision is GateDecision.ABORT_USER_DECLINED:
        raise UserDeclinedError("Release aborted by user")
    return decision is GateDecision.PROCEED
