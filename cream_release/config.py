import os
from dataclasses import dataclass
from pathlib import Path

from .matrix import TARGETS

UPSTREAM_NAME = "koffi"
SUPPORTED_MAJOR = 2
DEFAULT_REGISTRY = "https://registry.npmjs.org"
USER_AGENT = "koffi-cream-release"


@dataclass(frozen=True)
class ReleaseConfig:
    root: Path
    upstream_root: Path
    packages_dir: Path = None
    umbrella_dir_name: str = "koffi-cream"
    target_dir_prefix: str = "koffi-"
    name_prefix: str = "@septh/koffi-"
    upstream_module: str = UPSTREAM_NAME
    supported_major: int = SUPPORTED_MAJOR
    registry: str = DEFAULT_REGISTRY
    confirm_on_newer_upstream: bool = True
    dry_run_publish: bool = True
    check_latest: bool = True
    targets: tuple = TARGETS

    def __post_init__(self):
        if self.packages_dir is None:
            object.__setattr__(self, "packages_dir", self.root / "packages")

    @property
    def umbrella_dir(self):
        return self.packages_dir / self.umbrella_dir_name

    @property
    def root_manifest(self):
        return self.root / "package.json"

    def target_dir(self, target):
        return self.packages_dir / f"{self.target_dir_prefix}{target.dist_id}"

    def target_name(self, target):
        return f"{self.name_prefix}{target.dist_id}"


def default_registry():
    registry = os.getenv("NPM_CONFIG_REGISTRY", "").strip()
    return registry.rstrip("/") or DEFAULT_REGISTRY
