import json
from pathlib import Path

import pytest

from cream_release.config import ReleaseConfig
from cream_release.errors import PublishError
from cream_release.matrix import TargetDescriptor

TYPINGS = """declare module 'koffi' {
    export function load(path: string): IKoffiLib;
    export type IKoffiLib = { func(definition: string): Function };
}
"""

SCENARIO_TARGETS = (
    TargetDescriptor("linux_x64", "linux-x64-glibc"),
    TargetDescriptor("win32_x64", "win32-x64"),
)


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def read_json(path):
    return json.loads(Path(path).read_text(encoding="utf-8"))


class FakeGit:
    """Version control stand-in that restores files from a snapshot."""

    def __init__(self, root, toplevel=None):
        self.root = Path(root)
        self._toplevel = Path(toplevel) if toplevel else self.root
        self.checkouts = []
        self.commits = []
        self.tags = []
        self.snapshot = self._take_snapshot()

    def _take_snapshot(self):
        files = {}
        for path in self.root.rglob("*"):
            if path.is_file():
                files[path] = path.read_bytes()
        return files

    def toplevel(self):
        return self._toplevel

    def checkout(self, paths):
        self.checkouts.append([Path(path) for path in paths])
        for path in paths:
            path = Path(path)
            for tracked, content in self.snapshot.items():
                if tracked == path or path in tracked.parents:
                    tracked.write_bytes(content)

    def commit_all(self, message):
        self.commits.append(message)
        self.snapshot = self._take_snapshot()

    def tag(self, name):
        self.tags.append(name)


class FakeNpm:
    def __init__(self, fail=False, on_publish=None):
        self.fail = fail
        self.on_publish = on_publish
        self.calls = []

    def ensure_available(self):
        pass

    def publish(self, dry_run=False):
        self.calls.append(dry_run)
        if self.on_publish is not None:
            self.on_publish()
        if self.fail:
            raise PublishError("npm publish failed: registry rejected the upload")


@pytest.fixture
def repo(tmp_path):
    root = tmp_path / "koffi-cream"
    write_json(
        root / "package.json",
        {
            "name": "koffi-cream-monorepo",
            "private": True,
            "version": "2.4.0",
            "workspaces": ["packages/*"],
        },
    )

    upstream = root / "node_modules" / "koffi"
    write_json(upstream / "package.json", {"name": "koffi", "version": "2.5.0"})
    (upstream / "index.d.ts").write_text(TYPINGS, encoding="utf-8")
    for build_id in ("linux_x64", "win32_x64"):
        binary = upstream / "build" / "koffi" / build_id / "koffi.node"
        binary.parent.mkdir(parents=True)
        binary.write_bytes(b"\x7fELF" + build_id.encode())

    packages = root / "packages"
    write_json(
        packages / "koffi-cream" / "package.json",
        {
            "name": "dist-cream",
            "version": "2.4.0",
            "main": "index.js",
            "types": "index.d.ts",
            "optionalDependencies": {
                "dist-linux-x64-glibc": "2.4.0",
                "dist-darwin-x64": "2.4.0",
            },
        },
    )
    (packages / "koffi-cream" / "index.d.ts").write_text(
        "declare module 'dist-cream' {}\n", encoding="utf-8"
    )
    write_json(
        packages / "koffi-linux-x64-glibc" / "package.json",
        {
            "name": "dist-linux-x64-glibc",
            "version": "2.4.0",
            "main": "koffi.node",
            "os": ["linux"],
            "cpu": ["x64"],
            "libc": ["glibc"],
        },
    )
    write_json(
        packages / "koffi-win32-x64" / "package.json",
        {
            "name": "dist-win32-x64",
            "version": "2.4.0",
            "main": "koffi.node",
            "os": ["win32"],
            "cpu": ["x64"],
            "libc": ["glibc"],
        },
    )
    return root


@pytest.fixture
def config(repo):
    return ReleaseConfig(
        root=repo,
        upstream_root=repo / "node_modules" / "koffi",
        name_prefix="dist-",
        confirm_on_newer_upstream=False,
        dry_run_publish=False,
        check_latest=False,
        targets=SCENARIO_TARGETS,
    )


@pytest.fixture
def git(repo):
    return FakeGit(repo)


@pytest.fixture
def npm():
    return FakeNpm()
