import shutil
import subprocess
from pathlib import Path

from .commands import run_command
from .errors import PublishError, ReleaseEnvironmentError


class Npm:
    def __init__(self, root):
        self.root = Path(root)

    def publish(self, dry_run=False):
        command = ["npm", "publish", "--workspaces", "--access", "public"]
        if dry_run:
            command.append("--dry-run")
        try:
            run_command(command, cwd=self.root)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise PublishError(f"npm publish failed: {exc}") from exc

    def ensure_available(self):
        if not shutil.which("npm"):
            raise ReleaseEnvironmentError("npm not found on PATH")
