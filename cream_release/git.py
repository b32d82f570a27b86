from pathlib import Path

from .commands import capture_command, run_command


class Git:
    def __init__(self, root):
        self.root = Path(root)

    def toplevel(self):
        return Path(capture_command(["git", "rev-parse", "--show-toplevel"], cwd=self.root))

    def checkout(self, paths):
        if not paths:
            return
        command = ["git", "checkout", "--"]
        command.extend(str(path) for path in paths)
        run_command(command, cwd=self.root)

    def commit_all(self, message):
        run_command(["git", "commit", "--all", "--message", message], cwd=self.root)

    def tag(self, name):
        run_command(["git", "tag", name], cwd=self.root)
