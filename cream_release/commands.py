import subprocess


def run_command(command, cwd=None):
    subprocess.run(command, cwd=cwd, check=True)


def capture_command(command, cwd=None):
    return subprocess.check_output(command, cwd=cwd, text=True).strip()
