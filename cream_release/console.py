import sys


def log(message):
    print(message, flush=True)


def warn(message):
    log(f"Warning: {message}")


def fail(message, status=1):
    print(f"ERROR: {message}", file=sys.stderr, flush=True)
    sys.exit(status)
