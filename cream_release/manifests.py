import json

from .errors import ManifestError


def load_manifest(path):
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestError(f"Missing {path}") from None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from None
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must be a JSON object")
    return data


def save_manifest(path, data):
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
