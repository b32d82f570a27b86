import argparse
from pathlib import Path

from .config import ReleaseConfig, default_registry
from .console import fail, log
from .errors import ReleaseError, UserDeclinedError
from .git import Git
from .matrix import TARGETS, parse_matrix
from .npm import Npm
from .release import run_release
from .versions import GateDecision


def confirm(prompt):
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="koffi-cream-release",
        description="Repackage the installed koffi binaries and publish them "
        "as per-platform packages plus the koffi-cream umbrella.",
    )
    publish = parser.add_mutually_exclusive_group()
    publish.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=True,
        help="Validate the release with npm publish --dry-run (default).",
    )
    publish.add_argument(
        "--publish",
        dest="dry_run",
        action="store_false",
        help="Publish to the registry, then commit and tag the release.",
    )
    prompt = parser.add_mutually_exclusive_group()
    prompt.add_argument(
        "--confirm",
        dest="confirm",
        action="store_true",
        default=True,
        help="Ask before releasing when a newer upstream exists (default).",
    )
    prompt.add_argument(
        "--no-confirm",
        dest="confirm",
        action="store_false",
        help="Only warn when a newer upstream exists.",
    )
    parser.add_argument(
        "--upstream",
        default="node_modules/koffi",
        help="Installed upstream package directory.",
    )
    parser.add_argument(
        "--registry",
        default=None,
        help="Registry queried for the latest upstream version.",
    )
    parser.add_argument(
        "--skip-latest-check",
        action="store_true",
        help="Do not query the registry for the latest upstream version.",
    )
    parser.add_argument(
        "--target",
        action="append",
        default=[],
        metavar="BUILD_ID=DIST_ID",
        help="Replace the built-in target matrix (repeatable).",
    )
    return parser


def config_from_args(args, root):
    if args.target:
        try:
            targets = parse_matrix(args.target)
        except ValueError as exc:
            raise ReleaseError(str(exc)) from None
    else:
        targets = TARGETS
    upstream_root = Path(args.upstream)
    if not upstream_root.is_absolute():
        upstream_root = root / upstream_root
    return ReleaseConfig(
        root=root,
        upstream_root=upstream_root,
        registry=(args.registry or default_registry()).rstrip("/"),
        confirm_on_newer_upstream=args.confirm,
        dry_run_publish=args.dry_run,
        check_latest=not args.skip_latest_check,
        targets=targets,
    )


def log_summary(outcome):
    context = outcome.context
    heading = "Dry run packages:" if context.dry_run else "Published packages:"
    log(heading)
    umbrella = context.umbrella.manifest
    log(f"  {umbrella['name']}@{umbrella['version']}")
    for result in context.results:
        log(f"  {result.dist_id}@{result.version}")


def main(argv=None, git=None, npm=None):
    args = build_parser().parse_args(argv)
    root = Path.cwd()
    try:
        config = config_from_args(args, root)
        outcome = run_release(
            config,
            git or Git(root),
            npm or Npm(root),
            confirm=confirm,
        )
    except UserDeclinedError as exc:
        log(str(exc))
        return 0
    except ReleaseError as exc:
        fail(str(exc))
    except Exception as exc:
        fail(f"{type(exc).__name__}: {exc}")

    if outcome.decision is GateDecision.SKIP:
        return 0
    log_summary(outcome)
    log(f"Done: {outcome.version}")
    return 0
