from __future__ import annotations

import argparse
import sys
from pathlib import Path

from npm_bridge import __version__
from npm_bridge.commands import npm, prepare
from npm_bridge.environment import EnvironmentCheckError
from npm_bridge.process import PackageManagerExit, PackageManagerLaunchError
from npm_bridge.project import DEFAULT_PROJECT_FILE, ProjectConfigError, load_project


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="npm-bridge",
        description=(
            "Invoke the npm package manager against a package.json generated from "
            "the project descriptor. The manifest is removed afterwards unless "
            "npm.write-package-json is true."
        ),
        epilog=(
            "examples:\n"
            "  npm-bridge install\n"
            "  npm-bridge pprint        print the generated package.json\n"
            "  npm-bridge -- --version  pass options through to npm"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project",
        type=Path,
        default=Path(DEFAULT_PROJECT_FILE),
        help=f"Project descriptor YAML (default: ./{DEFAULT_PROJECT_FILE}).",
    )
    parser.add_argument(
        "npm_args",
        nargs=argparse.REMAINDER,
        help="Arguments forwarded verbatim to npm, or `pprint`.",
    )
    return parser


def _print_error(message: str, *, hint: str | None = None) -> None:
    print(f"[npm-bridge] ERROR: {message}", file=sys.stderr)
    if hint:
        print(f"  Hint: {hint}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    npm_args = list(args.npm_args)
    if npm_args[:1] == ["--"]:
        npm_args = npm_args[1:]

    try:
        project = load_project(args.project)
        if not npm_args:
            prepare(project)
            parser.print_help()
            return 1
        npm(project, npm_args)
    except ProjectConfigError as e:
        _print_error(str(e), hint=e.hint)
        return 1
    except EnvironmentCheckError:
        # Already reported by the environment check.
        return 1
    except PackageManagerLaunchError as e:
        _print_error(str(e), hint=e.hint)
        return 1
    except PackageManagerExit as e:
        return e.returncode
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
