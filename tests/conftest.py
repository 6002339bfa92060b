from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

_DUMMY_NPM = "\n".join(
    [
        "import json",
        "import os",
        "import sys",
        "from pathlib import Path",
        "",
        "",
        "def main() -> int:",
        "    args = sys.argv[1:]",
        "    if args == ['-version']:",
        "        print('10.0.0')",
        "        return 0",
        "    manifest = Path.cwd() / os.environ.get('DUMMY_NPM_MANIFEST', 'package.json')",
        "    entry = {",
        "        'argv': args,",
        "        'cwd': str(Path.cwd()),",
        "        'manifest': manifest.read_text(encoding='utf-8') if manifest.exists() else None,",
        "    }",
        "    with open(os.environ['DUMMY_NPM_LOG'], 'a', encoding='utf-8') as f:",
        "        f.write(json.dumps(entry) + '\\n')",
        "    return int(os.environ.get('DUMMY_NPM_EXIT', '0'))",
        "",
        "",
        "if __name__ == '__main__':",
        "    raise SystemExit(main())",
        "",
    ]
)


class DummyNpm:
    def __init__(self, binary: str, log_path: Path) -> None:
        self.binary = binary
        self.log_path = log_path

    def calls(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]


@pytest.fixture
def dummy_npm(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> DummyNpm:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "dummy_npm.py"
    script.write_text(_DUMMY_NPM, encoding="utf-8", newline="\n")

    if os.name == "nt":
        wrapper = bin_dir / "dummy_npm.cmd"
        wrapper.write_text(
            f"@echo off\r\n\"{sys.executable}\" \"{script}\" %*\r\n",
            encoding="utf-8",
            newline="\n",
        )
    else:
        wrapper = bin_dir / "dummy_npm.sh"
        wrapper.write_text(
            "\n".join(
                [
                    "#!/usr/bin/env bash",
                    f"\"{sys.executable}\" \"{script}\" \"$@\"",
                    "",
                ]
            ),
            encoding="utf-8",
            newline="\n",
        )
        wrapper.chmod(0o755)

    log_path = tmp_path / "npm_calls.jsonl"
    monkeypatch.setenv("DUMMY_NPM_LOG", str(log_path))
    monkeypatch.delenv("DUMMY_NPM_EXIT", raising=False)
    return DummyNpm(str(wrapper), log_path)


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: dict[str, Any], *, dirname: str = "proj") -> Path:
        project_dir = tmp_path / dirname
        project_dir.mkdir(parents=True, exist_ok=True)
        path = project_dir / "project.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
