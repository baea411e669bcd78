import io
from pathlib import Path
from typing import Dict

import pytest

from retry_policy.console import Terminal


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path_factory, monkeypatch):
    """
    Per-test isolation:
    - chdir into a unique tmp dir so relative paths (./workflows,
      .retry-policy.yml) never touch the repository
    - drop env vars that would make rich emit terminal control codes
    """
    tmp_path = tmp_path_factory.mktemp("cwd")
    monkeypatch.chdir(tmp_path)
    for var in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(var, raising=False)
    yield tmp_path


@pytest.fixture
def workflows_root(isolated_cwd) -> Path:
    """Return ``./workflows`` inside the isolated cwd (created, empty)."""
    root = isolated_cwd / "workflows"
    root.mkdir()
    return root


@pytest.fixture
def make_workflow(workflows_root):
    """Create ``workflows/<name>/`` with the given ``{filename: yaml text}`` files."""

    def _make(name: str, files: Dict[str, str]) -> Path:
        wf = workflows_root / name
        wf.mkdir()
        for filename, text in files.items():
            (wf / filename).write_text(text, encoding="utf-8")
        return wf

    return _make


class FakeTerminal(Terminal):
    """Terminal fed from a list of answers, capturing stdout/stderr."""

    def __init__(self, *answers: str):
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        stdin = io.StringIO("".join(f"{a}\n" for a in answers))
        super().__init__(stdin=stdin, stdout=self.stdout, stderr=self.stderr)

    @property
    def output(self) -> str:
        return self.stdout.getvalue()

    @property
    def errors(self) -> str:
        return self.stderr.getvalue()


@pytest.fixture
def terminal_factory():
    return FakeTerminal
