"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from vibectl.models.module import GeneratedFile
from vibectl.modules.generator import FileGenerator


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's config and state directory overrides."""
    monkeypatch.delenv("VIBECTL_STATE_DIRNAME", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def order_generator() -> FileGenerator:
    """Generator for an "order" domain module that is not in the registry."""

    def generate(name: str) -> list[GeneratedFile]:
        return [
            GeneratedFile(
                path=f"src/modules/{name}/{name}.types.ts",
                content=f"export interface {name.title()} {{ id: string }}\n",
            ),
            GeneratedFile(
                path=f"src/modules/{name}/{name}.service.ts",
                content=f"export const {name}Service = {{}};\n",
            ),
            GeneratedFile(
                path=f"src/modules/{name}/index.ts",
                content=f"export * from './{name}.service';\n",
            ),
        ]

    return generate
