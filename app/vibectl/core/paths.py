"""Path management for vibectl.

Project state lives in a hidden directory at the project root:

- Manifest: <project>/.vibe/modules.json
- Undo stack: <project>/.vibe/undo-stack.json

User configuration (theme overrides) follows the XDG Base Directory
Specification: ~/.config/vibectl/.
"""

import os
from pathlib import Path, PurePosixPath

# Application identifier for directory naming
APP_NAME = "vibectl"

DEFAULT_STATE_DIRNAME = ".vibe"
MANIFEST_FILENAME = "modules.json"
UNDO_STACK_FILENAME = "undo-stack.json"


class UnsafePathError(ValueError):
    """Raised when a project-relative path points outside the project root."""


def get_config_dir() -> Path:
    """Get the user configuration directory path.

    Returns:
        Path to ~/.config/vibectl/ (or XDG_CONFIG_HOME/vibectl/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_state_dirname() -> str:
    """Get the name of the per-project state directory.

    The VIBECTL_STATE_DIRNAME environment variable overrides the default.

    Returns:
        Directory name, ".vibe" unless overridden.
    """
    return os.environ.get("VIBECTL_STATE_DIRNAME") or DEFAULT_STATE_DIRNAME


def get_state_dir(project_root: Path) -> Path:
    """Get the state directory of a project.

    Args:
        project_root: Root directory of the user's project.

    Returns:
        Path to <project>/.vibe/.
    """
    return Path(project_root) / get_state_dirname()


def get_manifest_path(project_root: Path) -> Path:
    """Get the module manifest path of a project.

    Returns:
        Path to <project>/.vibe/modules.json.
    """
    return get_state_dir(project_root) / MANIFEST_FILENAME


def get_undo_stack_path(project_root: Path) -> Path:
    """Get the undo stack path of a project.

    Returns:
        Path to <project>/.vibe/undo-stack.json.
    """
    return get_state_dir(project_root) / UNDO_STACK_FILENAME


def resolve_project_path(project_root: Path, relative_path: str) -> Path:
    """Join a project-relative path onto the project root.

    Args:
        project_root: Root directory of the user's project.
        relative_path: POSIX-style path relative to the project root.

    Returns:
        The path joined onto the project root.

    Raises:
        UnsafePathError: If the path is absolute, names the root itself, or contains '..'.
    """
    pure = PurePosixPath(relative_path)
    if pure.is_absolute() or not pure.parts or ".." in pure.parts:
        msg = f"Path must stay inside the project: {relative_path!r}"
        raise UnsafePathError(msg)
    return Path(project_root).joinpath(*pure.parts)