"""
Workspace discovery and the files skiff keeps inside a project.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml

from .errors import SkiffError
from .interfaces import ManifestWriterBase
from .manifest import Manifest, to_yaml

logger = logging.getLogger(__name__)

WORKSPACE_DIR = "skiff"
SUMMARY_FILE = ".workspace"
MANIFEST_FILE = "manifest.yml"
DOCKERFILE_NAME = "Dockerfile"

# How many directories below the project root to look for Dockerfiles.
DOCKERFILE_SEARCH_DEPTH = 1

MANIFEST_HEADER = (
    "# The manifest for the \"{name}\" service.\n"
    "# Read the full specification for the \"{type}\" type in the project docs.\n\n"
)


class WorkspaceError(SkiffError):
    """Base class for workspace failures."""


class WorkspaceNotFound(WorkspaceError):
    def __init__(self, start: Path):
        self.start = start
        super().__init__(f"couldn't find a {WORKSPACE_DIR}/ directory in {start} or any parent directory")


class Workspace(ManifestWriterBase):
    """A project directory holding a ``skiff/`` directory."""

    def __init__(self, project_root: Path):
        self.project_root = Path(project_root)

    @classmethod
    def find(cls, start: Optional[Path] = None) -> "Workspace":
        """
        Find the workspace containing ``start`` (default: the current directory).

        Raises:
            WorkspaceNotFound: If no parent directory holds a workspace summary
        """
        start = Path(start or os.getcwd()).resolve()
        for candidate in [start, *start.parents]:
            if (candidate / WORKSPACE_DIR / SUMMARY_FILE).is_file():
                return cls(candidate)
        raise WorkspaceNotFound(start)

    @classmethod
    def create(cls, project_root: Path, app_name: str) -> "Workspace":
        """Create the workspace directory and summary for ``app_name``."""
        ws = cls(project_root)
        summary = ws.project_root / WORKSPACE_DIR / SUMMARY_FILE
        if summary.exists():
            existing = ws.app_name()
            if existing != app_name:
                raise WorkspaceError(
                    f"workspace is already registered with application {existing} instead of {app_name}"
                )
            return ws
        summary.parent.mkdir(parents=True, exist_ok=True)
        with open(summary, "w") as f:
            yaml.safe_dump({"application": app_name}, f, sort_keys=False)
        return ws

    def app_name(self) -> str:
        """Return the application this workspace belongs to, or '' if unset."""
        summary = self.project_root / WORKSPACE_DIR / SUMMARY_FILE
        try:
            with open(summary) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise WorkspaceError(f"read workspace summary {summary}: {e}") from e
        return str(data.get("application") or "")

    def root_path(self) -> str:
        """Return the path of the ``skiff/`` directory, creating it if needed."""
        root = self.project_root / WORKSPACE_DIR
        root.mkdir(parents=True, exist_ok=True)
        return str(root)

    def write_service_manifest(self, manifest: Manifest, name: str) -> str:
        """
        Write a service manifest to ``skiff/<name>/manifest.yml``.

        An existing manifest is overwritten.

        Returns:
            str: Path of the written manifest
        """
        path = Path(self.root_path()) / name / MANIFEST_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        header = MANIFEST_HEADER.format(name=name, type=manifest.type.value)
        with open(path, "w") as f:
            f.write(header + to_yaml(manifest))
        logger.debug(f"Wrote manifest for {name} to {path}")
        return str(path)

    def relative_path(self, path: str) -> str:
        """Express a path relative to the project root."""
        return os.path.relpath(os.path.realpath(path), os.path.realpath(self.project_root))


def find_dockerfiles(root: str, depth: int = DOCKERFILE_SEARCH_DEPTH) -> List[str]:
    """
    Find Dockerfiles in ``root`` and up to ``depth`` directories below it.

    Hidden directories and the ``skiff/`` directory are skipped.

    Returns:
        Paths relative to ``root``, sorted
    """
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        level = 0 if rel_dir == "." else rel_dir.count(os.sep) + 1
        dirnames[:] = [
            d for d in dirnames
            if not d.startswith(".") and d != WORKSPACE_DIR and level < depth
        ]
        if DOCKERFILE_NAME in filenames:
            found.append(os.path.normpath(os.path.join(rel_dir, DOCKERFILE_NAME)))
    return sorted(found)
