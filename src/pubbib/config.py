"""Workspace configuration for pubbib operations."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class WorkspaceConfig:
    """Configuration for workspace file paths."""

    bib_path: Path
    html_path: Path
    json_path: Path
    export_path: Path
    page_title: str = "Publications"

    @classmethod
    def from_workspace(cls, workspace: Path) -> "WorkspaceConfig":
        """Create configuration from workspace root path.

        Args:
            workspace: Path to workspace root directory

        Returns:
            WorkspaceConfig with standard file paths
        """
        build_dir = workspace / "build"
        return cls(
            bib_path=workspace / "publications.bib",
            html_path=build_dir / "publications.html",
            json_path=build_dir / "publications.json",
            export_path=build_dir / "publications.bib",
        )
