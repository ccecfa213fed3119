"""
Launch configuration descriptors.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .artifacts import ArtifactFilter

WORKSPACE_FOLDER = "${workspaceFolder}"
DEBUGGER_TYPE = "lldb"


@dataclass(frozen=True)
class LaunchConfigDescriptor:
    """
    How to build and then debug one target.

    ``program`` is only set for the built-in default, which points at a
    fixed path instead of asking cargo to build something.
    """

    name: str
    build_args: Tuple[str, ...]
    artifact_filter: Optional[ArtifactFilter]
    working_directory: str = WORKSPACE_FOLDER
    program: Optional[str] = None

    def to_debug_configuration(self) -> Dict[str, Any]:
        """Render as the debug-adapter launch configuration dictionary."""
        config: Dict[str, Any] = {
            "type": DEBUGGER_TYPE,
            "request": "launch",
            "name": self.name,
        }
        if self.program is not None:
            config["program"] = self.program
        else:
            cargo: Dict[str, Any] = {
                "args": list(self.build_args),
                "filter": self.artifact_filter.to_dict() if self.artifact_filter else {},
            }
            if self.working_directory != WORKSPACE_FOLDER:
                cargo["cwd"] = self.working_directory
            config["cargo"] = cargo
        config["args"] = []
        config["cwd"] = WORKSPACE_FOLDER
        return config
