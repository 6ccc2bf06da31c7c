"""Data types and capability protocols for aerunner.

Defines the CompilerTools and ScriptHost protocols that decouple the
membership cache and the runner from the processes they drive (tsc,
After Effects), so tests can substitute deterministic fakes.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class MembershipEntry:
    """Last known answer to "is this file in the set rooted at config_path"."""
    config_path: str
    is_member: bool


@dataclass
class ScoredCandidate:
    """A candidate output path with its suffix-alignment score."""
    path: str
    score: int = 0


@dataclass
class RunResult:
    """Outcome of running a file in the automation host."""
    action: str
    file: str
    script: str | None = None
    config: str | None = None
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "file": self.file,
            "script": self.script,
            "config": self.config,
            "reason": self.reason,
        }


class CompilerTools(Protocol):
    """Protocol for the external compiler and filesystem metadata."""

    def list_project_files(self, root: str) -> list[str]:
        """List the absolute paths of the files compiled from root.

        Only paths that exist on disk are returned.
        """
        ...

    def compile_and_list_outputs(self, root: str) -> list[str]:
        """Compile the project rooted at root and list the emitted files."""
        ...

    def read_modification_time(self, path: str) -> int:
        ...


class ScriptHost(Protocol):
    """Protocol for the application that runs the scripts."""

    def find_host_path(self) -> str:
        ...

    def run_script(self, host_path: str, script_path: str) -> None:
        ...
