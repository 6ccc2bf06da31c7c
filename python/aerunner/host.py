"""After Effects host glue: locate the running executable and launch scripts."""

import logging
import subprocess
import sys

from .config import Settings
from .errors import HostUnavailable, UnsupportedPlatform

logger = logging.getLogger(__name__)

HOST_PROCESS_NAME = "AfterFX.exe"
_POWERSHELL_QUERY = (
    f"(Get-WmiObject -class Win32_Process -Filter 'Name=\"{HOST_PROCESS_NAME}\"').path"
)


class AfterEffectsHost:
    """ScriptHost implementation for Adobe After Effects."""

    def __init__(self, settings: Settings | None = None, platform: str | None = None):
        self._settings = settings or Settings()
        self._platform = platform or sys.platform

    def find_host_path(self) -> str:
        """Return the executable path of the running After Effects instance.

        AERUNNER_HOST_PATH takes precedence over process discovery, which is
        only implemented on Windows.
        """
        if self._settings.host_path:
            return self._settings.host_path
        if self._platform == "win32":
            return _find_host_path_win32()
        raise UnsupportedPlatform(f"{self._platform} isn't supported")

    def run_script(self, host_path: str, script_path: str) -> None:
        """Ask the host to run script_path. Does not wait for it."""
        logger.info("host.run_script", extra={"host_path": host_path, "script": script_path})
        try:
            subprocess.Popen(
                [host_path, "-r", script_path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise HostUnavailable(f"Unable to launch {host_path}: {e}") from e


def parse_host_paths(output: str) -> list[str]:
    """Split PowerShell output into non-empty lines."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def _find_host_path_win32() -> str:
    try:
        result = subprocess.run(
            ["powershell.exe", "-Command", _POWERSHELL_QUERY],
            capture_output=True,
            text=True,
            stdin=subprocess.DEVNULL,
            timeout=30,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.warning(
            "host.lookup_failed",
            extra={"error_type": type(e).__name__, "error_message": str(e)},
        )
        raise HostUnavailable(str(e)) from e

    paths = parse_host_paths(result.stdout or "")
    if not paths:
        raise HostUnavailable("Please launch After Effects.")
    return paths[0]
