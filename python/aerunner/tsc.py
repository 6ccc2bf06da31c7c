"""TypeScript compiler glue: file listing and emit with --listEmittedFiles."""

import logging
import os
import shutil
import subprocess

from .config import Settings
from .errors import CompileFailed, ToolUnavailable

logger = logging.getLogger(__name__)

EMITTED_PREFIX = "TSFILE:"
_MAX_OUTPUT_CHARS = 2000


def _to_native(text: str) -> str:
    if os.sep == "/":
        return text
    return text.replace("/", os.sep)


def _existing(paths: list[str]) -> list[str]:
    return [p for p in paths if p and not p.isspace() and os.path.exists(p)]


def parse_listed_files(stdout: str) -> list[str]:
    """Parse `tsc --listFiles` output into existing absolute paths."""
    return _existing([_to_native(line.strip()) for line in stdout.split("\n")])


def parse_emitted_files(stdout: str) -> list[str]:
    """Parse the TSFILE: lines of `tsc --listEmittedFiles` output."""
    paths = []
    for line in stdout.split("\n"):
        line = line.strip()
        if line.startswith(EMITTED_PREFIX):
            paths.append(_to_native(line[len(EMITTED_PREFIX):].strip()))
    return _existing(paths)


class TscTools:
    """CompilerTools implementation backed by the tsc executable."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or Settings()

    def list_project_files(self, root: str) -> list[str]:
        stdout = self._run(["--noEmit", "--listFiles"], root, stage="list_files")
        return parse_listed_files(stdout)

    def compile_and_list_outputs(self, root: str) -> list[str]:
        stdout = self._run(["--listEmittedFiles"], root, stage="emit")
        outputs = parse_emitted_files(stdout)
        logger.info("tsc.emitted", extra={"root": root, "count": len(outputs)})
        return outputs

    def read_modification_time(self, path: str) -> int:
        return os.stat(path).st_mtime_ns

    def _resolve(self, root: str) -> str:
        executable = shutil.which(self._settings.tsc)
        if executable is None:
            _log_tsc_failure("resolve", root, error_type="FileNotFoundError",
                             error_message=f"{self._settings.tsc} not on PATH")
            raise ToolUnavailable("tsc isn't found", tool=self._settings.tsc)
        return executable

    def _run(self, flags: list[str], root: str, *, stage: str) -> str:
        """Run tsc with flags in root and return its stdout."""
        cmd = [self._resolve(root), *flags]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                cwd=root,
                timeout=self._settings.tsc_timeout,
            )
        except subprocess.TimeoutExpired as e:
            _log_tsc_failure(stage, root, error_type=type(e).__name__, error_message=str(e))
            raise ToolUnavailable(
                f"tsc timed out after {self._settings.tsc_timeout}s", tool=self._settings.tsc,
            ) from e
        except OSError as e:
            _log_tsc_failure(stage, root, error_type=type(e).__name__, error_message=str(e))
            raise ToolUnavailable("tsc isn't found", tool=self._settings.tsc) from e

        if result.returncode != 0:
            # tsc reports diagnostics on stdout.
            output = ((result.stdout or "") + (result.stderr or "")).strip()[:_MAX_OUTPUT_CHARS]
            _log_tsc_failure(stage, root, returncode=result.returncode, output=output)
            error_cls = CompileFailed if stage == "emit" else ToolUnavailable
            raise error_cls(
                f"tsc exited with code {result.returncode}",
                tool=self._settings.tsc,
                returncode=result.returncode,
                output=output,
            )

        return result.stdout or ""


def _log_tsc_failure(
    stage: str,
    root: str,
    *,
    returncode: int | None = None,
    output: str | None = None,
    error_type: str | None = None,
    error_message: str | None = None,
) -> None:
    extra = {"stage": stage, "root": root}
    if returncode is not None:
        extra["returncode"] = returncode
    if output:
        extra["output"] = output[:500]
    if error_type:
        extra["error_type"] = error_type
    if error_message:
        extra["error_message"] = error_message
    logger.warning("tsc.invocation_failed", extra=extra)
