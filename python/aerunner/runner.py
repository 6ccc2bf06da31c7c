"""Run the active editor file in After Effects.

Plain scripts run as they are. TypeScript (and JavaScript that belongs to
a tsconfig.json project) is compiled first and the emitted script that
best matches the source is run instead.
"""

import logging
import os

from .config import Settings, find_config
from .errors import ConfigNotFound
from .file_cache import MembershipCache
from .ignore import filter_outputs, load_output_spec
from .matcher import select_best_match
from .protocols import CompilerTools, RunResult, ScriptHost

logger = logging.getLogger(__name__)

BINARY_EXTS = {".jsxbin"}
SCRIPT_EXTS = {".js", ".jsx"}
SOURCE_EXTS = {".ts", ".tsx"}
SUPPORTED_EXTS = BINARY_EXTS | SCRIPT_EXTS | SOURCE_EXTS


class Runner:
    """Owns the membership cache for the lifetime of the process."""

    def __init__(
        self,
        tools: CompilerTools,
        host: ScriptHost,
        settings: Settings | None = None,
    ):
        self.settings = settings or Settings()
        self.tools = tools
        self.host = host
        self.cache = MembershipCache(tools)
        self._output_spec = load_output_spec(self.settings.output_ignore)

    def run_file(self, file_path: str) -> RunResult:
        file_path = os.path.abspath(file_path)
        ext = os.path.splitext(file_path)[1].lower()
        if ext not in SUPPORTED_EXTS:
            return RunResult("skipped", file_path, reason="unsupported_extension")

        host_path = self.host.find_host_path()

        if ext in BINARY_EXTS:
            return self._launch(host_path, file_path, file_path)

        config_path = find_config(file_path)
        if config_path is None:
            if ext in SCRIPT_EXTS:
                return self._launch(host_path, file_path, file_path)
            raise ConfigNotFound("Unable to find tsconfig.json")

        if not self.cache.is_file_listed(file_path, config_path):
            if ext in SCRIPT_EXTS:
                return self._launch(host_path, file_path, file_path, config_path)
            return RunResult("skipped", file_path, config=config_path, reason="not_in_project")

        root = os.path.dirname(config_path)
        outputs = filter_outputs(self.tools.compile_and_list_outputs(root), self._output_spec)
        if not outputs:
            return RunResult("skipped", file_path, config=config_path, reason="no_outputs")

        target = outputs[0] if len(outputs) == 1 else select_best_match(file_path, outputs)
        return self._launch(host_path, file_path, target, config_path)

    def _launch(
        self,
        host_path: str,
        file_path: str,
        script: str,
        config_path: str | None = None,
    ) -> RunResult:
        self.host.run_script(host_path, script)
        logger.info(
            "runner.launched",
            extra={"file": file_path, "script": script, "config": config_path},
        )
        return RunResult("launched", file_path, script=script, config=config_path)
