"""Command dispatcher for aerunner.

Routes command names from the CLI and the sidecar loop to the runner.
Called from __main__.py.
"""

from __future__ import annotations

import os

from .config import find_config
from .errors import ConfigNotFound
from .matcher import score_candidates, select_best_match
from .runner import Runner


def dispatch(command: str, args: dict, runner: Runner) -> dict:
    """Dispatch a command to the runner.

    Args:
        command: Command name
        args: Command arguments dict
        runner: Runner whose cache persists across calls

    Returns:
        Dict result of the command
    """
    if command == "run":
        return runner.run_file(args["file"]).to_dict()

    elif command == "is_listed":
        file_path = os.path.abspath(args["file"])
        config_path = args.get("config") or find_config(file_path)
        if config_path is None:
            raise ConfigNotFound("Unable to find tsconfig.json")
        config_path = os.path.abspath(config_path)
        return {
            "file": file_path,
            "config": config_path,
            "listed": runner.cache.is_file_listed(file_path, config_path),
        }

    elif command == "best_match":
        reference = args["reference"]
        candidates = list(args.get("candidates", []))
        match = select_best_match(reference, candidates)
        return {
            "reference": reference,
            "match": match,
            "scores": [
                {"path": c.path, "score": c.score}
                for c in score_candidates(reference, candidates)
            ],
        }

    elif command == "cache_stats":
        return runner.cache.stats()

    elif command == "clear_cache":
        runner.cache.clear()
        return {"cleared": True}

    else:
        return {"error": "UnknownCommand", "message": f"Unknown command: {command}"}
