"""CLI entry point: python3 -m aerunner

Modes:
  --command/--args  Single-shot command
  --sidecar         Persistent stdin/stdout JSON-RPC loop; the membership
                    cache lives as long as the sidecar does
"""

import argparse
import json
import logging
import sys
import traceback

from .config import load_settings


def main():
    parser = argparse.ArgumentParser(description="Run scripts in After Effects")
    parser.add_argument("--sidecar", action="store_true",
                        help="Run as persistent sidecar (stdin/stdout JSON-RPC)")
    parser.add_argument("--command", help="Command to run")
    parser.add_argument("--file", help="Shorthand for --args '{\"file\": FILE}'")
    parser.add_argument("--args", default="{}", help="JSON-encoded arguments")
    args = parser.parse_args()

    logging.basicConfig(
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)

    if args.sidecar:
        _run_sidecar(settings)
    else:
        if not args.command:
            parser.error("--command is required (or use --sidecar)")
        _run_single(args, settings)


def _make_runner(settings):
    from .host import AfterEffectsHost
    from .runner import Runner
    from .tsc import TscTools

    return Runner(TscTools(settings), AfterEffectsHost(settings), settings)


def _run_single(args, settings):
    """Single-shot mode."""
    try:
        extra_args = json.loads(args.args)
    except json.JSONDecodeError as e:
        _error_exit("InvalidArgs", f"Failed to parse --args JSON: {e}")
    if args.file:
        extra_args.setdefault("file", args.file)

    try:
        from .commands import dispatch
        result = dispatch(args.command, extra_args, _make_runner(settings))
        json.dump(result, sys.stdout)
        sys.stdout.write("\n")
    except KeyError as e:
        _error_exit("InvalidArgs", f"Missing argument: {e}")
    except Exception as e:
        _error_exit(type(e).__name__, str(e))


def _run_sidecar(settings):
    """Persistent sidecar: read JSON requests from stdin, write responses to stdout."""
    from .commands import dispatch

    runner = _make_runner(settings)

    # Signal readiness
    sys.stdout.write('{"status":"ready"}\n')
    sys.stdout.flush()

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue

        try:
            req = json.loads(line)
        except json.JSONDecodeError as e:
            resp = {"id": None, "error": {"type": "InvalidJSON", "message": str(e)}}
            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
            continue

        if not isinstance(req, dict):
            resp = {"id": None, "error": {"type": "InvalidRequest", "message": "Request must be a JSON object"}}
            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
            continue

        req_id = req.get("id")
        command = req.get("command", "")
        extra_args = req.get("args", {})

        try:
            result = dispatch(command, extra_args, runner)
            resp = {"id": req_id, "result": result}
        except KeyError as e:
            resp = {"id": req_id, "error": {"type": "InvalidArgs", "message": f"Missing argument: {e}"}}
        except Exception as e:
            resp = {"id": req_id, "error": {"type": type(e).__name__, "message": str(e)}}

        sys.stdout.write(json.dumps(resp) + "\n")
        sys.stdout.flush()


def _error_exit(error_type: str, message: str):
    """Write structured error to stderr and exit."""
    error = {
        "error": error_type,
        "message": message,
        "traceback": traceback.format_exc(),
    }
    json.dump(error, sys.stderr)
    sys.stderr.write("\n")
    sys.exit(1)


if __name__ == "__main__":
    main()
