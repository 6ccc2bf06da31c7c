"""Exception types raised by aerunner.

Metadata read failures surface as the built-in OSError raised by os.stat.
"""


class ToolUnavailable(RuntimeError):
    """An external tool failed to start or exited abnormally."""

    def __init__(
        self,
        message: str,
        *,
        tool: str = "",
        returncode: int | None = None,
        output: str = "",
    ):
        super().__init__(message)
        self.tool = tool
        self.returncode = returncode
        self.output = output


class CompileFailed(ToolUnavailable):
    """The compiler ran in emit mode and reported failure."""


class InvalidArgument(ValueError):
    pass


class HostUnavailable(RuntimeError):
    """The automation host is not running or cannot be located."""


class UnsupportedPlatform(HostUnavailable):
    pass


class ConfigNotFound(FileNotFoundError):
    """No tsconfig.json in the file's directory or any ancestor."""
