"""Error types shared across the bot.

Only ConfigError and transport failures at startup stop the process.
Everything else is caught by the dispatcher and rendered back to the chat.
"""


class VpsBotError(Exception):
    """Base class for all bot errors."""


class ConfigError(VpsBotError):
    pass


class TransportError(VpsBotError):
    """A message could not be sent, edited or acknowledged."""


class AuthorizationError(VpsBotError):
    def __init__(self, message="Unauthorized"):
        super().__init__(message)


class UnknownCommandError(VpsBotError):
    pass


class TelemetryError(VpsBotError):
    pass


class ExecutionError(VpsBotError):
    """An external command was refused, failed, or timed out."""


class CommandNotAllowedError(ExecutionError):
    def __init__(self, program):
        super().__init__(f"command not allowed: {program}")
        self.program = program


class PrivilegeError(ExecutionError):
    pass


class CommandTimeoutError(ExecutionError):
    def __init__(self, argv, timeout):
        super().__init__(f"{argv[0]} timed out after {timeout:g}s")
        self.argv = tuple(argv)
        self.timeout = timeout


class CommandFailedError(ExecutionError):
    def __init__(self, argv, returncode):
        super().__init__(f"{' '.join(argv)} exited with status {returncode}")
        self.argv = tuple(argv)
        self.returncode = returncode
