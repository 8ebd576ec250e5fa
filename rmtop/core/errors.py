# rmtop/core/errors.py
from __future__ import annotations


class RmTopError(Exception):
    """
    Base class for all expected operational errors in rmtop.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, logs, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no network access yet)
# ---------------------------------------------------------------------------

class ConfigError(RmTopError):
    """
    Monitor configuration is invalid.

    Examples:
      - interval / timeout out of bounds
      - unknown transport driver
      - command table YAML missing or malformed
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Connection lifecycle errors
# ---------------------------------------------------------------------------

class ServerConnectError(RmTopError):
    """
    Connection to the server could not be established.

    Examples:
      - connection refused
      - DNS resolution failure
      - connect timeout
    """
    code = "server_connect_error"


class ServerDisconnectedError(RmTopError):
    """
    Server was connected but the stream ended or failed.

    Examples:
      - server closed the connection
      - OS-level I/O error during read/write
    """
    code = "server_disconnected"


# ---------------------------------------------------------------------------
# Protocol errors
# ---------------------------------------------------------------------------

class ServerReplyError(RmTopError):
    """
    Server answered with an error line instead of monitor output.

    Examples:
      - -ERR unknown command 'MY_MONITOR'
      - -NOAUTH Authentication required.
      - -WRONGPASS invalid username-password pair
    """
    code = "server_reply_error"
