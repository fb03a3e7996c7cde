"""Custom exceptions shared across layers.

NOTE: none of these derive from ValueError, so raising them inside a pydantic validator propagates them as they are
(instead of being wrapped into a pydantic ValidationError).
"""


class TicTacToeError(Exception):
    """Top-level exception for everything raised by this package."""


class ConfigError(TicTacToeError):
    """Invalid or missing configuration value."""


# --- chain layer ---
class ChainQueryError(TicTacToeError):
    """Upstream read-only call failed or returned a shape that cannot be parsed."""


class DecodeError(TicTacToeError):
    """A tagged value is present but does not match the expected schema."""


# --- intent layer ---
class InvalidIntentError(TicTacToeError):
    """Caller-supplied intent failed local validation (before any network call)."""


class InvalidMoveError(InvalidIntentError):
    pass


class InvalidBetError(InvalidIntentError):
    pass


# --- session layer ---
class SessionDecodeError(TicTacToeError):
    """Persisted session blob is malformed."""


class NotConnectedError(TicTacToeError):
    """Action requires a connected wallet session."""
