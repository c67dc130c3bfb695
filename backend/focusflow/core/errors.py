# backend/focusflow/core/errors.py
"""
Error taxonomy of the focus coordinator.

Only StoreConnectionError / AuthError can come out of the persistence layer;
after startup they are turned into toasts at the call site and never reach the
session state machine.
"""


class FocusError(Exception):
    """Base class for every error raised by focusflow."""


class StoreConnectionError(FocusError, ConnectionError):
    """The remote store is unreachable or a round trip failed."""


class AuthError(FocusError):
    """No valid authenticated session (bad/expired token, unauthorized)."""


class InvalidUploadError(FocusError, ValueError):
    """An uploaded file is not audio. Rejected locally, no state change."""


class InvalidSettingError(FocusError, ValueError):
    """Unknown setting key or a value outside its allowed range."""


class PlaybackError(FocusError):
    """An ambient track could not be loaded or played."""
