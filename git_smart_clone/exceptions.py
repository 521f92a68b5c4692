"""Custom exception hierarchy for git-smart-clone."""


class GitSmartCloneError(Exception):
    """Base error for all custom exceptions."""


class ConfigError(GitSmartCloneError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, var: str, value: str, expected: str):
        super().__init__(f"Environment variable {var}={value!r} is invalid: expected {expected}.")
        self.var = var
        self.value = value


class ValidationError(GitSmartCloneError):
    """Raised when user input is invalid."""


class UserAbort(GitSmartCloneError):
    """Raised when the user cancels an interactive flow."""
