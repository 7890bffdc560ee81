from typing import Optional


class FrontendException(Exception):
    """Base class for all frontend exceptions."""

    def __init__(self, message: str, log_message: Optional[str] = None):
        super().__init__(message)
        self.log_message = log_message  # In case devs want to include extra log info.


class InvalidSettingError(FrontendException):
    """Display setting name or value is invalid."""

    pass


class SettingsFileError(FrontendException):
    """Settings file could not be read or has the wrong shape."""

    pass
