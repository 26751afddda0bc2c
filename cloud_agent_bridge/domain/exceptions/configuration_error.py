"""
ConfigurationError - Raised at startup when required settings are missing.
Never raised per request.
"""


class ConfigurationError(Exception):
    """Exception raised for missing or invalid environment variables."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
