class MercuryError(Exception):
    """Base class for all framework errors."""


class ConfigurationError(MercuryError):
    """Configuration could not be loaded or a value could not be parsed."""


class SessionContractError(MercuryError):
    """A browser session was used outside its lifecycle contract."""


class FixtureError(MercuryError):
    """A test-data fixture is missing, malformed or lacks a requested key."""


class NoSuchElementError(MercuryError):
    def __init__(self, locator, message: str = None):
        self.locator = locator
        super().__init__(message or f"No element found for {locator}")


class StaleElementError(MercuryError):
    def __init__(self, locator=None, message: str = None):
        self.locator = locator
        super().__init__(message or f"Element is no longer attached to the page: {locator}")


class WaitTimeoutError(MercuryError, TimeoutError):
    """Raised when a wait condition is not satisfied within its timeout.

    Args:
        condition: Human readable description of the condition
        locator: Locator the condition was evaluated against, if any
        timeout: Timeout in seconds
    """

    def __init__(self, condition: str, locator=None, timeout: float = None, message: str = ""):
        self.condition = condition
        self.locator = locator
        self.timeout = timeout
        text = f"Timed out after {timeout}s waiting for {condition}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class ElementActionError(MercuryError):
    """An element interaction (click, type, select...) failed."""

    def __init__(self, message: str, locator=None):
        self.locator = locator
        super().__init__(message)
