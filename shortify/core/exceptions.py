"""Error taxonomy shared by the store, the services and the HTTP layer."""


class ShortifyError(Exception):
    """Base class for all service errors."""


class DuplicateKeyError(ShortifyError):
    """A mapping with the same short code is already stored."""

    def __init__(self, short_code: str):
        super().__init__(f"Short code already exists: {short_code}")
        self.short_code = short_code


class AssignmentExhausted(ShortifyError):
    """No free short code was found within the retry bound."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Failed to generate a unique short code after {attempts} attempts"
        )
        self.attempts = attempts


class NotFoundError(ShortifyError):
    """No mapping exists for the requested short code."""

    def __init__(self, short_code: str):
        super().__init__(f"Short URL not found: {short_code}")
        self.short_code = short_code


class ExpiredError(ShortifyError):
    """The mapping exists but its expiration instant has passed."""

    def __init__(self, short_code: str):
        super().__init__(f"Short URL has expired: {short_code}")
        self.short_code = short_code


class CounterUnavailableError(ShortifyError):
    """The shared id counter could not be incremented."""
