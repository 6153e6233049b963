"""Error taxonomy for listing and claim operations."""


class ListingError(Exception):
    """Base class for failures surfaced by the listing core."""

    code = "listing_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(ListingError):
    """Input was rejected; the caller can fix it and retry."""

    code = "validation_error"


class NotFoundError(ListingError):
    """A referenced listing does not exist."""

    code = "not_found"


class AlreadyClaimedError(ListingError):
    """Another claimant already holds the listing."""

    code = "already_claimed"


class ExpiredError(ListingError):
    """The listing's window closed before the claim."""

    code = "expired"


class UnauthorizedError(ListingError):
    """The actor's role does not permit the operation."""

    code = "unauthorized"


class StoreTimeoutError(ListingError):
    """The backing store did not answer in time."""

    code = "timeout"
