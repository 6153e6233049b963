"""Request payloads for the listings API."""

from pydantic import AwareDatetime, BaseModel, Field, model_validator

DEFAULT_EXPIRY_HOURS = 24
MAX_EXPIRY_HOURS = 24 * 365


class CreateListingRequest(BaseModel):
    """Body for creating a listing.

    Either ``expires_at`` or ``expires_in_hours`` may be given; with neither
    the listing expires ``DEFAULT_EXPIRY_HOURS`` after creation.
    """

    item_name: str
    quantity: str
    description: str | None = None
    image_ref: str | None = None
    expires_at: AwareDatetime | None = None
    expires_in_hours: float | None = Field(
        default=None, gt=0, le=MAX_EXPIRY_HOURS, allow_inf_nan=False
    )

    @model_validator(mode="after")
    def _single_expiry(self) -> "CreateListingRequest":
        if self.expires_at is not None and self.expires_in_hours is not None:
            raise ValueError("Provide expires_at or expires_in_hours, not both")
        return self
