"""Actor identity supplied by the auth collaborator."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class Role(StrEnum):
    """Role of an authenticated actor."""

    RESTAURANT = "restaurant"
    FARM = "farm"


@dataclass(frozen=True)
class Actor:
    """Pre-verified caller identity."""

    id: UUID
    role: Role
