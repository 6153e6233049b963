"""JSON shapes for listing views and claims."""

from surplus_match.domain.listings import Claim
from surplus_match.services.queries import DashboardSummary, ListingView


def serialize_view(view: ListingView) -> dict[str, object]:
    listing = view.listing
    return {
        "id": str(listing.id),
        "owner_id": str(listing.owner_id),
        "item_name": listing.item_name,
        "quantity": listing.quantity,
        "description": listing.description,
        "image_ref": listing.image_ref,
        "expires_at": listing.expires_at.isoformat(),
        "created_at": listing.created_at.isoformat(),
        "status": view.status.value,
        "urgency": view.urgency.value,
        "time_left": view.time_left,
        "claim": serialize_claim(view.claim) if view.claim else None,
    }


def serialize_claim(claim: Claim) -> dict[str, object]:
    return {
        "id": str(claim.id),
        "listing_id": str(claim.listing_id),
        "claimant_id": str(claim.claimant_id),
        "claimed_at": claim.claimed_at.isoformat(),
    }


def serialize_summary(summary: DashboardSummary) -> dict[str, int]:
    return {
        "total": summary.total,
        "available": summary.available,
        "claimed": summary.claimed,
        "expired": summary.expired,
    }
