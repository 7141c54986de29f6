"""Rate resolution for talent and crew.

Every lookup bottoms out at a required field, so resolution never fails:
a member with no usable rate simply resolves to zero.
"""

from __future__ import annotations

from decimal import Decimal

from prodflow.models import (
    ZERO,
    CrewMember,
    LocationType,
    Member,
    ShootType,
    TalentMember,
)

# Other has no card field and goes straight to the custom rate.
TALENT_RATE_FIELDS: dict[ShootType, str] = {
    ShootType.STUDIO_REELS: "studio_reels",
    ShootType.OUTDOOR_REELS: "outdoor_reels",
    ShootType.STORE_REELS: "store_reels",
    ShootType.LIVE: "live",
    ShootType.ADVT: "advertisement",
    ShootType.YOUTUBE_INFLUENCER: "youtube_influencer",
    ShootType.YOUTUBE_VIDEO: "youtube_video",
    ShootType.YOUTUBE_SHORTS: "youtube_shorts",
}


def resolve_talent_rate(member: TalentMember, shoot_type: ShootType) -> Decimal:
    """Rate-card entry for the engagement type, else the custom rate."""
    charges = member.charges
    field_name = TALENT_RATE_FIELDS.get(shoot_type)
    rate = getattr(charges, field_name) if field_name else ZERO
    if not rate:
        rate = charges.custom or ZERO
    return rate


def resolve_crew_rate(
    member: CrewMember,
    shoot_type: ShootType,
    location: LocationType,
) -> Decimal:
    """Live rate for live shoots, then the location rate, then the base rate."""
    charges = member.charges
    if charges is not None:
        if shoot_type == ShootType.LIVE and charges.live:
            return charges.live
        if location == LocationType.OUTDOOR and charges.outdoor:
            return charges.outdoor
        if location == LocationType.STUDIO and charges.indoor:
            return charges.indoor
    return member.rate or ZERO


def resolve_rate(member: Member, shoot_type: ShootType, location: LocationType) -> Decimal:
    if isinstance(member, TalentMember):
        return resolve_talent_rate(member, shoot_type)
    return resolve_crew_rate(member, shoot_type, location)
