# -*- coding: utf-8 -*-
"""Quality variant selection for Soap4me addon"""
from . import constants


def quality_rank(quality):
    """Rank of a quality tag; unknown tags rank 0."""
    return constants.QUALITY_RANKS.get((quality or '').strip().lower(), 0)


def fallback_order(slot):
    """
    Qualities of a slot in fallback order: highest known rank first,
    ties and unknown tags broken by tag name.
    """
    return sorted(slot, key=lambda quality: (-quality_rank(quality), quality))


def resolve(slot, preferred_quality):
    """
    Pick one variant from a quality slot.

    Args:
        slot: Non-empty dict of quality -> EpisodeVariant
        preferred_quality: Quality tag to prefer

    Returns:
        The preferred variant if present, else the first variant in
        fallback_order(). The same slot always yields the same variant.
    """
    variant = slot.get(preferred_quality)
    if variant is not None:
        return variant

    wanted = (preferred_quality or '').lower()
    for quality, variant in slot.items():
        if quality.lower() == wanted:
            return variant

    return slot[fallback_order(slot)[0]]
