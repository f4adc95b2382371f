"""Profile completion scoring."""

from __future__ import annotations

from tourney.models import UserProfile

AVATAR_WEIGHT = 20
BIO_WEIGHT = 15
GAMES_WEIGHT = 15
CONTACT_WEIGHT = 25
SOCIAL_WEIGHT = 25

BIO_MIN_LENGTH = 10  # bio must be strictly longer than this to count


def has_bio(profile: UserProfile) -> bool:
    return bool(profile.bio) and len(profile.bio) > BIO_MIN_LENGTH


def score_profile_completion(profile: UserProfile, social_connection_count: int) -> int:
    """Weighted completion percentage in [0, 100].

    The social connection count is looked up by the caller so this stays pure.
    """
    score = 0
    if profile.avatar_url:
        score += AVATAR_WEIGHT
    if has_bio(profile):
        score += BIO_WEIGHT
    if profile.interested_games:
        score += GAMES_WEIGHT
    if profile.contact_info:
        score += CONTACT_WEIGHT
    if social_connection_count > 0:
        score += SOCIAL_WEIGHT
    return min(score, 100)
