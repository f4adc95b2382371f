"""User profile business logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from tourney.config import get_settings
from tourney.exceptions import ConflictError, NotFoundError, ValidationError
from tourney.gamification.completion import has_bio, score_profile_completion
from tourney.gamification.rules import ActionType
from tourney.kv import KVStore, keys
from tourney.models import SocialConnection, UserProfile, utcnow

if TYPE_CHECKING:
    from tourney.auth.identity import IdentityProvider
    from tourney.gamification.xp_service import XPService

logger = structlog.get_logger()

PROFILE_UPDATE_FIELDS = ("display_name", "bio", "interested_games", "contact_info", "avatar_url")


async def get_profile(store: KVStore, user_id: str) -> UserProfile:
    """
    Load a profile.

    Raises:
        NotFoundError: If no profile exists for user_id.
    """
    doc = await store.get(keys.user_profile(user_id))
    if doc is None:
        raise NotFoundError("User not found")
    return UserProfile.model_validate(doc)


async def save_profile(store: KVStore, profile: UserProfile) -> UserProfile:
    """Versioned write of a full profile document."""
    stored = await store.set(
        keys.user_profile(profile.id),
        profile.to_document(),
        expected_version=profile.version,
    )
    return UserProfile.model_validate(stored)


async def signup(
    store: KVStore,
    identity: IdentityProvider,
    xp: XPService,
    email: str,
    password: str,
    role: str,
    display_name: str,
) -> UserProfile:
    """
    Create an identity account and its profile, then award account_created.

    Raises:
        ValidationError: If role is not open for self-signup.
        IdentityError: If the identity provider rejects the account.
    """
    allowed = get_settings().signup_roles
    if role not in allowed:
        msg = f"Invalid role. Must be one of: {', '.join(allowed)}"
        raise ValidationError(msg)

    user_id = await identity.create_account(
        email, password, {"role": role, "display_name": display_name},
    )

    profile = UserProfile(
        id=user_id,
        role=role,
        display_name=display_name,
        email=email,
    )
    await store.set(keys.user_profile(user_id), profile.to_document())
    logger.info("user_signed_up", user_id=user_id, role=role)

    result = await xp.award_xp(user_id, ActionType.ACCOUNT_CREATED, "Account created successfully")
    return result.profile if result else profile


async def count_social_connections(store: KVStore, user_id: str) -> int:
    return len(await store.get_by_prefix(keys.social_connections(user_id)))


async def refresh_profile_completion(store: KVStore, profile: UserProfile) -> UserProfile:
    """Recompute and cache profile_completion_percentage.

    The cached value is only written when it changed. A concurrent writer
    winning the versioned write leaves the stale cache in place; the freshly
    computed value is still returned.
    """
    completion = score_profile_completion(profile, await count_social_connections(store, profile.id))
    if completion == profile.profile_completion_percentage:
        return profile

    updated = profile.model_copy(update={"profile_completion_percentage": completion})
    try:
        return await save_profile(store, updated)
    except ConflictError:
        logger.debug("profile_completion_cache_skipped", user_id=profile.id)
        return updated


def _has_any_bio(profile: UserProfile) -> bool:
    return bool(profile.bio)


def _has_games(profile: UserProfile) -> bool:
    return bool(profile.interested_games)


def _has_contact(profile: UserProfile) -> bool:
    return bool(profile.contact_info)


def _has_avatar(profile: UserProfile) -> bool:
    return bool(profile.avatar_url)


# (was_set, now_complete, action, description): was_set is checked on the stored
# profile, now_complete on the updated one. A short bio counts as set but not complete.
_COMPLETION_AWARDS = (
    (_has_any_bio, has_bio, ActionType.PROFILE_BIO, "Added bio to profile"),
    (_has_games, _has_games, ActionType.PROFILE_GAMES, "Added interested games"),
    (_has_contact, _has_contact, ActionType.PROFILE_CONTACT, "Added contact information"),
    (_has_avatar, _has_avatar, ActionType.PROFILE_AVATAR, "Added profile avatar"),
)


async def update_profile(
    store: KVStore,
    xp: XPService,
    profile: UserProfile,
    updates: dict[str, Any],
) -> UserProfile:
    """
    Apply allowed field updates, then award XP for newly completed fields.

    A field earns XP only on the update where it goes from empty to filled.

    Raises:
        ConflictError: If the profile changed since it was read.
    """
    before = {action: was_set(profile) for was_set, _, action, _ in _COMPLETION_AWARDS}

    changes = {f: updates[f] for f in PROFILE_UPDATE_FIELDS if f in updates}
    if changes.get("display_name", "") is None:
        del changes["display_name"]
    changes["updated_at"] = utcnow()
    updated = UserProfile.model_validate({**profile.to_document(), **changes})
    updated = await save_profile(store, updated)

    for _, now_complete, action, description in _COMPLETION_AWARDS:
        if not before[action] and now_complete(updated):
            result = await xp.award_xp(updated.id, action, description)
            if result is not None:
                updated = result.profile

    return updated


def public_profile(profile: UserProfile) -> dict:
    """Fields visible to anyone."""
    return {
        "id": profile.id,
        "display_name": profile.display_name,
        "avatar_url": profile.avatar_url,
        "level": profile.level,
        "role": profile.role,
        "bio": profile.bio,
        "interested_games": profile.interested_games,
        "created_at": profile.created_at,
    }


async def list_social_connections(store: KVStore, user_id: str) -> list[SocialConnection]:
    docs = await store.get_by_prefix(keys.social_connections(user_id))
    connections = [SocialConnection.model_validate(d) for d in docs]
    connections.sort(key=lambda c: c.connected_at)
    return connections


async def add_social_connection(
    store: KVStore,
    xp: XPService,
    user_id: str,
    provider: str,
    provider_id: str,
    provider_username: str,
) -> SocialConnection:
    """
    Link an external account and award social_connect.

    Raises:
        ValidationError: If the provider is already linked.
    """
    existing = await list_social_connections(store, user_id)
    if any(c.provider == provider for c in existing):
        msg = f"{provider} account already connected"
        raise ValidationError(msg)

    connection = SocialConnection(
        user_id=user_id,
        provider=provider,
        provider_id=provider_id,
        provider_username=provider_username,
    )
    await store.set(keys.social_connection(user_id, connection.id), connection.to_document())
    await xp.award_xp(
        user_id,
        ActionType.SOCIAL_CONNECT,
        f"Connected {provider} account",
        {"provider": provider, "connection_id": connection.id},
    )
    return connection


async def list_users(store: KVStore) -> list[UserProfile]:
    docs = await store.get_by_prefix(keys.USER_PROFILE_PREFIX)
    profiles = [UserProfile.model_validate(d) for d in docs]
    profiles.sort(key=lambda p: p.created_at)
    return profiles


async def set_banned(store: KVStore, user_id: str, banned: bool) -> UserProfile:
    """Ban or unban a user. Raises NotFoundError if the user is unknown."""
    profile = await get_profile(store, user_id)
    updated = profile.model_copy(update={"is_banned": banned, "updated_at": utcnow()})
    updated = await save_profile(store, updated)
    logger.info("user_ban_updated", user_id=user_id, banned=banned)
    return updated
