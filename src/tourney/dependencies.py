"""Shared FastAPI dependencies."""

from fastapi import Depends

from tourney.config import get_settings
from tourney.gamification.rules import DEFAULT_RULES, GamificationRules
from tourney.gamification.xp_service import XPService
from tourney.kv import KVStore, get_store


def get_rules() -> GamificationRules:
    """Rule tables used by the XP service. Override in tests to swap tables."""
    return DEFAULT_RULES


def get_xp_service(
    store: KVStore = Depends(get_store),
    rules: GamificationRules = Depends(get_rules),
) -> XPService:
    """Build the XP service over the request's store."""
    return XPService(store, rules, max_retries=get_settings().xp_award_max_retries)
