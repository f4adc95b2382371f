"""XP award dispatcher with ledger append and level-up detection.

Every change to a profile's total_xp, current_xp and level goes through
XPService.award_xp (or reconcile_total_xp for repairs).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from tourney.exceptions import ConflictError
from tourney.gamification.level_thresholds import resolve_level
from tourney.gamification.rules import DEFAULT_RULES, GamificationRules
from tourney.kv import KVStore, keys
from tourney.models import UserProfile, XPTransaction, utcnow
from tourney.notifications.service import create_notification

logger = structlog.get_logger()


@dataclass(frozen=True)
class AwardResult:
    transaction: XPTransaction
    profile: UserProfile
    leveled_up: bool


class XPService:
    """Awards XP for user actions.

    The ledger entry is written once per award. The profile update is a
    versioned write retried on conflict, so concurrent awards for the same
    user never drop XP from the denormalized total.
    """

    def __init__(
        self,
        store: KVStore,
        rules: GamificationRules = DEFAULT_RULES,
        max_retries: int = 5,
    ) -> None:
        self.store = store
        self.rules = rules
        self.max_retries = max_retries

    async def _load_profile(self, user_id: str) -> UserProfile | None:
        doc = await self.store.get(keys.user_profile(user_id))
        return UserProfile.model_validate(doc) if doc is not None else None

    async def award_xp(
        self,
        user_id: str,
        action_type: str,
        description: str,
        metadata: dict[str, Any] | None = None,
    ) -> AwardResult | None:
        """Award the rule amount for action_type. Returns None if nothing happened.

        After awarding:
        1. Append an XP transaction to the ledger
        2. Update profile total_xp / current_xp
        3. Recompute level from total_xp
        4. If level changed, emit a single level_up notification
        """
        action = str(action_type)
        amount = self.rules.xp_for(action)
        if amount == 0:
            logger.debug("xp_award_skipped", user_id=user_id, action_type=action, reason="no_rule")
            return None

        profile = await self._load_profile(user_id)
        if profile is None:
            logger.debug("xp_award_skipped", user_id=user_id, action_type=action, reason="no_profile")
            return None

        transaction = XPTransaction(
            user_id=user_id,
            action_type=action,
            xp_amount=amount,
            description=description,
            metadata=metadata or {},
        )
        await self.store.set(keys.xp_transaction(user_id, transaction.id), transaction.to_document())

        attempt = 0
        while True:
            old_level = profile.level
            new_total = profile.total_xp + amount
            new_level = resolve_level(new_total, self.rules.level_thresholds)
            updated = profile.model_copy(update={
                "total_xp": new_total,
                "current_xp": new_total,
                "level": new_level,
                "updated_at": utcnow(),
            })
            try:
                stored = await self.store.set(
                    keys.user_profile(user_id),
                    updated.to_document(),
                    expected_version=profile.version,
                )
                break
            except ConflictError:
                attempt += 1
                logger.info("xp_award_conflict", user_id=user_id, action_type=action, attempt=attempt)
                if attempt > self.max_retries:
                    logger.error(
                        "xp_award_retries_exhausted",
                        user_id=user_id,
                        action_type=action,
                        transaction_id=transaction.id,
                    )
                    raise
                reloaded = await self._load_profile(user_id)
                if reloaded is None:
                    raise ConflictError(f"Profile {user_id} removed during XP award") from None
                profile = reloaded

        profile = UserProfile.model_validate(stored)
        leveled_up = new_level > old_level

        logger.info(
            "xp_awarded",
            user_id=user_id,
            action_type=action,
            amount=amount,
            total_xp=new_total,
            level=new_level,
        )

        if leveled_up:
            await _emit_level_up(self.store, user_id, old_level, new_level)

        return AwardResult(transaction=transaction, profile=profile, leveled_up=leveled_up)

    async def reconcile_total_xp(self, user_id: str) -> UserProfile | None:
        """Raise a profile's XP total to its ledger sum.

        Repairs totals left behind by a crash between the ledger write and the
        profile write. Totals already at or above the ledger sum are untouched.
        """
        profile = await self._load_profile(user_id)
        if profile is None:
            return None

        ledger_total = sum(t.xp_amount for t in await get_xp_history(self.store, user_id))
        if ledger_total <= profile.total_xp:
            return profile

        old_level = profile.level
        new_level = resolve_level(ledger_total, self.rules.level_thresholds)
        updated = profile.model_copy(update={
            "total_xp": ledger_total,
            "current_xp": ledger_total,
            "level": new_level,
            "updated_at": utcnow(),
        })
        stored = await self.store.set(
            keys.user_profile(user_id),
            updated.to_document(),
            expected_version=profile.version,
        )
        logger.warning(
            "xp_total_reconciled",
            user_id=user_id,
            previous_total=profile.total_xp,
            ledger_total=ledger_total,
        )
        if new_level > old_level:
            await _emit_level_up(self.store, user_id, old_level, new_level)
        return UserProfile.model_validate(stored)


async def _emit_level_up(store: KVStore, user_id: str, old_level: int, new_level: int) -> None:
    """Emit the level-up notification."""
    await create_notification(
        store,
        user_id,
        "level_up",
        "Level Up!",
        f"You've reached level {new_level}!",
        {"level": new_level},
    )
    logger.info("level_up", user_id=user_id, old_level=old_level, new_level=new_level)


async def get_xp_history(store: KVStore, user_id: str) -> list[XPTransaction]:
    """User's ledger entries, most recent first."""
    docs = await store.get_by_prefix(keys.xp_transactions(user_id))
    transactions = [XPTransaction.model_validate(d) for d in docs]
    transactions.sort(key=lambda t: t.created_at, reverse=True)
    return transactions
