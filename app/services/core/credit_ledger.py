"""
Credit ledger.

Keeps User.credits and the credits_history log consistent: every balance
increase is paired with exactly one history entry. Not idempotent - callers
must invoke award() at most once per earning event.
"""

from app.db.json_store import JsonStore
from app.infrastructure.observability.logging import get_logger
from app.models.domain.ambassador_domain import CreditHistoryEntry, utc_now
from app.services.core.errors import InvalidSubmissionError, NotFoundError

logger = get_logger(__name__)


class CreditLedger:
    def __init__(self, store: JsonStore):
        self.store = store

    def award(
        self,
        user_id: str,
        contact_id: str | None,
        amount: int,
        reason: str,
        *,
        persist: bool = True,
    ) -> CreditHistoryEntry:
        """
        Increment a user's balance and append the matching history entry.

        Args:
            user_id: Recipient
            contact_id: Contact that triggered the award, if any
            amount: Positive number of credits
            reason: Free-text reason shown in the history
            persist: Write the store afterwards; callers batching a larger
                unit of work pass False and save themselves

        Raises:
            InvalidSubmissionError: amount is not positive
            NotFoundError: unknown user
        """
        if amount <= 0:
            raise InvalidSubmissionError(f"Credit amount must be positive, got {amount}")

        user = self.store.find_user(user_id)
        if not user:
            raise NotFoundError("user", user_id)

        now = utc_now()
        user.credits += amount
        user.updated_at = now

        entry = CreditHistoryEntry(
            id=self.store.generate_id(),
            user_id=user_id,
            contact_id=contact_id,
            credits_earned=amount,
            reason=reason,
            created_at=now,
        )
        self.store.credits_history.append(entry)

        if persist:
            self.store.save()

        logger.info(
            "Credits awarded",
            user_id=user_id,
            contact_id=contact_id,
            amount=amount,
            balance=user.credits,
        )
        return entry

    def history(self, user_id: str) -> list[CreditHistoryEntry]:
        return [e for e in self.store.credits_history if e.user_id == user_id]

    def balance_from_history(self, user_id: str) -> int:
        return sum(e.credits_earned for e in self.history(user_id))
