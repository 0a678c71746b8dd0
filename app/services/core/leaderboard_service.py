"""
Read-side projections: leaderboard and per-user stats.

Nothing here mutates the store. Ordering is credits descending, then
earliest account first, then collection order.
"""

from app.db.json_store import JsonStore
from app.models.domain.ambassador_domain import LeaderboardEntry, UserStats

DEFAULT_LIMIT = 10
RANK_WINDOW = 100


class LeaderboardService:
    def __init__(self, store: JsonStore):
        self.store = store

    def leaderboard(self, limit: int = DEFAULT_LIMIT) -> list[LeaderboardEntry]:
        """
        Rank ambassadors by credits.

        Ranks are 1-based positions in the truncated list, so users tied on
        credits still get distinct consecutive ranks.
        """
        ambassadors = [u for u in self.store.users if u.role == "ambassador"]
        # sorted() is stable, so collection order is the final tie-break
        ranked = sorted(ambassadors, key=lambda u: (-u.credits, u.created_at))[: max(limit, 0)]

        return [
            LeaderboardEntry(
                rank=index + 1,
                user_id=user.id,
                name=user.name,
                credits=user.credits,
                approved_contacts=self._approved_count(user.id),
            )
            for index, user in enumerate(ranked)
        ]

    def user_stats(self, user_id: str) -> UserStats:
        """
        Contact counts by status, credit balance and rank for one user.

        user_rank is 0 when the user is not within the top RANK_WINDOW
        ambassadors (including admins, who are never ranked).
        """
        stats = UserStats()
        for contact in self.store.contacts:
            if contact.submitted_by != user_id:
                continue
            stats.total_contacts += 1
            if contact.status == "approved":
                stats.approved_contacts += 1
            elif contact.status == "pending":
                stats.pending_contacts += 1
            elif contact.status == "rejected":
                stats.rejected_contacts += 1

        user = self.store.find_user(user_id)
        stats.total_credits = user.credits if user else 0

        board = self.leaderboard(RANK_WINDOW)
        stats.user_rank = next((e.rank for e in board if e.user_id == user_id), 0)
        return stats

    def _approved_count(self, user_id: str) -> int:
        return sum(
            1 for c in self.store.contacts if c.submitted_by == user_id and c.status == "approved"
        )
