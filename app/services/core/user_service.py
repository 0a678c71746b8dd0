"""
User service for the flat-file store.
Handles registration on first login, lookups and profile updates.

Service layer returns domain models only - API layer handles HTTP concerns.
"""

from app.db.json_store import JsonStore
from app.infrastructure.observability.logging import get_logger
from app.models.domain.ambassador_domain import TeamRole, User, UserRole, utc_now
from app.services.core.errors import InvalidSubmissionError, NotFoundError

logger = get_logger(__name__)

_VALID_ROLES = ("ambassador", "admin")
_VALID_TEAM_ROLES = ("troopers", "cold_outreach", "outreach")


class UserService:
    """Registration and profile operations over the user collection."""

    def __init__(self, store: JsonStore):
        self.store = store

    def register_user(
        self,
        email: str,
        name: str,
        role: UserRole = "ambassador",
        team_role: TeamRole | None = None,
        auth_uid: str | None = None,
    ) -> User:
        """
        Return the user for this email, creating it on first login.

        Args:
            email: Verified email from the identity provider
            name: Display name
            role: "ambassador" (default) or "admin"; "admin" also promotes an
                existing ambassador
            team_role: Optional team assignment
            auth_uid: Identity provider subject id

        Returns:
            Existing or newly created User
        """
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email:
            raise InvalidSubmissionError("Email is required")

        existing = self.find_user_by_email(email)
        if existing:
            changed = False
            if auth_uid and not existing.auth_uid:
                existing.auth_uid = auth_uid
                changed = True
            # Promotion only; an existing admin is never demoted here
            if role == "admin" and existing.role != "admin":
                existing.role = "admin"
                changed = True
                logger.info("User promoted to admin", user_id=existing.id)
            if changed:
                existing.updated_at = utc_now()
                self.store.save()
            return existing

        if not name:
            raise InvalidSubmissionError("Name is required")
        if role not in _VALID_ROLES:
            raise InvalidSubmissionError(f"Unknown role: {role}")
        if team_role is not None and team_role not in _VALID_TEAM_ROLES:
            raise InvalidSubmissionError(f"Unknown team role: {team_role}")

        now = utc_now()
        user = User(
            id=self.store.generate_id(),
            email=email,
            name=name,
            role=role,
            credits=0,
            team_role=team_role,
            auth_uid=auth_uid,
            created_at=now,
            updated_at=now,
        )
        self.store.users.append(user)
        self.store.save()

        logger.info("User registered", user_id=user.id, role=role)
        return user

    def get_user(self, user_id: str) -> User:
        user = self.store.find_user(user_id)
        if not user:
            raise NotFoundError("user", user_id)
        return user

    def find_user_by_email(self, email: str) -> User | None:
        email = (email or "").strip().lower()
        return next((u for u in self.store.users if u.email == email), None)

    def find_user_by_auth_uid(self, auth_uid: str) -> User | None:
        if not auth_uid:
            return None
        return next((u for u in self.store.users if u.auth_uid == auth_uid), None)

    def update_user(
        self,
        user_id: str,
        *,
        name: str | None = None,
        team_role: TeamRole | None = None,
        clear_team_role: bool = False,
    ) -> User:
        """
        Update editable profile fields. Credits and role are not editable here.
        """
        user = self.get_user(user_id)

        if name is not None:
            name = name.strip()
            if not name:
                raise InvalidSubmissionError("Name cannot be blank")
            user.name = name

        if clear_team_role:
            user.team_role = None
        elif team_role is not None:
            if team_role not in _VALID_TEAM_ROLES:
                raise InvalidSubmissionError(f"Unknown team role: {team_role}")
            user.team_role = team_role

        user.updated_at = utc_now()
        self.store.save()

        logger.info("User updated", user_id=user_id)
        return user

    def list_users(
        self, role: UserRole | None = None, team_role: TeamRole | None = None
    ) -> list[User]:
        return [
            u
            for u in self.store.users
            if (role is None or u.role == role) and (team_role is None or u.team_role == team_role)
        ]
