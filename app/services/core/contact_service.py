"""
Contact lifecycle service.

Owns the contact state machine:

    pending --> approved   (terminal, awards credits to the submitter)
    pending --> rejected   (terminal)

Every decision appends one ApprovalRecord. Approval additionally awards
`credits_per_approval` credits through the CreditLedger when the submitter
still exists; a missing submitter skips the award without failing the
decision. A decision on a contact that has already left `pending` raises
InvalidStateTransitionError and changes nothing.
"""

from app.db.json_store import JsonStore
from app.infrastructure.observability.logging import get_logger
from app.models.domain.ambassador_domain import (
    ApprovalRecord,
    Contact,
    ContactStatus,
    ContactSubmission,
    utc_now,
)
from app.services.core.credit_ledger import CreditLedger
from app.services.core.errors import (
    InvalidStateTransitionError,
    InvalidSubmissionError,
    NotFoundError,
    PendingLimitExceededError,
)

logger = get_logger(__name__)

DEFAULT_CREDITS_PER_APPROVAL = 1
DEFAULT_MAX_PENDING_CONTACTS = 10

_DECISIONS = ("approved", "rejected")
_STATUSES = ("pending", "approved", "rejected")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ContactLifecycleService:
    def __init__(self, store: JsonStore, ledger: CreditLedger | None = None):
        self.store = store
        self.ledger = ledger or CreditLedger(store)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit_contact(self, submitter_id: str, submission: ContactSubmission) -> Contact:
        """
        Create a pending contact owned by the submitter.

        Raises:
            NotFoundError: submitter is not a known user
            InvalidSubmissionError: name/company blank or relevance score out of range
            PendingLimitExceededError: submitter is at the pending cap
        """
        name = _clean(submission.name)
        company = _clean(submission.company)
        if not name or not company:
            raise InvalidSubmissionError("Contact name and company are required")
        if not 0 <= submission.relevance_score <= 10:
            raise InvalidSubmissionError(
                f"Relevance score must be between 0 and 10, got {submission.relevance_score}"
            )

        if not self.store.find_user(submitter_id):
            raise NotFoundError("user", submitter_id)

        limit = self.store.get_int_setting(
            "max_pending_contacts_per_user", DEFAULT_MAX_PENDING_CONTACTS
        )
        if limit > 0:
            pending = sum(
                1
                for c in self.store.contacts
                if c.submitted_by == submitter_id and c.status == "pending"
            )
            if pending >= limit:
                logger.warning(
                    "Pending contact cap reached", user_id=submitter_id, pending=pending, limit=limit
                )
                raise PendingLimitExceededError(submitter_id, limit)

        now = utc_now()
        contact = Contact(
            id=self.store.generate_id(),
            name=name,
            email=_clean(submission.email),
            phone=_clean(submission.phone),
            company=company,
            position=_clean(submission.position),
            linkedin_url=_clean(submission.linkedin_url),
            source=submission.source,
            relevance_score=submission.relevance_score,
            submitted_by=submitter_id,
            status="pending",
            admin_notes=None,
            created_at=now,
            updated_at=now,
        )
        self.store.contacts.append(contact)
        self.store.save()

        logger.info(
            "Contact submitted",
            contact_id=contact.id,
            user_id=submitter_id,
            source=contact.source,
        )
        return contact

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def decide(
        self,
        contact_id: str,
        new_status: str,
        admin_id: str,
        notes: str | None = None,
    ) -> Contact:
        """
        Move a pending contact to approved or rejected and apply side effects.

        All changes are written with a single store save.

        Raises:
            InvalidSubmissionError: new_status is not approved/rejected
            NotFoundError: unknown contact
            InvalidStateTransitionError: contact is no longer pending
        """
        if new_status not in _DECISIONS:
            raise InvalidSubmissionError(f"Status must be one of {_DECISIONS}, got {new_status}")

        contact = self.store.find_contact(contact_id)
        if not contact:
            raise NotFoundError("contact", contact_id)

        if contact.status != "pending":
            raise InvalidStateTransitionError(contact_id, contact.status, new_status)

        now = utc_now()
        contact.status = new_status
        contact.admin_notes = notes
        contact.updated_at = now

        self.store.approvals.append(
            ApprovalRecord(
                id=self.store.generate_id(),
                contact_id=contact_id,
                admin_id=admin_id,
                action=new_status,
                notes=notes,
                created_at=now,
            )
        )

        if new_status == "approved":
            self._award_submitter(contact)

        self.store.save()

        logger.info(
            "Contact decided",
            contact_id=contact_id,
            status=new_status,
            admin_id=admin_id,
            submitted_by=contact.submitted_by,
        )
        return contact

    def _award_submitter(self, contact: Contact) -> None:
        if not self.store.find_user(contact.submitted_by):
            logger.warning(
                "Submitter not found, skipping credit award",
                contact_id=contact.id,
                submitted_by=contact.submitted_by,
            )
            return

        amount = self.store.get_int_setting("credits_per_approval", DEFAULT_CREDITS_PER_APPROVAL)
        if amount <= 0:
            logger.warning("credits_per_approval is not positive, no award", amount=amount)
            return
        self.ledger.award(
            contact.submitted_by,
            contact.id,
            amount,
            f"Contact approved: {contact.company} - {contact.name}",
            persist=False,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_contact(self, contact_id: str) -> Contact:
        contact = self.store.find_contact(contact_id)
        if not contact:
            raise NotFoundError("contact", contact_id)
        return contact

    def list_by_submitter(self, user_id: str) -> list[Contact]:
        return [c for c in self.store.contacts if c.submitted_by == user_id]

    def list_by_status(self, status: ContactStatus) -> list[Contact]:
        if status not in _STATUSES:
            raise InvalidSubmissionError(f"Unknown contact status: {status}")
        return [c for c in self.store.contacts if c.status == status]

    def list_approvals(self, contact_id: str) -> list[ApprovalRecord]:
        return [a for a in self.store.approvals if a.contact_id == contact_id]
