"""
Tests for the contact state machine and its credit side effects.
"""

from collections import Counter

import pytest

from app.db.json_store import JsonStore
from app.services.core.contact_service import ContactLifecycleService
from app.services.core.errors import (
    InvalidStateTransitionError,
    InvalidSubmissionError,
    NotFoundError,
    PendingLimitExceededError,
)


@pytest.fixture
def service(store):
    return ContactLifecycleService(store)


def test_submit_creates_pending_contact(service, add_user, submission, store_path):
    add_user("u1")

    contact = service.submit_contact("u1", submission())

    assert contact.status == "pending"
    assert contact.admin_notes is None
    assert contact.submitted_by == "u1"
    assert contact.name == "Sarah Johnson"
    assert contact.company == "TechCorp"
    assert contact.created_at == contact.updated_at
    assert JsonStore(store_path, {}).open().contacts == [contact]


def test_submit_strips_and_normalizes_optional_fields(service, add_user, submission):
    add_user("u1")

    contact = service.submit_contact(
        "u1",
        submission(name="  Sarah Johnson ", email="  ", position="HR Manager", source="apollo"),
    )

    assert contact.name == "Sarah Johnson"
    assert contact.email is None
    assert contact.position == "HR Manager"
    assert contact.source == "apollo"


@pytest.mark.parametrize("name,company", [("", "TechCorp"), ("Sarah", "   ")])
def test_submit_requires_name_and_company(service, add_user, submission, name, company):
    add_user("u1")

    with pytest.raises(InvalidSubmissionError):
        service.submit_contact("u1", submission(name=name, company=company))


def test_submit_rejects_out_of_range_score(service, add_user, submission):
    add_user("u1")

    with pytest.raises(InvalidSubmissionError):
        service.submit_contact("u1", submission(relevance_score=11))


def test_submit_unknown_submitter(service, submission):
    with pytest.raises(NotFoundError):
        service.submit_contact("ghost", submission())


def test_pending_cap_is_enforced(service, store, add_user, submission):
    add_user("u1")
    store.set_setting("max_pending_contacts_per_user", "2")

    first = service.submit_contact("u1", submission(name="A"))
    service.submit_contact("u1", submission(name="B"))
    with pytest.raises(PendingLimitExceededError):
        service.submit_contact("u1", submission(name="C"))

    # Deciding one frees a slot
    service.decide(first.id, "rejected", "a1")
    service.submit_contact("u1", submission(name="C"))
    assert len(service.list_by_status("pending")) == 2


def test_pending_cap_disabled_when_zero(service, store, add_user, submission):
    add_user("u1")
    store.set_setting("max_pending_contacts_per_user", "0")

    for i in range(15):
        service.submit_contact("u1", submission(name=f"Contact {i}"))

    assert len(service.list_by_submitter("u1")) == 15


def test_approve_awards_credit_and_records_decision(service, store, add_user, submission):
    user = add_user("u1")
    contact = service.submit_contact("u1", submission())

    result = service.decide(contact.id, "approved", "a1", "looks good")

    assert result.status == "approved"
    assert result.admin_notes == "looks good"
    assert result.updated_at >= result.created_at
    assert user.credits == 1

    approvals = service.list_approvals(contact.id)
    assert len(approvals) == 1
    assert approvals[0].action == "approved"
    assert approvals[0].admin_id == "a1"
    assert approvals[0].notes == "looks good"

    assert len(store.credits_history) == 1
    entry = store.credits_history[0]
    assert entry.user_id == "u1"
    assert entry.contact_id == contact.id
    assert entry.credits_earned == 1
    assert entry.reason == "Contact approved: TechCorp - Sarah Johnson"


def test_reject_creates_no_credit(service, store, add_user, submission):
    user = add_user("u1")
    contact = service.submit_contact("u1", submission())

    result = service.decide(contact.id, "rejected", "a1")

    assert result.status == "rejected"
    assert result.admin_notes is None
    assert user.credits == 0
    assert store.credits_history == []
    assert [a.action for a in service.list_approvals(contact.id)] == ["rejected"]


def test_decide_unknown_contact(service):
    with pytest.raises(NotFoundError):
        service.decide("missing", "approved", "a1")


def test_decide_rejects_non_terminal_status(service, add_user, submission):
    add_user("u1")
    contact = service.submit_contact("u1", submission())

    with pytest.raises(InvalidSubmissionError):
        service.decide(contact.id, "pending", "a1")


def test_second_decision_is_rejected_without_double_award(service, store, add_user, submission):
    user = add_user("u1")
    contact = service.submit_contact("u1", submission())
    service.decide(contact.id, "approved", "a1")

    with pytest.raises(InvalidStateTransitionError):
        service.decide(contact.id, "approved", "a1")
    with pytest.raises(InvalidStateTransitionError):
        service.decide(contact.id, "rejected", "a1")

    assert user.credits == 1
    assert len(store.credits_history) == 1
    assert len(service.list_approvals(contact.id)) == 1
    assert service.get_contact(contact.id).status == "approved"


def test_approval_with_missing_submitter_skips_award(service, store, add_user, submission):
    add_user("u1")
    contact = service.submit_contact("u1", submission())
    store.users.clear()

    result = service.decide(contact.id, "approved", "a1")

    assert result.status == "approved"
    assert store.credits_history == []
    assert len(service.list_approvals(contact.id)) == 1


def test_credits_per_approval_setting_is_used(service, store, add_user, submission):
    user = add_user("u1")
    store.set_setting("credits_per_approval", "3")
    contact = service.submit_contact("u1", submission())

    service.decide(contact.id, "approved", "a1")

    assert user.credits == 3
    assert store.credits_history[0].credits_earned == 3


def test_listings_preserve_insertion_order(service, add_user, submission):
    add_user("u1")
    add_user("u2")
    a = service.submit_contact("u1", submission(name="A"))
    b = service.submit_contact("u2", submission(name="B"))
    c = service.submit_contact("u1", submission(name="C"))
    service.decide(b.id, "approved", "a1")

    assert [x.id for x in service.list_by_submitter("u1")] == [a.id, c.id]
    assert [x.id for x in service.list_by_status("pending")] == [a.id, c.id]
    assert [x.id for x in service.list_by_status("approved")] == [b.id]

    with pytest.raises(InvalidSubmissionError):
        service.list_by_status("archived")


def test_ledger_and_audit_invariants_hold_after_mixed_sequence(
    service, store, add_user, submission
):
    for uid in ("u1", "u2", "u3"):
        add_user(uid)

    decisions = [
        ("u1", "approved"),
        ("u1", "approved"),
        ("u2", "rejected"),
        ("u2", "approved"),
        ("u3", None),
        ("u3", "rejected"),
        ("u1", "rejected"),
    ]
    for i, (uid, decision) in enumerate(decisions):
        contact = service.submit_contact(uid, submission(name=f"Person {i}"))
        if decision:
            service.decide(contact.id, decision, "a1")

    for user in store.users:
        earned = sum(e.credits_earned for e in store.credits_history if e.user_id == user.id)
        assert user.credits == earned

    approval_counts = Counter(a.contact_id for a in store.approvals)
    for contact in store.contacts:
        if contact.status == "pending":
            assert approval_counts[contact.id] == 0
        else:
            records = [a for a in store.approvals if a.contact_id == contact.id]
            assert len(records) == 1
            assert records[0].action == contact.status
