"""
contacts.py
-----------
Purpose:
    Contact submission and admin review endpoints.

Architecture:
    - API layer: auth, request validation, error -> status mapping
    - Service layer: ContactLifecycleService owns state transitions and credits

Usage:
    1. POST /contacts                  - submit a contact (caller is the submitter)
    2. GET  /contacts/mine             - caller's submissions
    3. GET  /contacts/user/{user_id}   - a user's submissions
    4. GET  /contacts/pending          - review queue (admin)
    5. GET  /contacts?status=...       - filter by status (admin)
    6. GET  /contacts/{contact_id}     - contact with its decisions
    7. PUT  /contacts/{contact_id}/status - approve/reject (admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.db.json_store import PersistenceError
from app.infrastructure.audit import audit_logger
from app.infrastructure.observability.logging import get_logger
from app.models.api.contact_request import ContactDecisionRequest, ContactSubmitRequest
from app.models.api.responses import (
    ApiResponse,
    ContactDetail,
    ContactEnvelope,
    ContactListEnvelope,
)
from app.models.domain.ambassador_domain import ContactStatus, User
from app.routes.dependencies import (
    current_user,
    get_contact_service,
    require_admin,
    to_http_exception,
)
from app.services.core.contact_service import ContactLifecycleService
from app.services.core.errors import AmbassadorServiceError

router = APIRouter(prefix="/contacts", tags=["contacts"])
logger = get_logger(__name__)


@router.post("", response_model=ContactEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    payload: ContactSubmitRequest,
    user: User = Depends(current_user),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    try:
        contact = contacts.submit_contact(user.id, payload.to_submission())
    except (AmbassadorServiceError, PersistenceError) as e:
        logger.warning("Contact submission failed", user_id=user.id, error=str(e))
        raise to_http_exception(e) from e

    return ContactEnvelope(data=contact)


@router.get("/mine", response_model=ContactListEnvelope)
async def list_my_contacts(
    user: User = Depends(current_user),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    return ContactListEnvelope(data=contacts.list_by_submitter(user.id))


@router.get("/user/{user_id}", response_model=ContactListEnvelope)
async def list_user_contacts(
    user_id: str,
    user: User = Depends(current_user),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    if user.id != user_id and user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your contacts")
    return ContactListEnvelope(data=contacts.list_by_submitter(user_id))


@router.get("/pending", response_model=ContactListEnvelope)
async def list_pending_contacts(
    _admin: User = Depends(require_admin),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    return ContactListEnvelope(data=contacts.list_by_status("pending"))


@router.get("", response_model=ContactListEnvelope)
async def list_contacts_by_status(
    status_filter: ContactStatus = Query("pending", alias="status"),
    _admin: User = Depends(require_admin),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    return ContactListEnvelope(data=contacts.list_by_status(status_filter))


@router.get("/{contact_id}", response_model=ApiResponse[ContactDetail])
async def get_contact(
    contact_id: str,
    user: User = Depends(current_user),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    try:
        contact = contacts.get_contact(contact_id)
    except AmbassadorServiceError as e:
        raise to_http_exception(e) from e

    if contact.submitted_by != user.id and user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your contact")

    detail = ContactDetail(contact=contact, approvals=contacts.list_approvals(contact_id))
    return ApiResponse[ContactDetail](data=detail)


@router.put("/{contact_id}/status", response_model=ContactEnvelope)
async def decide_contact(
    contact_id: str,
    payload: ContactDecisionRequest,
    request: Request,
    admin: User = Depends(require_admin),
    contacts: ContactLifecycleService = Depends(get_contact_service),
):
    """
    Approve or reject a pending contact.

    Raises:
        404: Contact not found
        409: Contact already decided
    """
    try:
        contact = contacts.decide(contact_id, payload.status, admin.id, payload.notes)
    except (AmbassadorServiceError, PersistenceError) as e:
        logger.warning(
            "Contact decision failed", contact_id=contact_id, admin_id=admin.id, error=str(e)
        )
        raise to_http_exception(e) from e

    awarded = sum(
        e.credits_earned
        for e in contacts.ledger.history(contact.submitted_by)
        if e.contact_id == contact.id
    )
    audit_logger.log_decision(
        admin_id=admin.id,
        contact_id=contact.id,
        status=contact.status,
        submitted_by=contact.submitted_by,
        credits_awarded=awarded,
        ip_address=getattr(request.state, "ip_address", None),
        request_id=getattr(request.state, "request_id", None),
    )

    return ContactEnvelope(data=contact)
