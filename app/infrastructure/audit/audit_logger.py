"""
AuditLogger - structured audit trail for privileged actions.

Admin decisions are already persisted as ApprovalRecords; this logger adds
the request context (actor, IP, request id) to the log stream so decisions
and credit awards can be traced back to the HTTP call that made them.

Usage:
    from app.infrastructure.audit import audit_logger

    audit_logger.log(
        actor_id=admin_id,
        action="contact_approved",
        resource_type="contact",
        resource_id=contact_id,
        request_id=request.state.request_id,
    )
"""

from datetime import UTC, datetime
from typing import Any

from app.infrastructure.observability.logging import get_logger

logger = get_logger("audit")


class AuditLogger:
    """Writes audit events to the structured log. Never raises."""

    @staticmethod
    def log(
        actor_id: str | None,
        action: str,
        resource_type: str | None = None,
        resource_id: str | None = None,
        ip_address: str | None = None,
        request_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Log an audit event.

        Args:
            actor_id: User who performed the action (None if unauthenticated)
            action: Action name (e.g., "contact_approved", "user_registered")
            resource_type: Type of resource (e.g., "contact", "user")
            resource_id: Specific resource id
            ip_address: Client IP address
            request_id: Request correlation id
            metadata: Additional JSON-serializable context

        Returns:
            True if logged, False if the log call itself failed
        """
        try:
            logger.info(
                "Audit event",
                audit_action=action,
                actor_id=actor_id,
                resource_type=resource_type,
                resource_id=resource_id,
                ip_address=ip_address,
                request_id=request_id,
                metadata=metadata or {},
                audited_at=datetime.now(UTC).isoformat(),
            )
            return True
        except Exception as e:
            # Audit logging must never fail the request
            logger.error("Failed to write audit event", error=str(e), audit_action=action)
            return False

    @staticmethod
    def log_decision(
        admin_id: str,
        contact_id: str,
        status: str,
        submitted_by: str,
        credits_awarded: int = 0,
        ip_address: str | None = None,
        request_id: str | None = None,
    ) -> bool:
        """Log an admin approve/reject decision."""
        return AuditLogger.log(
            actor_id=admin_id,
            action=f"contact_{status}",
            resource_type="contact",
            resource_id=contact_id,
            ip_address=ip_address,
            request_id=request_id,
            metadata={"submitted_by": submitted_by, "credits_awarded": credits_awarded},
        )

    @staticmethod
    def log_security_event(
        actor_id: str | None,
        event_type: str,
        description: str,
        ip_address: str | None = None,
        request_id: str | None = None,
    ) -> bool:
        """Log auth failures and forbidden admin attempts."""
        return AuditLogger.log(
            actor_id=actor_id,
            action="security_event",
            resource_type="security",
            ip_address=ip_address,
            request_id=request_id,
            metadata={"event_type": event_type, "description": description},
        )


audit_logger = AuditLogger()
