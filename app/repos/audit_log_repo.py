"""
Audit log repository for prize and rule changes
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_log import AuditLog


async def create_audit_log(
    session: AsyncSession,
    action: str,
    resource_type: str,
    resource_id: UUID,
    details: dict,
    actor: Optional[str] = "system"
) -> AuditLog:
    """
    Create an audit log entry inside the caller's transaction.

    Args:
        session: Database session
        action: Action performed
        resource_type: Type of resource affected
        resource_id: ID of resource affected
        details: Additional details as JSON
        actor: Who performed the action

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor=actor,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details
    )
    session.add(audit_log)
    await session.flush()
    return audit_log

