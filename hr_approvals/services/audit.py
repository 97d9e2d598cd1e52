from typing import List, Optional

from hr_approvals.services.base import BaseService
from hr_approvals.models.audit_entry import AuditEntry
from hr_approvals.models.reviewable import RequestKind, ReviewAction

class AuditTrail(BaseService):
    def record(
        self,
        kind: RequestKind,
        request_id: int,
        actor_id: int,
        action: ReviewAction,
        previous_status: str,
        new_status: str,
        comment: Optional[str] = None,
    ) -> AuditEntry:
        """
        Append an audit entry for a reviewer decision.
        Strictly append-only.
        We do NOT commit here: the entry is written in the same transaction as
        the status change, so a decision and its audit row persist together or
        not at all. Flushing assigns the entry id.
        """
        entry = AuditEntry(
            request_id=request_id,
            request_kind=kind.value,
            actor_id=actor_id,
            action=action.value,
            previous_status=previous_status,
            new_status=new_status,
            comment=comment,
        )
        self.db.add(entry)
        self.db.flush()
        self.log_info(
            f"Audit: {action.value} {kind.value} {request_id} by {actor_id}",
            previous_status=previous_status,
            new_status=new_status,
        )
        return entry

    def entries_for(self, kind: RequestKind, request_id: int) -> List[AuditEntry]:
        return (
            self.db.query(AuditEntry)
            .filter(AuditEntry.request_kind == kind.value, AuditEntry.request_id == request_id)
            .order_by(AuditEntry.timestamp.asc(), AuditEntry.id.asc())
            .all()
        )
