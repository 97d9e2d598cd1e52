from typing import List

from sqlalchemy.orm import Session
from hr_approvals.models.employee import Employee
from hr_approvals.models.notification import Notification
from hr_approvals.models.reviewable import RequestKind, ReviewAction
from hr_approvals.services.directory import ReportingDirectory

class NotificationService:
    @staticmethod
    def create_notification(
        db: Session,
        user_id: int,
        title: str,
        message: str,
        type: str = "info",
        related_entity_type: str = None,
        related_entity_id: int = None
    ) -> Notification:
        """
        Internal utility for creating notifications.
        Joins the caller's transaction; the caller commits.
        """
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            related_entity_type=related_entity_type,
            related_entity_id=related_entity_id
        )
        db.add(notification)
        db.flush()
        return notification

    @staticmethod
    def notify_decision(db: Session, request, action: ReviewAction, comment: str = None) -> Notification:
        """
        Tell the request owner about a reviewer decision.
        """
        if request.kind == RequestKind.LEAVE:
            subject = f"Your {request.leave_type} leave request for {request.total_days:g} day(s)"
            title = "Leave Request"
        else:
            subject = f"Your timesheet for {request.date.isoformat()}"
            title = "Timesheet"

        if action == ReviewAction.APPROVE:
            title, message, type_ = f"{title} Approved", f"{subject} has been approved", "success"
        else:
            title, message, type_ = f"{title} Rejected", f"{subject} has been rejected. Reason: {comment}", "error"

        return NotificationService.create_notification(
            db,
            user_id=request.owner_id,
            title=title,
            message=message,
            type=type_,
            related_entity_type=request.kind.value,
            related_entity_id=request.id
        )

    @staticmethod
    def notify_submission(db: Session, request, employee: Employee) -> List[Notification]:
        """
        Ask the employee's reviewers to look at a newly submitted request.
        Same transaction rules as create_notification.
        """
        if request.kind == RequestKind.LEAVE:
            title = "Leave Request Submitted"
            message = (f"{employee.name} has submitted a {request.leave_type} leave request "
                       f"for {request.total_days:g} day(s)")
        else:
            title = "Timesheet Submission"
            message = f"{employee.name} has submitted a timesheet for {request.date.isoformat()}"

        return [
            NotificationService.create_notification(
                db,
                user_id=user_id,
                title=title,
                message=message,
                type="approval_required",
                related_entity_type=request.kind.value,
                related_entity_id=request.id
            )
            for user_id in ReportingDirectory(db).submission_reviewers(employee)
        ]
