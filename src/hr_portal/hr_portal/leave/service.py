from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Union

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_non_negative_int
from ..core.constants import DEFAULT_ANNUAL_LEAVE, DEFAULT_EMERGENCY_LEAVE, DEFAULT_SICK_LEAVE
from ..core.enums import LeaveType, NotificationType, RequestKind, RequestStatus, Role
from ..core.exceptions import NotFoundError, PolicyViolationError, ValidationError
from ..notifications.service import NotificationService
from ..users.authorization import require_admin
from ..users.model import User
from ..users.repository import UserRepository
from .model import DocumentRequest, LeaveBalance, LeaveRequest
from .repository import LeaveBalanceRepository, RequestRepository

logger = logging.getLogger(__name__)

DateInput = Union[date, str]


@dataclass(frozen=True)
class Submission:
    request_id: int
    kind: RequestKind
    reporting_manager_name: Optional[str]


def _coerce_date(value: DateInput, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    # Accept full ISO timestamps from clients, the day bucket is what counts.
    return parse_iso_date(str(value)[:10])


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def parse_request_status(value: Optional[str]) -> Optional[RequestStatus]:
    if not value:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Invalid status. Must be 'pending', 'approved' or 'rejected'")


def parse_request_kind(value: Optional[str]) -> RequestKind:
    try:
        return RequestKind(value or RequestKind.LEAVE.value)
    except ValueError:
        raise ValidationError("Invalid request type. Must be 'leave' or 'document'")


class LeaveService:
    """Use cases: leave balances and leave/document request submission.

    Balances are bookkeeping only: submitting (or a later approval) does not
    decrement them; admins adjust them manually.
    """

    def __init__(
        self,
        users: UserRepository,
        balances: LeaveBalanceRepository,
        requests: RequestRepository,
        notifications: NotificationService,
    ):
        self._users = users
        self._balances = balances
        self._requests = requests
        self._notifications = notifications

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_balance(self, user_id: str) -> LeaveBalance:
        self._require_user(user_id)
        balance = self._balances.get(user_id)
        if balance:
            return balance
        return self._balances.create(
            user_id,
            sick_leave=DEFAULT_SICK_LEAVE,
            annual_leave=DEFAULT_ANNUAL_LEAVE,
            emergency_leave=DEFAULT_EMERGENCY_LEAVE,
        )

    def set_balance(
        self,
        *,
        current_uid: str,
        current_role: Role,
        user_id: str,
        sick_leave,
        annual_leave,
        emergency_leave,
    ) -> LeaveBalance:
        require_admin(current_role)
        self._require_user(user_id)

        sick = require_non_negative_int(sick_leave, "sickLeave")
        annual = require_non_negative_int(annual_leave, "annualLeave")
        emergency = require_non_negative_int(emergency_leave, "emergencyLeave")

        self.get_balance(user_id)
        self._balances.update(user_id, sick_leave=sick, annual_leave=annual, emergency_leave=emergency)
        logger.info("Leave balance of %s set to %s/%s/%s by %s", user_id, sick, annual, emergency, current_uid)
        return self.get_balance(user_id)

    def submit_leave(
        self,
        *,
        user_id: str,
        leave_type: str,
        start_date: DateInput,
        end_date: DateInput,
        reason: str,
        number_of_days=None,
    ) -> Submission:
        user = self._require_user(user_id)

        try:
            kind = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Invalid leave type. Must be 'sick', 'annual' or 'emergency'")
        start = _coerce_date(start_date, "startDate")
        end = _coerce_date(end_date, "endDate")
        reason = require_non_empty(reason, "reason")
        if end < start:
            raise ValidationError("endDate must not be before startDate")

        if number_of_days in (None, ""):
            days = inclusive_days(start, end)
        else:
            days = require_non_negative_int(number_of_days, "numberOfDays")
            if days == 0:
                raise ValidationError("numberOfDays must be positive")

        remaining = self.get_balance(user_id).remaining(kind)
        if days > remaining:
            raise PolicyViolationError(
                f"Insufficient {kind.value} leave balance: {remaining} day(s) remaining, {days} requested"
            )

        request_id = self._requests.create_leave(
            user_id=user_id,
            user_name=user.display_name or user.email,
            leave_type=kind,
            start_date=start,
            end_date=end,
            number_of_days=days,
            reason=reason,
            reporting_manager_id=user.reporting_manager_id,
            reporting_manager_name=user.reporting_manager_name,
        )
        logger.info("Leave request %s submitted by %s (%s, %s days)", request_id, user_id, kind.value, days)

        if user.reporting_manager_id:
            self._notifications.notify(
                recipient_id=user.reporting_manager_id,
                type=NotificationType.LEAVE_REQUEST,
                title="New Leave Request",
                message=f"{user.display_name or 'A user'} has requested {kind.value} leave",
                related_id=str(request_id),
            )

        return Submission(request_id=request_id, kind=RequestKind.LEAVE, reporting_manager_name=user.reporting_manager_name)

    def submit_document(self, *, user_id: str, document_type: str, reason: str) -> Submission:
        user = self._require_user(user_id)
        document_type = require_non_empty(document_type, "documentType")
        reason = require_non_empty(reason, "reason")

        request_id = self._requests.create_document(
            user_id=user_id,
            user_name=user.display_name or user.email,
            document_type=document_type,
            reason=reason,
            reporting_manager_id=user.reporting_manager_id,
            reporting_manager_name=user.reporting_manager_name,
        )
        logger.info("Document request %s submitted by %s (%s)", request_id, user_id, document_type)

        if user.reporting_manager_id:
            self._notifications.notify(
                recipient_id=user.reporting_manager_id,
                type=NotificationType.DOCUMENT_REQUEST,
                title="New Document Request",
                message=f"{user.display_name or 'A user'} has requested a {document_type} document",
                related_id=str(request_id),
            )

        return Submission(
            request_id=request_id, kind=RequestKind.DOCUMENT, reporting_manager_name=user.reporting_manager_name
        )

    def list_leave_requests(self, *, user_id: str, status: Optional[str] = None) -> Sequence[LeaveRequest]:
        return self._requests.list_leave_requests(user_id=user_id, status=parse_request_status(status))

    def list_document_requests(self, *, user_id: str, status: Optional[str] = None) -> Sequence[DocumentRequest]:
        return self._requests.list_document_requests(user_id=user_id, status=parse_request_status(status))

    def list_requests(self, *, user_id: str, kind: Optional[str] = None, status: Optional[str] = None):
        if parse_request_kind(kind) == RequestKind.DOCUMENT:
            return self.list_document_requests(user_id=user_id, status=status)
        return self.list_leave_requests(user_id=user_id, status=status)
