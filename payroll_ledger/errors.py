from __future__ import annotations


class PayrollError(Exception):
    """Base class for every rejected ledger operation.

    Subclasses carry a machine-readable ``code`` so callers can branch on the
    type (or code) instead of parsing messages.
    """

    code: str = "PAYROLL_ERROR"
    default_message: str = "Payroll operation rejected"

    def __init__(self, message: str | None = None, **details) -> None:
        self.details = details
        super().__init__(message or self.default_message)


class Unauthorized(PayrollError):
    code = "UNAUTHORIZED"
    default_message = "Caller is not allowed to call this function"


class NotFound(PayrollError):
    code = "NOT_FOUND"
    default_message = "Employee does not exist"


class AlreadyExists(PayrollError):
    code = "ALREADY_EXISTS"
    default_message = "Employee already exists"


class InvalidMonth(PayrollError):
    code = "INVALID_MONTH"
    default_message = "Invalid month"


class InvalidWorkingDays(PayrollError):
    code = "INVALID_WORKING_DAYS"
    default_message = "Invalid working days"


class InvalidAmount(PayrollError):
    code = "INVALID_AMOUNT"
    default_message = "Invalid amount"


class QuotaExceeded(PayrollError):
    code = "QUOTA_EXCEEDED"
    default_message = "Exceed max change working days"


class WeekendNotAllowed(PayrollError):
    code = "WEEKEND_NOT_ALLOWED"
    default_message = "Cannot check in on weekend"


class CheckInWindowViolation(PayrollError):
    code = "CHECK_IN_WINDOW_VIOLATION"
    default_message = "Not in check in time"


class CheckOutWindowViolation(PayrollError):
    code = "CHECK_OUT_WINDOW_VIOLATION"
    default_message = "Not in check out time"


class CheckInFirst(PayrollError):
    code = "CHECK_IN_FIRST"
    default_message = "Check in first"


class FutureMonthClaim(PayrollError):
    code = "FUTURE_MONTH_CLAIM"
    default_message = "Cannot claim salary for current or future month"


class NoWorkingDays(PayrollError):
    code = "NO_WORKING_DAYS"
    default_message = "No working days"


class AlreadyClaimed(PayrollError):
    code = "ALREADY_CLAIMED"
    default_message = "Salary already claimed"


class InsufficientFund(PayrollError):
    code = "INSUFFICIENT_FUND"
    default_message = "Insufficient fund"


class TransferRejected(PayrollError):
    code = "TRANSFER_REJECTED"
    default_message = "Transfer rejected"
