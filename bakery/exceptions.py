import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BakeryError(APIException):
    """Business-rule rejection. Raised before any write, rendered as 400."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The requested action is not allowed right now."
    default_code = "invalid_state"


# ========== ATTENDANCE ==========
class AlreadyClockedIn(BakeryError):
    default_detail = "You already have an active work session."
    default_code = "already_clocked_in"


class NotClockedIn(BakeryError):
    default_detail = "There is no active work session."
    default_code = "not_clocked_in"


class BreakAlreadyActive(BakeryError):
    default_detail = "You already have an active break."
    default_code = "break_already_active"


class NoActiveBreak(BakeryError):
    default_detail = "There is no active break to end."
    default_code = "no_active_break"


class MealAlreadyTaken(BakeryError):
    default_detail = "You have already taken your meal break today."
    default_code = "meal_already_taken"


class NothingToResumeFrom(BakeryError):
    default_detail = "There is no temporary exit or meal break to return from."
    default_code = "nothing_to_resume_from"


# ========== CASH REGISTER ==========
class RegisterAlreadyOpen(BakeryError):
    default_detail = "A cash register is already open."
    default_code = "register_already_open"


class NoOpenRegister(BakeryError):
    default_detail = "There is no open cash register to close."
    default_code = "no_open_register"


# ========== SALES / ORDERS ==========
class InsufficientStock(BakeryError):
    default_detail = "Insufficient stock."
    default_code = "insufficient_stock"


class PaymentExceedsBalance(BakeryError):
    default_detail = "The payment exceeds the order balance."
    default_code = "payment_exceeds_balance"


class DepositTooLow(BakeryError):
    default_detail = "The deposit must be at least 50% of the estimated price."
    default_code = "deposit_too_low"


# ========== CONFIG ==========
class InvalidConfig(BakeryError):
    default_detail = "Invalid system configuration."
    default_code = "invalid_config"


def api_exception_handler(exc, context):
    """
    Render every API error as {"error": ..., "code": ...}.

    Field validation errors keep DRF's per-field messages under "details".
    Anything DRF does not know about is logged and becomes a generic 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "api")
        return Response(
            {"error": "Internal server error", "code": "server_error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            "error": "Invalid request data.",
            "code": "invalid",
            "details": response.data,
        }
        return response

    data = response.data
    if isinstance(data, dict) and "detail" in data:
        detail = data["detail"]
        response.data = {
            "error": str(detail),
            "code": getattr(detail, "code", None) or "error",
        }
    return response
