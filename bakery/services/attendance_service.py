"""
Attendance tracking: check-in / breaks / exits for a worker's day.

Every state change runs in one transaction, locks the open work session it
checks (select_for_update) and relies on the partial unique indexes of
WorkSession / BreakSession as the last line against double submissions.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Sum
from django.utils import timezone

from bakery.exceptions import (
    AlreadyClockedIn,
    BakeryError,
    BreakAlreadyActive,
    MealAlreadyTaken,
    NoActiveBreak,
    NotClockedIn,
    NothingToResumeFrom,
)
from bakery.models import User
from bakery.models_attendance import BreakSession, BreakType, ExitType, SessionStatus, WorkSession
from bakery.services.dates import at_local_time, local_day, week_number, week_start

logger = logging.getLogger(__name__)

HOURS_Q = Decimal("0.01")


# =========================================================
# RESULT TYPES
# =========================================================
@dataclass
class BreakResult:
    break_session: BreakSession
    overtime_notice: Optional[str] = None


@dataclass
class CheckoutResult:
    work_session: WorkSession
    exit_type: str
    break_session: Optional[BreakSession] = None
    hours_worked: Optional[Decimal] = None
    net_hours_worked: Optional[Decimal] = None


@dataclass
class ResumeResult:
    kind: str  # "meal_return" | "temporary_return"
    work_session: WorkSession
    break_session: Optional[BreakSession] = None
    overtime_notice: Optional[str] = None


@dataclass
class HoursTotal:
    total: Decimal = Decimal("0.00")
    net: Decimal = Decimal("0.00")


@dataclass
class AttendanceStatus:
    status: str
    current_session: Optional[WorkSession]
    active_break: Optional[BreakSession]
    meal_taken_today: bool
    hours_today: HoursTotal
    hours_week: HoursTotal
    alerts: list = field(default_factory=list)


# =========================================================
# HELPERS
# =========================================================
def _round_minutes(delta: timedelta) -> int:
    """Elapsed minutes rounded half-up (never negative)."""
    minutes = max(0.0, delta.total_seconds() / 60)
    return int(math.floor(minutes + 0.5))


def _hours(minutes: float) -> Decimal:
    return Decimal(str(minutes / 60)).quantize(HOURS_Q, rounding=ROUND_HALF_UP)


def _max_allowed(break_type: str) -> int:
    if break_type == BreakType.MEAL:
        return settings.BAKERY_MEAL_BREAK_MINUTES
    return settings.BAKERY_SHORT_BREAK_MINUTES


def _open_session(user, lock: bool = False) -> Optional[WorkSession]:
    qs = WorkSession.objects.filter(user=user, status=SessionStatus.OPEN)
    if lock:
        qs = qs.select_for_update()
    return qs.order_by("-start_time").first()


def _open_break(session: WorkSession) -> Optional[BreakSession]:
    return session.breaks.filter(end_time__isnull=True).order_by("-start_time").first()


def _meal_taken(user, day: date) -> bool:
    # scans every session of the day, unlike the active-break check
    return BreakSession.objects.filter(
        work_session__user=user,
        work_session__day_date=day,
        break_type=BreakType.MEAL,
    ).exists()


def _close_break(brk: BreakSession, now: datetime) -> BreakResult:
    duration = _round_minutes(now - brk.start_time)
    brk.end_time = now
    brk.duration = duration
    brk.is_overtime = duration > brk.max_allowed
    brk.overtime_minutes = max(0, duration - brk.max_allowed)
    brk.save(update_fields=["end_time", "duration", "is_overtime", "overtime_minutes"])

    notice = None
    if brk.is_overtime:
        notice = f"Exceeded allowed break by {brk.overtime_minutes} minutes"
        logger.info(
            "Break %s for session %s closed %s min over the limit",
            brk.id, brk.work_session_id, brk.overtime_minutes,
        )
    return BreakResult(break_session=brk, overtime_notice=notice)


def _create_session(user, now: datetime, judge_lateness: bool, notes: str = "") -> WorkSession:
    day = local_day(now)
    session_number = WorkSession.objects.filter(user=user, day_date=day).count() + 1

    is_on_time = True
    minutes_late = 0
    if judge_lateness and session_number == 1:
        expected_start = at_local_time(day, settings.BAKERY_WORKDAY_START)
        if now > expected_start:
            is_on_time = False
            minutes_late = _round_minutes(now - expected_start)

    try:
        with transaction.atomic():
            session = WorkSession.objects.create(
                user=user,
                day_date=day,
                session_number=session_number,
                start_time=now,
                status=SessionStatus.OPEN,
                is_on_time=is_on_time,
                minutes_late=minutes_late,
                week_number=week_number(day),
                year_number=day.year,
                notes=notes,
            )
    except IntegrityError:
        # a concurrent check-in won the race on the open-session index
        raise AlreadyClockedIn()

    logger.info(
        "User %s checked in (session #%s, on_time=%s, minutes_late=%s)",
        user.pk, session_number, is_on_time, minutes_late,
    )
    return session


# =========================================================
# OPERATIONS
# =========================================================
@transaction.atomic
def check_in(user, now: Optional[datetime] = None, notes: str = "") -> WorkSession:
    now = now or timezone.now()
    if _open_session(user, lock=True) is not None:
        raise AlreadyClockedIn()
    return _create_session(user, now, judge_lateness=True, notes=notes)


@transaction.atomic
def start_break(user, break_type: str = BreakType.MEAL, now: Optional[datetime] = None) -> BreakSession:
    now = now or timezone.now()
    if break_type not in BreakType.values:
        raise BakeryError(f"Invalid break type. Use: {', '.join(BreakType.values)}")

    session = _open_session(user, lock=True)
    if session is None:
        raise NotClockedIn()

    if break_type == BreakType.MEAL and _meal_taken(user, session.day_date):
        raise MealAlreadyTaken()

    if _open_break(session) is not None:
        raise BreakAlreadyActive()

    try:
        with transaction.atomic():
            brk = BreakSession.objects.create(
                work_session=session,
                break_type=break_type,
                start_time=now,
                max_allowed=_max_allowed(break_type),
                is_paid=break_type == BreakType.BREAK,
            )
    except IntegrityError:
        raise BreakAlreadyActive()

    logger.info("User %s started %s break on session %s", user.pk, break_type, session.id)
    return brk


@transaction.atomic
def end_break(user, now: Optional[datetime] = None) -> BreakResult:
    now = now or timezone.now()
    session = _open_session(user, lock=True)
    if session is None:
        raise NoActiveBreak()

    brk = _open_break(session)
    if brk is None:
        raise NoActiveBreak()

    return _close_break(brk, now)


@transaction.atomic
def check_out(user, exit_type: str, now: Optional[datetime] = None, notes: str = "") -> CheckoutResult:
    """
    - meal:      opens the day's single meal break, session stays open
    - temporary: shallow-closes open breaks and closes the session; the next
                 check-in opens session_number + 1
    - final:     closes breaks with full accounting and computes hours;
                 `notes`, when given, replace the session notes
    """
    now = now or timezone.now()
    if exit_type not in ExitType.values:
        raise BakeryError(f"Invalid exit type. Use: {', '.join(ExitType.values)}")

    session = _open_session(user, lock=True)
    if session is None:
        raise NotClockedIn()

    if exit_type == ExitType.MEAL:
        brk = start_break(user, BreakType.MEAL, now=now)
        return CheckoutResult(work_session=session, exit_type=exit_type, break_session=brk)

    if exit_type == ExitType.TEMPORARY:
        # endTime only: duration/overtime stay empty for breaks cut by a temporary exit
        session.breaks.filter(end_time__isnull=True).update(end_time=now)

        session.end_time = now
        session.exit_type = ExitType.TEMPORARY
        session.status = SessionStatus.TEMPORARY_EXIT
        session.save(update_fields=["end_time", "exit_type", "status"])

        logger.info("User %s left temporarily (session %s)", user.pk, session.id)
        return CheckoutResult(work_session=session, exit_type=exit_type)

    for brk in session.breaks.filter(end_time__isnull=True):
        _close_break(brk, now)

    total_minutes = max(0.0, (now - session.start_time).total_seconds() / 60)
    meal_minutes = (
        session.breaks
        .filter(break_type=BreakType.MEAL, duration__isnull=False)
        .aggregate(s=Sum("duration"))["s"]
    ) or 0

    session.end_time = now
    session.exit_type = ExitType.FINAL
    session.status = SessionStatus.FINISHED
    session.hours_worked = _hours(total_minutes)
    session.net_hours_worked = _hours(total_minutes - meal_minutes)
    session.notes = notes or session.notes
    session.save(update_fields=["end_time", "exit_type", "status", "hours_worked", "net_hours_worked", "notes"])

    logger.info(
        "User %s finished the day (session %s, hours=%s, net=%s)",
        user.pk, session.id, session.hours_worked, session.net_hours_worked,
    )
    return CheckoutResult(
        work_session=session,
        exit_type=exit_type,
        hours_worked=session.hours_worked,
        net_hours_worked=session.net_hours_worked,
    )


@transaction.atomic
def resume(user, now: Optional[datetime] = None) -> ResumeResult:
    now = now or timezone.now()
    today = local_day(now)

    latest = (
        WorkSession.objects
        .select_for_update()
        .filter(user=user, day_date=today)
        .order_by("-session_number", "-created_at")
        .first()
    )
    if latest is None:
        raise NothingToResumeFrom()

    meal = latest.breaks.filter(break_type=BreakType.MEAL, end_time__isnull=True).first()
    if meal is not None:
        res = _close_break(meal, now)
        return ResumeResult(
            kind="meal_return",
            work_session=latest,
            break_session=res.break_session,
            overtime_notice=res.overtime_notice,
        )

    if latest.status == SessionStatus.TEMPORARY_EXIT:
        if _open_session(user, lock=True) is not None:
            raise AlreadyClockedIn()
        session = _create_session(user, now, judge_lateness=False)
        return ResumeResult(kind="temporary_return", work_session=session)

    raise NothingToResumeFrom()


# =========================================================
# READ SIDE
# =========================================================
def _sum_hours(qs) -> HoursTotal:
    agg = qs.aggregate(total=Sum("hours_worked"), net=Sum("net_hours_worked"))
    return HoursTotal(
        total=(agg["total"] or Decimal("0")).quantize(HOURS_Q, rounding=ROUND_HALF_UP),
        net=(agg["net"] or Decimal("0")).quantize(HOURS_Q, rounding=ROUND_HALF_UP),
    )


def _meal_alerts(active_break: Optional[BreakSession], now: datetime) -> list:
    if active_break is None or active_break.break_type != BreakType.MEAL:
        return []

    elapsed = (now - active_break.start_time).total_seconds() / 60
    limit = active_break.max_allowed
    if elapsed > limit:
        return [{
            "type": "meal_overtime",
            "severity": "warning",
            "message": f"Meal break exceeded by {_round_minutes(timedelta(minutes=elapsed - limit))} minutes",
        }]
    if elapsed > settings.BAKERY_MEAL_WARNING_MINUTES:
        return [{
            "type": "meal_warning",
            "severity": "info",
            "message": f"{_round_minutes(timedelta(minutes=limit - elapsed))} minutes of meal break left",
        }]
    return []


def get_status(user, now: Optional[datetime] = None) -> AttendanceStatus:
    now = now or timezone.now()
    today = local_day(now)

    open_session = _open_session(user)
    latest_today = (
        WorkSession.objects
        .filter(user=user, day_date=today)
        .order_by("-session_number", "-created_at")
        .first()
    )

    status = "not_checked_in"
    current = None
    active_break = None

    if open_session is not None:
        current = open_session
        active_break = _open_break(open_session)
        if active_break is not None and active_break.break_type == BreakType.MEAL:
            status = "on_meal_break"
        else:
            status = "working"
    elif latest_today is not None and latest_today.status == SessionStatus.TEMPORARY_EXIT:
        status = "temporary_exit"
        current = latest_today
    elif latest_today is not None and latest_today.status == SessionStatus.FINISHED:
        status = "finished"
        current = latest_today

    first_day = week_start(today)
    week_qs = WorkSession.objects.filter(
        user=user,
        day_date__gte=first_day,
        day_date__lte=first_day + timedelta(days=6),
    )

    return AttendanceStatus(
        status=status,
        current_session=current,
        active_break=active_break,
        meal_taken_today=_meal_taken(user, today),
        hours_today=_sum_hours(WorkSession.objects.filter(user=user, day_date=today)),
        hours_week=_sum_hours(week_qs),
        alerts=_meal_alerts(active_break, now),
    )


def work_session_overview(day: date, employee_id=None, active_only: bool = False) -> dict:
    """Admin view of a day: its sessions, who is clocked in now, and stats."""
    qs = (
        WorkSession.objects
        .filter(day_date=day)
        .select_related("user")
        .prefetch_related("breaks")
        .order_by("-start_time")
    )
    if employee_id:
        qs = qs.filter(user_id=employee_id)
    if active_only:
        qs = qs.filter(status=SessionStatus.OPEN)

    active = (
        WorkSession.objects
        .filter(status=SessionStatus.OPEN)
        .select_related("user")
        .prefetch_related("breaks")
        .order_by("-start_time")
    )

    sessions = list(qs)
    closed_minutes = sum(
        (s.end_time - s.start_time).total_seconds() / 60
        for s in sessions
        if s.end_time is not None
    )
    on_time = sum(1 for s in sessions if s.is_on_time)
    punctuality = (
        (Decimal(on_time) * 100 / Decimal(len(sessions))).quantize(HOURS_Q, rounding=ROUND_HALF_UP)
        if sessions else Decimal("100.00")
    )

    return {
        "work_sessions": sessions,
        "active_sessions": list(active),
        "stats": {
            "active_employees": active.count(),
            "total_hours_today": _hours(closed_minutes),
            "punctuality_rate": punctuality,
        },
    }


# =========================================================
# ADMIN ALERTS BOARD
# =========================================================
SEVERITY_RANK = {"error": 3, "warning": 2, "info": 1}


@dataclass
class AttendanceAlert:
    id: str
    type: str  # "meal_overtime" | "late_arrival" | "no_checkin"
    severity: str
    employee: object
    message: str
    start_time: Optional[datetime] = None
    duration: Optional[int] = None
    overtime: Optional[int] = None
    minutes_late: Optional[int] = None
    work_session_id: Optional[int] = None
    expected_time: Optional[str] = None


def _meal_overtime_alerts(day: date, now: datetime) -> list:
    alerts = []
    open_meals = (
        BreakSession.objects
        .filter(break_type=BreakType.MEAL, end_time__isnull=True, work_session__day_date=day)
        .select_related("work_session__user")
    )
    for brk in open_meals:
        elapsed = (now - brk.start_time).total_seconds() / 60
        if elapsed <= brk.max_allowed:
            continue
        user = brk.work_session.user
        overtime = _round_minutes(timedelta(minutes=elapsed - brk.max_allowed))
        alerts.append(AttendanceAlert(
            id=str(brk.id),
            type="meal_overtime",
            severity="warning",
            employee=user,
            message=f"{user.name} exceeded the meal break by {overtime} minutes",
            start_time=brk.start_time,
            duration=_round_minutes(now - brk.start_time),
            overtime=overtime,
            work_session_id=brk.work_session_id,
        ))
    return alerts


def _late_arrival_alerts(day: date) -> list:
    alerts = []
    late = (
        WorkSession.objects
        .filter(day_date=day, session_number=1, is_on_time=False,
                minutes_late__gt=settings.BAKERY_LATE_ALERT_MINUTES)
        .select_related("user")
    )
    for s in late:
        alerts.append(AttendanceAlert(
            id=f"late_{s.id}",
            type="late_arrival",
            severity="error" if s.minutes_late > settings.BAKERY_LATE_ERROR_MINUTES else "warning",
            employee=s.user,
            message=f"{s.user.name} arrived {s.minutes_late} minutes late",
            start_time=s.start_time,
            minutes_late=s.minutes_late,
            work_session_id=s.id,
        ))
    return alerts


def _no_checkin_alerts(day: date, now: datetime) -> list:
    hour = timezone.localtime(now).hour
    if hour < settings.BAKERY_NO_CHECKIN_ALERT_HOUR:
        return []

    checked_in = WorkSession.objects.filter(day_date=day, session_number=1).values("user_id")
    missing = (
        User.objects
        .filter(role=User.Role.EMPLOYEE, is_active=True)
        .exclude(pk__in=checked_in)
        .order_by("username")
    )
    severity = "error" if hour >= settings.BAKERY_NO_CHECKIN_ERROR_HOUR else "warning"
    return [
        AttendanceAlert(
            id=f"no_checkin_{u.id}",
            type="no_checkin",
            severity=severity,
            employee=u,
            message=f"{u.name} has not checked in today",
            expected_time=settings.BAKERY_WORKDAY_START,
        )
        for u in missing
    ]


def attendance_alerts(now: Optional[datetime] = None) -> dict:
    """
    Today's attendance problems across all workers, most severe first:
    meal breaks past their allowance, late first check-ins, and employees
    with no check-in yet.
    """
    now = now or timezone.now()
    day = local_day(now)

    alerts = _meal_overtime_alerts(day, now) + _late_arrival_alerts(day) + _no_checkin_alerts(day, now)
    alerts.sort(key=lambda a: SEVERITY_RANK[a.severity], reverse=True)

    return {
        "alerts": alerts,
        "summary": {
            "total": len(alerts),
            "errors": sum(1 for a in alerts if a.severity == "error"),
            "warnings": sum(1 for a in alerts if a.severity == "warning"),
            "info": sum(1 for a in alerts if a.severity == "info"),
        },
    }
