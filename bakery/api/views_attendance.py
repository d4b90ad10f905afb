# bakery/api/views_attendance.py
import logging

from django.contrib.auth import get_user_model
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from bakery.api.serializers_attendance import (
    AdminWorkSessionActionSerializer,
    BreakActionSerializer,
    BreakSessionSerializer,
    ClockActionSerializer,
    WorkSessionSerializer,
)
from bakery.models_attendance import ExitType
from bakery.permissions import IsAdminOrManager
from bakery.services import attendance_service

logger = logging.getLogger(__name__)

User = get_user_model()


def _hours_payload(h):
    return {"total": h.total, "net": h.net}


def _checkout_payload(result):
    data = {
        "message": f"Checked out ({result.exit_type})",
        "exitType": result.exit_type,
        "workSession": WorkSessionSerializer(result.work_session).data,
    }
    if result.break_session is not None:
        data["breakSession"] = BreakSessionSerializer(result.break_session).data
    if result.exit_type == ExitType.FINAL:
        data["hoursWorked"] = result.hours_worked
        data["netHoursWorked"] = result.net_hours_worked
    return data


class EmployeeClockView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        s = ClockActionSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        action = s.validated_data["action"]
        user = request.user

        if action == "checkin":
            session = attendance_service.check_in(user, notes=s.validated_data["notes"])
            return Response(
                {"message": "Checked in", "workSession": WorkSessionSerializer(session).data},
                status=201,
            )

        if action == "checkout":
            result = attendance_service.check_out(
                user, s.validated_data["exitType"], notes=s.validated_data["notes"]
            )
            return Response(_checkout_payload(result), status=200)

        result = attendance_service.resume(user)
        data = {
            "message": "Back from meal break" if result.kind == "meal_return" else "Back from temporary exit",
            "type": result.kind,
            "workSession": WorkSessionSerializer(result.work_session).data,
        }
        if result.break_session is not None:
            data["breakSession"] = BreakSessionSerializer(result.break_session).data
        if result.overtime_notice:
            data["warning"] = result.overtime_notice
        return Response(data, status=200)


class EmployeeBreakView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        s = BreakActionSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        if s.validated_data["action"] == "start":
            brk = attendance_service.start_break(request.user, s.validated_data["breakType"])
            return Response(
                {"message": "Break started", "breakSession": BreakSessionSerializer(brk).data},
                status=201,
            )

        result = attendance_service.end_break(request.user)
        data = {"message": "Break ended", "breakSession": BreakSessionSerializer(result.break_session).data}
        if result.overtime_notice:
            data["warning"] = result.overtime_notice
        return Response(data, status=200)


class EmployeeStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        st = attendance_service.get_status(request.user)
        return Response({
            "status": st.status,
            "currentSession": WorkSessionSerializer(st.current_session).data if st.current_session else None,
            "activeBreak": BreakSessionSerializer(st.active_break).data if st.active_break else None,
            "mealTakenToday": st.meal_taken_today,
            "hoursToday": _hours_payload(st.hours_today),
            "hoursWeek": _hours_payload(st.hours_week),
            "alerts": st.alerts,
        }, status=200)


class AdminWorkSessionsView(APIView):
    permission_classes = [IsAdminOrManager]

    def get(self, request):
        raw_date = request.query_params.get("date")
        try:
            day = parse_date(raw_date) if raw_date else timezone.localdate()
        except ValueError:
            day = None
        if day is None:
            raise ValidationError({"date": "Use YYYY-MM-DD."})

        active_only = (request.query_params.get("active") or "").lower() in ("1", "true", "yes")
        overview = attendance_service.work_session_overview(
            day,
            employee_id=request.query_params.get("employeeId") or None,
            active_only=active_only,
        )
        return Response({
            "date": day.isoformat(),
            "workSessions": WorkSessionSerializer(overview["work_sessions"], many=True).data,
            "activeSessions": WorkSessionSerializer(overview["active_sessions"], many=True).data,
            "stats": {
                "activeEmployees": overview["stats"]["active_employees"],
                "totalHoursToday": overview["stats"]["total_hours_today"],
                "punctualityRate": overview["stats"]["punctuality_rate"],
            },
        }, status=200)

    def post(self, request):
        s = AdminWorkSessionActionSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        employee = User.objects.filter(pk=s.validated_data["employeeId"], is_active=True).first()
        if employee is None:
            raise NotFound("Employee not found.")

        if s.validated_data["action"] == "checkin":
            notes = s.validated_data["notes"] or f"Checked in by {request.user.name}"
            session = attendance_service.check_in(employee, notes=notes)
            logger.info("Admin %s checked in employee %s", request.user.pk, employee.pk)
            return Response(
                {"message": f"{employee.name} checked in", "workSession": WorkSessionSerializer(session).data},
                status=201,
            )

        result = attendance_service.check_out(employee, ExitType.FINAL, notes=s.validated_data["notes"])
        logger.info("Admin %s checked out employee %s", request.user.pk, employee.pk)
        return Response(_checkout_payload(result), status=200)


def _alert_payload(alert):
    u = alert.employee
    data = {
        "id": alert.id,
        "type": alert.type,
        "severity": alert.severity,
        "employee": {"id": u.id, "name": u.name, "email": u.email},
        "message": alert.message,
    }
    extras = {
        "startTime": alert.start_time,
        "duration": alert.duration,
        "overtime": alert.overtime,
        "minutesLate": alert.minutes_late,
        "workSessionId": alert.work_session_id,
        "expectedTime": alert.expected_time,
    }
    data.update({k: v for k, v in extras.items() if v is not None})
    return data


class AdminAlertsView(APIView):
    permission_classes = [IsAdminOrManager]

    def get(self, request):
        board = attendance_service.attendance_alerts()
        return Response({
            "alerts": [_alert_payload(a) for a in board["alerts"]],
            "summary": board["summary"],
        }, status=200)
