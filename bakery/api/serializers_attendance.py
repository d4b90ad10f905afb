from rest_framework import serializers

from bakery.models_attendance import BreakSession, BreakType, ExitType, WorkSession


class BreakSessionSerializer(serializers.ModelSerializer):
    class Meta:
        model = BreakSession
        fields = [
            "id", "work_session", "break_type",
            "start_time", "end_time", "is_open",
            "max_allowed", "is_paid",
            "duration", "is_overtime", "overtime_minutes",
        ]


class WorkSessionSerializer(serializers.ModelSerializer):
    employee_name = serializers.SerializerMethodField()
    breaks = BreakSessionSerializer(many=True, read_only=True)

    class Meta:
        model = WorkSession
        fields = [
            "id", "user", "employee_name",
            "day_date", "session_number",
            "start_time", "end_time", "status", "is_open", "exit_type",
            "is_on_time", "minutes_late",
            "hours_worked", "net_hours_worked",
            "week_number", "year_number",
            "notes", "breaks",
        ]

    def get_employee_name(self, obj):
        u = obj.user
        return getattr(u, "name", None) or getattr(u, "username", "")


# ---------- request payloads ----------
class ClockActionSerializer(serializers.Serializer):
    ACTIONS = ("checkin", "checkout", "return_from_break")

    action = serializers.ChoiceField(choices=ACTIONS)
    exitType = serializers.ChoiceField(choices=ExitType.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs["action"] == "checkout" and not attrs.get("exitType"):
            raise serializers.ValidationError({"exitType": "This field is required for checkout."})
        return attrs


class BreakActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=("start", "end"))
    breakType = serializers.ChoiceField(choices=BreakType.choices, required=False, default=BreakType.MEAL)


class AdminWorkSessionActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=("checkin", "checkout"))
    employeeId = serializers.IntegerField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
