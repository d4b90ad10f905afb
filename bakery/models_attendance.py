from django.conf import settings
from django.db import models
from django.db.models import Q


class SessionStatus(models.TextChoices):
    OPEN = "OPEN", "Open"
    TEMPORARY_EXIT = "TEMPORARY_EXIT", "Temporary exit"
    FINISHED = "FINISHED", "Finished"


class ExitType(models.TextChoices):
    TEMPORARY = "temporary", "Temporary"
    MEAL = "meal", "Meal"
    FINAL = "final", "Final"


class BreakType(models.TextChoices):
    MEAL = "meal", "Meal"
    BREAK = "break", "Short break"


class WorkSession(models.Model):
    """
    One stretch of presence for a worker on a local calendar day.

    A day may hold several sessions: a temporary exit closes the current row
    and the next check-in opens a new one with session_number + 1.
    `status` is the explicit state tag; `end_time` is null only while OPEN.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="work_sessions")

    day_date = models.DateField(db_index=True)
    session_number = models.PositiveIntegerField(default=1)

    start_time = models.DateTimeField()
    end_time = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=SessionStatus.choices, default=SessionStatus.OPEN, db_index=True)
    exit_type = models.CharField(max_length=20, choices=ExitType.choices, blank=True, default="")

    # lateness is only judged on the first session of the day
    is_on_time = models.BooleanField(default=True)
    minutes_late = models.PositiveIntegerField(default=0)

    hours_worked = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    net_hours_worked = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)

    week_number = models.PositiveSmallIntegerField()
    year_number = models.PositiveSmallIntegerField()

    notes = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-day_date", "-session_number"]
        indexes = [
            models.Index(fields=["user", "day_date"], name="worksess_user_day_idx"),
            models.Index(fields=["user", "year_number", "week_number"], name="worksess_user_week_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(status="OPEN"),
                name="uniq_open_work_session_per_user",
            ),
            models.UniqueConstraint(
                fields=["user", "day_date", "session_number"],
                name="uniq_work_session_number_per_day",
            ),
        ]

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN

    def __str__(self):
        return f"WorkSession#{self.id} {self.user_id} {self.day_date} #{self.session_number} {self.status}"


class BreakSession(models.Model):
    work_session = models.ForeignKey(WorkSession, on_delete=models.CASCADE, related_name="breaks")
    break_type = models.CharField(max_length=10, choices=BreakType.choices, default=BreakType.MEAL)

    start_time = models.DateTimeField()
    end_time = models.DateTimeField(null=True, blank=True)

    max_allowed = models.PositiveSmallIntegerField()  # minutes
    is_paid = models.BooleanField(default=False)

    # filled when the break is closed with a full computation
    duration = models.PositiveIntegerField(null=True, blank=True)  # minutes
    is_overtime = models.BooleanField(default=False)
    overtime_minutes = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-start_time", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["work_session"],
                condition=Q(end_time__isnull=True),
                name="uniq_open_break_per_work_session",
            ),
        ]

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def __str__(self):
        return f"Break#{self.id} {self.break_type} session={self.work_session_id}"
