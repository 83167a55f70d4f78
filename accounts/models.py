from uuid import uuid4

from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django_enumfield import enum

STAFF_ROLES = ("ADMIN", "STAFF")


class User(models.Model):
    """A booking account; ADMIN and STAFF may review reservations."""

    class Meta:
        db_table = "user"

    class USER_STATUS(enum.Enum):
        ACTIVE = 1
        INACTIVE = 2

    class USER_TYPE(enum.Enum):
        USER = 1
        ADMIN = 2
        STAFF = 3

    user_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=256)
    user_type = enum.EnumField(USER_TYPE, default=USER_TYPE.USER)
    status = enum.EnumField(USER_STATUS, default=USER_STATUS.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        # Logins look emails up verbatim
        self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    @property
    def role(self):
        return self.USER_TYPE(self.user_type).name

    @property
    def is_active(self):
        return self.status == self.USER_STATUS.ACTIVE

    @property
    def is_staff_role(self):
        return self.role in STAFF_ROLES

    def __str__(self):
        return self.email


class UserActiveSession(models.Model):
    """The one live access token of a user; logout deletes it."""

    class Meta:
        db_table = "user_active_session"

    user_active_session_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    user_id = models.ForeignKey(User, on_delete=models.CASCADE, related_name="active_sessions")
    access_token = models.CharField(max_length=512, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_access_datetime = models.DateTimeField(auto_now=True)
