"""Tests for model helpers, enum transitions and the caller context.

Run with: pytest tests/test_models.py -v
"""

import re
from datetime import timedelta

import pytest
from django.utils import timezone
from django_enumfield.exceptions import InvalidStatusOperationError

from accounts.models import User
from bookings.models import Reservation, generate_reservation_code, reservation_expiry
from inventory.models import Seat
from SeatDesk.context import Actor
from SeatDesk.exceptions import ErrorCode, SeatUnavailableError, StaffOnlyError
from tests.helpers import create_user, reload


class TestReservationCode:
    """Tests for reservation code generation."""

    def test_code_format(self):
        """Codes look like RSV-<base36 millis>-<4 chars>."""
        assert re.match(r"^RSV-[0-9A-Z]+-[0-9A-Z]{4}$", generate_reservation_code())

    def test_codes_differ(self):
        """Consecutive codes are not repeated."""
        codes = {generate_reservation_code() for _ in range(50)}
        assert len(codes) > 1


class TestReservationExpiry:
    """Tests for the advisory reservation expiry."""

    def test_free_reservation_expires_in_two_hours(self):
        now = timezone.now()
        assert reservation_expiry(0, now=now) == now + timedelta(hours=2)

    def test_paid_reservation_expires_in_a_day(self):
        now = timezone.now()
        assert reservation_expiry(5000, now=now) == now + timedelta(hours=24)

    def test_expiry_hours_follow_settings(self, settings):
        settings.PAID_RESERVATION_EXPIRY_HOURS = 48
        now = timezone.now()
        assert reservation_expiry(100, now=now) == now + timedelta(hours=48)


class TestReservationStatusTransitions:
    """The reservation status enum rejects illegal transitions."""

    def test_pending_can_be_confirmed(self):
        reservation = Reservation(status=Reservation.RESERVATION_STATUS.PENDING)
        reservation.status = Reservation.RESERVATION_STATUS.CONFIRMED
        assert reservation.status == Reservation.RESERVATION_STATUS.CONFIRMED

    def test_confirmed_can_be_cancelled(self):
        reservation = Reservation(status=Reservation.RESERVATION_STATUS.CONFIRMED)
        reservation.status = Reservation.RESERVATION_STATUS.CANCELLED
        assert reservation.status == Reservation.RESERVATION_STATUS.CANCELLED

    def test_cancelled_cannot_be_confirmed(self):
        reservation = Reservation(status=Reservation.RESERVATION_STATUS.CANCELLED)
        with pytest.raises(InvalidStatusOperationError):
            reservation.status = Reservation.RESERVATION_STATUS.CONFIRMED

    def test_nothing_returns_to_pending(self):
        reservation = Reservation(status=Reservation.RESERVATION_STATUS.CONFIRMED)
        with pytest.raises(InvalidStatusOperationError):
            reservation.status = Reservation.RESERVATION_STATUS.PENDING

    def test_used_ticket_cannot_be_cancelled(self):
        reservation = Reservation(status=Reservation.RESERVATION_STATUS.USED)
        with pytest.raises(InvalidStatusOperationError):
            reservation.status = Reservation.RESERVATION_STATUS.CANCELLED


@pytest.mark.django_db
class TestReservationSave:
    """Tests for fields derived on save."""

    def test_save_fills_code_and_expiry(self, user, event, seat):
        reservation = Reservation.objects.create(user_id=user, event_id=event, seat_id=seat)
        assert reservation.reservation_code.startswith("RSV-")
        assert reservation.expires_at is not None
        assert reservation.is_active()


class TestSeatHelpers:
    """Tests for seat hold helpers."""

    def test_seat_label(self):
        seat = Seat(section="orchestra", row_label="B", seat_number=12)
        assert seat.seat_label == "ORCHESTRA-B12"

    def test_live_and_lapsed_holds(self):
        now = timezone.now()
        seat = Seat(status=Seat.SEAT_STATUS.RESERVED, is_reserved=True, hold_expiry=now + timedelta(minutes=1))
        assert seat.hold_is_active(now)
        assert not seat.hold_has_expired(now)
        assert seat.hold_has_expired(now + timedelta(minutes=2))

    def test_reservation_owned_seat_is_not_a_hold(self):
        seat = Seat(status=Seat.SEAT_STATUS.RESERVED, is_reserved=True, hold_expiry=None)
        assert not seat.is_held()
        assert not seat.hold_has_expired()

    def test_clear_hold(self):
        seat = Seat(status=Seat.SEAT_STATUS.RESERVED, is_reserved=True, hold_expiry=timezone.now())
        seat.clear_hold()
        assert seat.status == Seat.SEAT_STATUS.AVAILABLE
        assert not seat.is_reserved
        assert seat.hold_expiry is None
        assert seat.held_by_id is None


class TestActor:
    """Tests for the explicit caller context."""

    def test_staff_roles(self):
        assert Actor(user_id=None, role="ADMIN").is_staff
        assert Actor(user_id=None, role="STAFF").is_staff
        assert not Actor(user_id=None, role="USER").is_staff

    def test_require_staff(self):
        with pytest.raises(StaffOnlyError):
            Actor(user_id=None, role="USER").require_staff()


@pytest.mark.django_db
class TestUser:
    """Tests for the account model."""

    def test_email_is_normalized(self):
        user = create_user("  Carol@Example.COM ")
        assert reload(user).email == "carol@example.com"

    def test_is_active(self, user):
        assert user.is_active
        user.status = User.USER_STATUS.INACTIVE
        assert not user.is_active

    def test_staff_role(self, user, staff_user):
        assert staff_user.is_staff_role
        assert not user.is_staff_role
        assert Actor.from_user(staff_user).is_staff


class TestDomainErrors:
    """Tests for the error taxonomy."""

    def test_default_message_and_code(self):
        error = SeatUnavailableError()
        assert error.code == ErrorCode.CONFLICT
        assert error.message == "Seat is not available"
        assert str(error) == "CONFLICT: Seat is not available"

    def test_custom_message(self):
        assert SeatUnavailableError("taken").message == "taken"
