"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User, UserActiveSession
from events.models import Events, Venue
from inventory.models import Seat
from SeatDesk.context import Actor
from SeatDesk.utils import generate_jwt_token
from tests.helpers import create_user


@pytest.fixture(autouse=True)
def seatdesk_settings(settings):
    settings.ENABLE_CACHING = False
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.QR_ENCODER = "tests.fakes.encode_stub"
    settings.SAVE_QR_FILES = False
    return settings


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    return create_user("alice@example.com")


@pytest.fixture
def other_user(db):
    return create_user("bob@example.com")


@pytest.fixture
def staff_user(db):
    return create_user("staff@example.com", role=User.USER_TYPE.STAFF)


@pytest.fixture
def actor(user):
    return Actor.from_user(user)


@pytest.fixture
def other_actor(other_user):
    return Actor.from_user(other_user)


@pytest.fixture
def staff_actor(staff_user):
    return Actor.from_user(staff_user)


@pytest.fixture
def venue(db):
    return Venue.objects.create(name="Grand Theater", city="Manila", capacity_hint=1196)


@pytest.fixture
def make_event(venue):
    def _make_event(**overrides):
        fields = {
            'venue_id': venue,
            'event_name': "Spring Concert",
            'event_date': timezone.now() + timedelta(days=7),
            'status': Events.EVENT_STATUS.PUBLISHED,
        }
        fields.update(overrides)
        return Events.objects.create(**fields)
    return _make_event


@pytest.fixture
def event(make_event):
    return make_event()


@pytest.fixture
def make_seat(event):
    def _make_seat(seat_number=1, price_cents=0, for_event=None, **overrides):
        return Seat.objects.create(
            event_id=for_event or event,
            section=overrides.pop('section', "orchestra"),
            row_label=overrides.pop('row_label', "A"),
            seat_number=seat_number,
            price_cents=price_cents,
            **overrides
        )
    return _make_seat


@pytest.fixture
def seat(make_seat):
    return make_seat(seat_number=1)


@pytest.fixture
def paid_seat(make_seat):
    return make_seat(seat_number=2, price_cents=5000)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def client_for(db):
    """APIClient authenticated as the given user through an active session."""
    def _client_for(user):
        token = generate_jwt_token(user.user_id, user.email, user.name, user.role)
        UserActiveSession.objects.create(user_id=user, access_token=token)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client
    return _client_for
