"""Tests for the management commands and the QR encoder.

Run with: pytest tests/test_commands.py -v
"""

import base64
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from accounts.models import User
from bookings.qr import decode_data_url, encode_qr, save_qr_to_file
from inventory.holds import hold_seat
from inventory.models import Seat
from tests.helpers import reload

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestGenerateSeatsCommand:

    def test_generates_with_options(self, event):
        output = run("generate_seats", str(event.events_id), "--max-seats", "40", "--vip-count", "4")

        assert "Generated 40 seats" in output
        assert Seat.objects.filter(event_id=event).count() == 40
        assert Seat.objects.filter(event_id=event, is_vip=True).count() == 4

    def test_unknown_event(self, db):
        with pytest.raises(CommandError):
            run("generate_seats", "not-a-uuid")


@pytest.mark.django_db
class TestReclaimHoldsCommand:

    def test_reclaims_lapsed_holds(self, seat, actor):
        hold_seat(seat.seat_id, actor, now=timezone.now() - timedelta(minutes=30))

        output = run("reclaim_holds")

        assert "Reclaimed 1" in output
        assert reload(seat).status == Seat.SEAT_STATUS.AVAILABLE

    def test_scoped_to_event(self, event, seat, actor):
        hold_seat(seat.seat_id, actor, now=timezone.now() - timedelta(minutes=30))

        output = run("reclaim_holds", "--event-id", str(event.events_id))

        assert "Reclaimed 1" in output

    @pytest.mark.parametrize("event_id", ["not-a-uuid", "00000000-0000-0000-0000-000000000000"])
    def test_bad_event_id(self, db, event_id):
        with pytest.raises(CommandError, match="not found"):
            run("reclaim_holds", "--event-id", event_id)


@pytest.mark.django_db
class TestCreateUserCommand:

    def test_creates_staff(self):
        run("create_user", "Door@Example.com", "s3cret-pass", "--role", "STAFF")

        user = User.objects.get(email="door@example.com")
        assert user.user_type == User.USER_TYPE.STAFF
        assert user.check_password("s3cret-pass")

    def test_resets_existing(self, user):
        output = run("create_user", user.email, "another-pass")
        assert output.startswith("Updated")
        assert reload(user).check_password("another-pass")

    def test_short_password(self, db):
        with pytest.raises(CommandError):
            run("create_user", "x@example.com", "short")


class TestQrEncoding:

    def test_encode_qr_renders_png(self):
        data_url = encode_qr({'reservationCode': "RES-TEST-0001"})

        mime, content = decode_data_url(data_url)
        assert mime == "image/png"
        assert content.startswith(PNG_SIGNATURE)

    @pytest.mark.parametrize("value", [None, "", "plain text", "data:text/plain;base64,aGk="])
    def test_decode_rejects_non_images(self, value):
        assert decode_data_url(value) is None

    def test_save_to_storage(self, settings, tmp_path):
        settings.MEDIA_ROOT = str(tmp_path)
        data_url = "data:image/png;base64," + base64.b64encode(PNG_SIGNATURE).decode()

        name = save_qr_to_file(data_url, "RES-TEST-0001")

        assert name.startswith("qrcodes/qr_RES-TEST-0001_")
        assert (tmp_path / name).read_bytes() == PNG_SIGNATURE
