"""
URL patterns for seat maps, holds and layout generation
"""
from django.urls import path
from inventory.views import AdminSeatGenerationView
from inventory.user_views import (
    SeatAvailabilityView,
    SeatHoldView,
    SeatListView,
    SeatReleaseView,
)

urlpatterns = [
    # Public seat maps
    path('events/<uuid:event_id>/seats/', SeatListView.as_view(), name='event-seats'),
    path('events/<uuid:event_id>/availability/', SeatAvailabilityView.as_view(), name='event-availability'),

    # Holds
    path('seats/<uuid:seat_id>/hold/', SeatHoldView.as_view(), name='seat-hold'),
    path('seats/<uuid:seat_id>/release/', SeatReleaseView.as_view(), name='seat-release'),

    # Layout
    path('admin/events/<uuid:event_id>/generate-seats/', AdminSeatGenerationView.as_view(), name='admin-generate-seats'),
]
