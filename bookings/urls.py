from django.urls import path
from bookings.admin_views import (
    AdminBulkApproveView,
    AdminReservationApproveView,
    AdminReservationListView,
    AdminReservationRejectView,
)
from bookings.views import (
    ReservationCancelView,
    ReservationDetailView,
    ReservationQRView,
    ReservationResendEmailView,
    ReservationView,
)

urlpatterns = [
    path('', ReservationView.as_view(), name='reservation-list'),
    path('<uuid:reservation_id>/', ReservationDetailView.as_view(), name='reservation-detail'),
    path('<uuid:reservation_id>/cancel/', ReservationCancelView.as_view(), name='reservation-cancel'),
    path('<uuid:reservation_id>/qr/', ReservationQRView.as_view(), name='reservation-qr'),
    path('<uuid:reservation_id>/resend-email/', ReservationResendEmailView.as_view(), name='reservation-resend-email'),

    # Staff review
    path('admin/reservations/', AdminReservationListView.as_view(), name='admin-reservation-list'),
    path('admin/reservations/bulk-approve/', AdminBulkApproveView.as_view(), name='admin-reservation-bulk-approve'),
    path('admin/reservations/<uuid:reservation_id>/approve/', AdminReservationApproveView.as_view(), name='admin-reservation-approve'),
    path('admin/reservations/<uuid:reservation_id>/reject/', AdminReservationRejectView.as_view(), name='admin-reservation-reject'),
]
