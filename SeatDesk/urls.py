from django.urls import include, path

urlpatterns = [
    path('accounts/', include('accounts.urls')),
    path('inventory/', include('inventory.urls')),
    path('bookings/', include('bookings.urls')),
]
