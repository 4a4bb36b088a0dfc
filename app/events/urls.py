from django.urls import path

from events.views import DonationTotalsView, PayoutAccountView

app_name = "events"
urlpatterns = [
    path("<uuid:pk>/payout-account/", PayoutAccountView.as_view(), name="payout-account"),
    path("<uuid:pk>/donations/", DonationTotalsView.as_view(), name="donation-totals"),
]
