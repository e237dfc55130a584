# finance/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import PayoutViewSet, ReportViewSet

router = DefaultRouter()
router.register('payouts', PayoutViewSet, basename='payout')
router.register('reports', ReportViewSet, basename='report')

urlpatterns = [
    path('', include(router.urls)),
]

# The resulting URL patterns will be:
#
# - GET    /api/finance/payouts/                       -> own payouts and balance (all payouts for admins)
# - GET    /api/finance/payouts/balance/               -> psychologist's available balance
# - POST   /api/finance/payouts/request-payout/        -> withdraw the whole balance
# - POST   /api/finance/payouts/{id}/approve/          -> admin marks payout as paid
# - POST   /api/finance/payouts/{id}/reject/           -> admin rejects payout
# - GET    /api/finance/reports/summary/               -> admin dashboard figures
# - GET    /api/finance/reports/transactions/          -> every session with its commission
