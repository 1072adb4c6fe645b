from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # Payment ViewSet routes
    # GET    /api/payments/                  - List payments
    # POST   /api/payments/                  - Record payment (manager)
    # GET    /api/payments/{id}/             - Payment detail
    # POST   /api/payments/{id}/validate/    - Validate payment (admin)

    # Custom actions
    # GET    /api/payments/pending/          - Unsettled payments
    # GET    /api/payments/recent/           - Latest settled payments
    # POST   /api/payments/check-overdue/    - Overdue sweep (admin)
    # POST   /api/payments/send-reminders/   - Payment reminders (admin)
    # POST   /api/payments/open-cycle/       - Open billing cycle (admin)
    path('', include(router.urls)),
]
