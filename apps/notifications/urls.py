from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'notifications'

router = DefaultRouter()
router.register(r'', views.NotificationViewSet, basename='notification')

urlpatterns = [
    # POST   /api/notifications/bulk-send/   - Bulk WhatsApp (admin)
    path('bulk-send/', views.bulk_send, name='bulk-send'),

    # GET    /api/notifications/status/      - Backend readiness
    path('status/', views.backend_status, name='status'),

    # GET    /api/notifications/             - Notification log
    # GET    /api/notifications/{id}/        - Notification detail
    path('', include(router.urls)),
]
