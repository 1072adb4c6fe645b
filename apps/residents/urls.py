from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'residents'

# Router for ViewSets
# Note: tokens must be registered BEFORE empty prefix to avoid URL conflicts
router = DefaultRouter()
router.register(r'tokens', views.TokenViewSet, basename='token')
router.register(r'', views.ResidentViewSet, basename='resident')

urlpatterns = [
    # POST   /api/residents/bulk-upload/          - Register many residents
    path('bulk-upload/', views.bulk_upload, name='bulk-upload'),

    # Resident ViewSet routes
    # GET    /api/residents/                      - List residents
    # POST   /api/residents/                      - Register resident
    # GET    /api/residents/{id}/                 - Resident detail
    # PATCH  /api/residents/{id}/                 - Edit resident
    # DELETE /api/residents/{id}/                 - Delete resident

    # Custom actions
    # GET    /api/residents/{id}/payments/        - Payment history
    # GET    /api/residents/{id}/tokens/          - Resident tokens
    # POST   /api/residents/{id}/send-whatsapp/   - Direct WhatsApp message
    # POST   /api/residents/{id}/send-alert/      - Record in-app alert

    # Token routes
    # GET    /api/residents/tokens/               - List tokens
    # POST   /api/residents/tokens/               - Issue token
    # PATCH  /api/residents/tokens/{id}/          - Rename / (de)activate
    # DELETE /api/residents/tokens/{id}/          - Delete token
    path('', include(router.urls)),
]
