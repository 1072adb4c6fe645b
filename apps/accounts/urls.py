from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # Current user
    path('me/', views.get_current_user, name='current-user'),

    # Account management
    # GET    /api/auth/users/        - List accounts (manager)
    # POST   /api/auth/users/        - Create account (admin)
    # GET    /api/auth/users/{id}/   - Account detail (manager)
    # PATCH  /api/auth/users/{id}/   - Edit role/name/status (admin)
    # DELETE /api/auth/users/{id}/   - Deactivate (admin)
    path('', include(router.urls)),
]
