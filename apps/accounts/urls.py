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
    path('password-strength/', views.password_strength, name='password-strength'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
    path('user/update/', views.update_profile, name='update-profile'),
    path('user/change-password/', views.change_password, name='change-password'),
    path('user/activity/', views.my_activity, name='my-activity'),

    # User management (admins)
    # GET/POST /api/auth/users/
    # GET/PATCH /api/auth/users/{id}/
    # POST /api/auth/users/{id}/toggle_status/
    # POST /api/auth/users/{id}/reset_password/
    path('', include(router.urls)),
]
