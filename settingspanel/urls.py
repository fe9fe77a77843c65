from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # Settings panel
    path('settings/roles/', include('user_management.role_urls')),
]
