from django.apps import AppConfig

class AdminListConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'adminlist'
    verbose_name = 'Admin List'
