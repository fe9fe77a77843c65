from django.db import models


class Role(models.Model):
    """Named permission label (e.g. 'ROLE_EDITOR') managed from the settings panel"""
    name = models.CharField(
        max_length=70,
        unique=True,
        help_text="Role label (e.g., 'ROLE_EDITOR')"
    )

    class Meta:
        db_table = 'user_management_roles'
        ordering = ['name']

    def __str__(self):
        return self.name
