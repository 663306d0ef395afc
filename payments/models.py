from django.db import models


class PlatformSetting(models.Model):
    """Key/value configuration editable from the admin, e.g. ``upi_id``."""
    UPI_ID = "upi_id"

    setting_key = models.CharField(max_length=100, unique=True)
    setting_value = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['setting_key']

    def __str__(self):
        return f"{self.setting_key} = {self.setting_value}"
