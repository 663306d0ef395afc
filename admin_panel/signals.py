from django.db.models.signals import post_save
from django.dispatch import receiver
from students.models import Application
from .models import Notification
import logging

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Application)
def notify_new_application(sender, instance, created, **kwargs):
    """Create notification when a new application is registered"""
    if created:
        try:
            Notification.objects.create(
                title="New Application",
                message=f"{instance.full_name} registered for {instance.internship_domain}",
                priority="LOW",
                object_id=str(instance.pk),
            )
        except Exception as e:
            logger.error(f"Failed to create notification: {str(e)}")
