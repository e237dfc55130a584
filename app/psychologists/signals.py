# psychologists/signals.py
from django.db.models.signals import post_save
from django.dispatch import receiver
import logging

from users.models import User
from .services import PsychologistService

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_psychologist_profile(sender, instance, created, **kwargs):
    """
    Create the default Psychologist profile and weekly availability when a
    new user with type 'Psychologist' is created
    """
    if created and instance.user_type == 'Psychologist':
        PsychologistService.create_default_profile(instance)
        logger.info(f"Psychologist profile created for user: {instance.email}")
