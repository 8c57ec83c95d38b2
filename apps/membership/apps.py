from django.apps import AppConfig


class MembershipConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.membership'
    verbose_name = 'Membership'

    def ready(self):
        from . import signals  # noqa: F401
