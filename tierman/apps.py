from django.apps import AppConfig


class TiermanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tierman"
    verbose_name = "Tierman - Membership Tiers & Rewards"
