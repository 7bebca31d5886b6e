from django.apps import AppConfig


class RevenueForecastConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "server.revenue_forecast"
    label = "revenue_forecast"
