"""AppConfig for the `issues` domain app (models, service layer, API)."""

from django.apps import AppConfig


class IssuesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "issues"
