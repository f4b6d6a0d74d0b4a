from django.db import models

from core.models import OwnedModel


class IssueStatus(models.TextChoices):
    OPEN = "Open", "Open"
    IN_PROGRESS = "In Progress", "In Progress"
    RESOLVED = "Resolved", "Resolved"
    CLOSED = "Closed", "Closed"


class IssuePriority(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"


class IssueSeverity(models.TextChoices):
    CRITICAL = "Critical", "Critical"
    MAJOR = "Major", "Major"
    MINOR = "Minor", "Minor"


class Issue(OwnedModel):
    """
    A tracked issue. Readable by every authenticated user; only `created_by`
    may change or delete it (enforced in `issues.services`).

    Status has no transition graph: any value may follow any other.
    """
    title = models.CharField(max_length=200)
    description = models.TextField()
    status = models.CharField(max_length=16, choices=IssueStatus.choices, default=IssueStatus.OPEN)
    priority = models.CharField(max_length=8, choices=IssuePriority.choices, default=IssuePriority.MEDIUM)
    severity = models.CharField(max_length=8, choices=IssueSeverity.choices, default=IssueSeverity.MINOR)

    class Meta(OwnedModel.Meta):
        indexes = [
            models.Index(fields=["status"], name="issue_status_idx"),
            models.Index(fields=["priority"], name="issue_priority_idx"),
            models.Index(fields=["severity"], name="issue_severity_idx"),
            models.Index(fields=["-created_at"], name="issue_created_at_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.pk} {self.title} [{self.status}]"
