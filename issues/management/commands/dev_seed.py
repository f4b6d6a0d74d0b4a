"""
Seed development data for the issue tracker.

Goals
-----
- Fast local onboarding with deterministic sample data: the same options
  always produce the same users and issues.
- Idempotent-ish: users are `get_or_create`d and issues are keyed on
  (creator, title), so re-running does not create duplicates.

What it creates
---------------
- `--users` demo accounts (`demo1@example.com`, `demo2@example.com`, ...)
  sharing one known password. The first one is staff.
- `--issues` issues per user, cycling through every status, priority and
  severity so filters and stats have something to show.

Safety
------
- `--reset` hard-deletes every issue (all users) before seeding.
- `handle` runs in one transaction so a failed run leaves nothing behind.

Usage
-----
    python manage.py dev_seed
    python manage.py dev_seed --users 3 --issues 20 --reset
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandParser
from django.db import transaction

from issues.models import Issue, IssuePriority, IssueSeverity, IssueStatus

User = get_user_model()

DEMO_PASSWORD = "demo12345"

SAMPLE_ISSUES = [
    ("Login button unresponsive", "Clicking the login button does nothing on Safari."),
    ("Dashboard crash on load", "The dashboard crashes when the stats request times out."),
    ("Typo in footer", "The footer says 'Isue Tracker'."),
    ("Pagination skips a page", "Going from page 1 to page 2 skips ten results."),
    ("Search ignores description", "Searching only matches titles, not descriptions."),
    ("Slow issue list", "Listing issues takes several seconds with many rows."),
    ("Dark mode contrast", "Badge text is hard to read in dark mode."),
    ("Session expires too early", "Users get logged out after a few minutes."),
]


class Command(BaseCommand):
    """
    Seed deterministic development data.

    Options:
        --users  : number of demo accounts (default 2)
        --issues : issues per account (default 8)
        --reset  : delete all issues before seeding
    """
    help = "Seed demo users and issues (idempotent). Use --reset to clear existing issues first."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--users", type=int, default=2, help="How many demo users to ensure.")
        parser.add_argument("--issues", type=int, default=8, help="How many issues per user.")
        parser.add_argument(
            "--reset",
            action="store_true",
            default=False,
            help="Delete every issue (all users) before seeding.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["users"] < 1 or options["issues"] < 0:
            self.stderr.write(self.style.ERROR("--users must be >= 1 and --issues >= 0."))
            return

        if options["reset"]:
            deleted, _ = Issue.objects.all().delete()
            self.stdout.write(self.style.WARNING(f"Deleted {deleted} existing issues."))

        users = self._ensure_users(options["users"])
        self.stdout.write(self.style.SUCCESS(f"Users ready: {', '.join(u.email for u in users)}"))

        for offset, user in enumerate(users):
            created = self._seed_for_user(user, options["issues"], offset)
            self.stdout.write(f"Seeded for {user.email}: {created} new issues.")

        self.stdout.write(self.style.SUCCESS("Seeding complete."))

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------
    def _ensure_users(self, count: int) -> list:
        users = []
        for n in range(1, count + 1):
            user, _ = User.objects.get_or_create(
                email=f"demo{n}@example.com",
                defaults={"name": f"Demo User {n}"},
            )
            user.set_password(DEMO_PASSWORD)
            user.is_staff = n == 1
            user.save(update_fields=["password", "is_staff"])
            users.append(user)
        return users

    def _seed_for_user(self, user, count: int, offset: int) -> int:
        """Create up to `count` issues for `user`; returns how many were new."""
        statuses, priorities, severities = IssueStatus.values, IssuePriority.values, IssueSeverity.values

        created_count = 0
        for n in range(count):
            base_title, description = SAMPLE_ISSUES[n % len(SAMPLE_ISSUES)]
            title = base_title if n < len(SAMPLE_ISSUES) else f"{base_title} ({n // len(SAMPLE_ISSUES) + 1})"
            k = n + offset
            _, created = Issue.objects.get_or_create(
                created_by=user,
                title=title,
                defaults={
                    "description": description,
                    "status": statuses[k % len(statuses)],
                    "priority": priorities[k % len(priorities)],
                    "severity": severities[k % len(severities)],
                },
            )
            created_count += int(created)
        return created_count
