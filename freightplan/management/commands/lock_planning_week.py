"""
Lock (or unlock) planning weeks.

Usage:
    python manage.py lock_planning_week --organization acme --week 12
    python manage.py lock_planning_week --organization acme --before 2026-03-01
    python manage.py lock_planning_week --organization acme --week 12 --unlock
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from freightplan.exceptions import PlanningError


class Command(BaseCommand):
    help = "Lock planning weeks so their forecasts and commitments can no longer change"

    def add_arguments(self, parser):
        parser.add_argument("--organization", required=True, help="Organization slug")
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument("--week", type=int, help="Planning week id")
        group.add_argument(
            "--before",
            type=date.fromisoformat,
            help="Lock every week that ended before this date (YYYY-MM-DD)",
        )
        parser.add_argument("--unlock", action="store_true", help="Unlock instead of lock")

    def handle(self, *args, **options):
        from freightplan.models import Organization
        from freightplan.service import Planner

        try:
            organization = Organization.objects.get(slug=options["organization"])
        except Organization.DoesNotExist:
            raise CommandError(f"Organization '{options['organization']}' not found")

        if options["before"]:
            week_ids = list(
                organization.planning_weeks.filter(
                    week_end__lt=options["before"], is_locked=options["unlock"]
                ).values_list("pk", flat=True)
            )
        else:
            week_ids = [options["week"]]

        operation = Planner.unlock_period if options["unlock"] else Planner.lock_period
        verb = "unlocked" if options["unlock"] else "locked"

        for week_id in week_ids:
            try:
                week = operation(organization, week_id)
            except PlanningError as e:
                raise CommandError(e.message)
            self.stdout.write(f"   • {week.display} {verb}")

        self.stdout.write(self.style.SUCCESS(f"✓ {len(week_ids)} week(s) {verb}"))
