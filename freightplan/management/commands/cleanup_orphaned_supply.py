"""
Remove supply commitments on routes with no demand.

Usage:
    python manage.py cleanup_orphaned_supply --organization acme --week 12
    python manage.py cleanup_orphaned_supply --organization acme --all-weeks
"""

from django.core.management.base import BaseCommand, CommandError

from freightplan.exceptions import PlanningError


class Command(BaseCommand):
    help = "Remove supply commitments whose route has no demand forecast in the week"

    def add_arguments(self, parser):
        parser.add_argument("--organization", required=True, help="Organization slug")
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument("--week", type=int, help="Planning week id")
        group.add_argument(
            "--all-weeks",
            action="store_true",
            help="Clean every unlocked planning week of the organization",
        )

    def handle(self, *args, **options):
        from freightplan.models import Organization
        from freightplan.service import Planner

        try:
            organization = Organization.objects.get(slug=options["organization"])
        except Organization.DoesNotExist:
            raise CommandError(f"Organization '{options['organization']}' not found")

        if options["all_weeks"]:
            week_ids = list(
                organization.planning_weeks.filter(is_locked=False).values_list("pk", flat=True)
            )
        else:
            week_ids = [options["week"]]

        total = 0
        for week_id in week_ids:
            try:
                deleted = Planner.cleanup_orphaned_commitments(organization, week_id)
            except PlanningError as e:
                raise CommandError(e.message)
            total += deleted
            self.stdout.write(f"   • week {week_id}: {deleted} removed")

        self.stdout.write(self.style.SUCCESS(f"✓ {total} orphaned commitment(s) removed"))
