from datetime import timedelta

from django.core.management.base import BaseCommand

from registry_core.workflows.claim_monitor import check_stale_claims, stale_claim_threshold


class Command(BaseCommand):
    help = "Raise alerts for submissions claimed longer than the stale-claim threshold"

    def add_arguments(self, parser):
        parser.add_argument(
            "--hours",
            type=int,
            default=None,
            help="Override REGISTRY_STALE_CLAIM_HOURS for this run.",
        )

    def handle(self, *args, **options):
        hours = options.get("hours")
        threshold = timedelta(hours=hours) if hours else stale_claim_threshold()

        created = check_stale_claims(threshold=threshold)

        self.stdout.write(
            f"{created} new stale-claim alert(s) (threshold {threshold})."
        )
