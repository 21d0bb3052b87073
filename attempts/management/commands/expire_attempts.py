from django.core.management.base import BaseCommand
from django.utils import timezone

from attempts.exceptions import InvalidStateError
from attempts.services import AttemptLedger


class Command(BaseCommand):
    help = "Auto-submit in-progress attempts that have run past their quiz's time limit."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Print actions but do not write.")

    def handle(self, *args, **opts):
        dry = opts["dry_run"]
        ledger = AttemptLedger()
        now = timezone.now()

        expired = ledger.find_expired(now)

        submitted = 0
        for attempt in expired:
            if dry:
                self.stdout.write(f"[DRY] Would submit attempt {attempt.pk} ({attempt.student} on {attempt.quiz})")
                continue
            try:
                ledger.expire_attempt(attempt.pk)
            except InvalidStateError:
                # submitted by the student between the scan and now
                continue
            submitted += 1

        self.stdout.write(self.style.SUCCESS(f"Expired attempts submitted: {submitted}"))
