# management/commands/reconcile_billing_records.py

"""
Re-derive amount paid, balance and status of billing records from their
payment entries and report the records whose stored values had drifted.

USAGE EXAMPLES:
===============

# 1. Fix every drifted record
python manage.py reconcile_billing_records

# 2. Only report, change nothing
python manage.py reconcile_billing_records --dry-run

# 3. Limit to one billing period
python manage.py reconcile_billing_records --period 2026-01
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
import logging

from fees.exceptions import InvalidBillingPeriod
from fees.models import BillingRecord
from fees.services import PaymentLedger
from fees.utils import validate_billing_period

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Re-derive billing records from their payment entries and report drift'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run', action='store_true',
            help='Report drifted records without saving them'
        )
        parser.add_argument(
            '--period', type=str, default=None,
            help='Only check records of this billing period (YYYY-MM)'
        )

    def handle(self, *args, **options):
        records = BillingRecord.objects.select_related('student').prefetch_related('payments')

        if options['period']:
            try:
                period = validate_billing_period(options['period'])
            except InvalidBillingPeriod as e:
                raise CommandError(e.messages[0])
            records = records.filter(billing_period=period)

        dry_run = options['dry_run']
        checked = 0
        drifted = 0

        for record in records.iterator(chunk_size=500):
            checked += 1
            summary = PaymentLedger.reconcile(
                record.total_amount, [entry.amount for entry in record.payments.all()]
            )
            stored = (record.amount_paid, record.balance, record.status)
            derived = (summary.amount_paid, summary.balance, summary.status)
            if stored == derived:
                continue

            drifted += 1
            self.stdout.write(self.style.WARNING(
                f"{record.student.full_name} {record.billing_period} ({record.pk}): "
                f"stored paid={stored[0]} balance={stored[1]} status={stored[2]}, "
                f"derived paid={derived[0]} balance={derived[1]} status={derived[2]}"
            ))

            if not dry_run:
                with transaction.atomic():
                    locked = BillingRecord.objects.select_for_update().get(pk=record.pk)
                    locked.save()
                logger.info(f"Reconciled drifted billing record {record.pk}")

        if drifted == 0:
            self.stdout.write(self.style.SUCCESS(f"Checked {checked} billing records, none drifted"))
        elif dry_run:
            self.stdout.write(self.style.WARNING(
                f"Checked {checked} billing records, {drifted} drifted (dry run, nothing saved)"
            ))
        else:
            self.stdout.write(self.style.SUCCESS(
                f"Checked {checked} billing records, reconciled {drifted}"
            ))
