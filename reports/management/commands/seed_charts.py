"""Seed chart configurations from the built-in chart definitions."""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from formulas.chart_config_codec import encode_chart_configuration
from formulas.registry import default_chart_configurations
from reports.models import ChartConfiguration
from reports.services import chart_configuration_to_dto, save_chart_configuration


class Command(BaseCommand):
    """Create or update chart configurations from `formulas/data/default_charts.yaml`."""

    help = "Seed chart configurations from the built-in definitions (idempotent)."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: report what would change without writing.",
        )
        parser.add_argument(
            "--write",
            action="store_true",
            help="Write changes to the database.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        check: bool = options["check"]
        write: bool = options["write"]

        if check and write:
            raise CommandError("Use either --check or --write, not both.")
        if not check and not write:
            raise CommandError("Refusing to write without explicit intent; pass --check or --write.")

        existing = {
            row.chart_id: row for row in ChartConfiguration.objects.prefetch_related("elements")
        }
        totals = {"processed": 0, "created": 0, "updated": 0, "no_change": 0}

        for config in default_chart_configurations():
            totals["processed"] += 1
            row = existing.get(config.chart_id)
            created = row is None
            changed = created or (
                encode_chart_configuration(chart_configuration_to_dto(row)) != encode_chart_configuration(config)
            )
            if not changed:
                totals["no_change"] += 1
                continue

            totals["created"] += int(created)
            totals["updated"] += int(not created)

            if write:
                try:
                    save_chart_configuration(config)
                except ValidationError as exc:
                    raise CommandError(f"Chart {config.chart_id} is invalid: {'; '.join(exc.messages)}") from exc

        mode = "CHECK" if check else "WRITE"
        self.stdout.write(f"[{mode}] {totals}")
        return None
