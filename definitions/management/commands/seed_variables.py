"""Seed VariableDefinition rows from the built-in variable registry."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from definitions.catalog import refresh_variable_catalog
from definitions.models import VariableDefinition
from formulas.registry import default_variable_descriptors


class Command(BaseCommand):
    """Create or update variable definitions from `formulas/data/default_variables.yaml`."""

    help = "Seed the variable catalog from the built-in registry (idempotent)."

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

        existing = {row.name: row for row in VariableDefinition.objects.all()}
        totals = {"processed": 0, "created": 0, "updated": 0, "no_change": 0}

        for position, descriptor in enumerate(default_variable_descriptors()):
            totals["processed"] += 1
            fields = {
                "label": descriptor.display_name,
                "category": descriptor.category,
                "description": descriptor.description,
                "example_usage": descriptor.example_usage,
                "value_type": descriptor.value_type,
                "derived": descriptor.derived,
                "sort_order": position,
            }
            row = existing.get(descriptor.name)
            created = row is None
            if row is None:
                row = VariableDefinition(name=descriptor.name)
            changed = created or any(getattr(row, key) != value for key, value in fields.items())
            if not changed:
                totals["no_change"] += 1
                continue

            totals["created"] += int(created)
            totals["updated"] += int(not created)

            if write:
                for key, value in fields.items():
                    setattr(row, key, value)
                row.save()

        if write:
            refresh_variable_catalog()

        mode = "CHECK" if check else "WRITE"
        self.stdout.write(f"[{mode}] {totals}")
        return None
