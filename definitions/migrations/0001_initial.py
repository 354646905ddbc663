from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="VariableDefinition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "name",
                    models.CharField(
                        help_text="Token used inside brackets, e.g. `stats.female`.", max_length=120, unique=True
                    ),
                ),
                ("label", models.CharField(max_length=120)),
                ("category", models.CharField(db_index=True, max_length=60)),
                ("description", models.TextField(blank=True)),
                ("example_usage", models.CharField(blank=True, max_length=200)),
                (
                    "value_type",
                    models.CharField(
                        choices=[
                            ("count", "Count"),
                            ("percentage", "Percentage"),
                            ("currency", "Currency"),
                            ("numeric", "Numeric"),
                            ("text", "Text"),
                        ],
                        default="count",
                        max_length=20,
                    ),
                ),
                ("derived", models.BooleanField(default=False, help_text="Computed from other statistics.")),
                ("is_active", models.BooleanField(default=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Variable definition",
                "verbose_name_plural": "Variable definitions",
                "ordering": ["sort_order", "name"],
            },
        ),
    ]
