import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ChartConfiguration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("chart_id", models.SlugField(max_length=100, unique=True)),
                ("title", models.CharField(max_length=200)),
                (
                    "chart_type",
                    models.CharField(
                        choices=[
                            ("pie", "Pie (2 elements)"),
                            ("bar", "Bar (5 elements)"),
                            ("kpi", "KPI (1 element)"),
                            ("text", "Text (1 element)"),
                            ("image", "Image (1 element)"),
                            ("value", "Value (KPI + 5 bars)"),
                        ],
                        max_length=10,
                    ),
                ),
                ("order", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("subtitle", models.CharField(blank=True, max_length=200)),
                ("show_total", models.BooleanField(default=False)),
                ("total_label", models.CharField(blank=True, max_length=200)),
                ("kpi_formula", models.TextField(blank=True)),
                (
                    "kpi_formatting",
                    models.JSONField(
                        blank=True,
                        help_text='Value charts only, e.g. {"rounded": true, "prefix": "€"}.',
                        null=True,
                    ),
                ),
                (
                    "bar_formatting",
                    models.JSONField(
                        blank=True,
                        help_text='Value charts only, e.g. {"rounded": true, "prefix": "€"}.',
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["order", "chart_id"],
            },
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=200, unique=True)),
                ("event_date", models.DateField(blank=True, null=True)),
                ("stats", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-event_date", "name"],
            },
        ),
        migrations.CreateModel(
            name="ChartElement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("element_id", models.SlugField(max_length=100)),
                ("label", models.CharField(max_length=200)),
                ("formula", models.TextField()),
                ("color", models.CharField(default="#cccccc", max_length=20)),
                ("formatting", models.JSONField(blank=True, null=True)),
                ("parameters", models.JSONField(blank=True, default=dict)),
                ("manual_data", models.JSONField(blank=True, default=dict)),
                ("description", models.CharField(blank=True, max_length=300)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "configuration",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="elements",
                        to="reports.chartconfiguration",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("configuration", "element_id"), name="uniq_chart_element_id")
                ],
            },
        ),
    ]
