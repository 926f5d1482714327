from django.db import migrations

ACCOMMODATIONS = [
    {
        "name": "Esperança Terrace",
        "max_guests": 4,
        "amenities": ["wifi", "kitchen", "terrace", "air_conditioning"],
    },
    {
        "name": "Nattura Gerês Village",
        "max_guests": 8,
        "amenities": ["wifi", "kitchen", "pool", "garden", "parking"],
    },
    {
        "name": "Douro & Sabor Escape",
        "max_guests": 6,
        "amenities": ["wifi", "kitchen", "river_view", "parking"],
    },
]


def seed_accommodations(apps, schema_editor):
    Accommodation = apps.get_model("accommodations", "Accommodation")
    for data in ACCOMMODATIONS:
        Accommodation.objects.get_or_create(name=data["name"], defaults=data)


def remove_accommodations(apps, schema_editor):
    Accommodation = apps.get_model("accommodations", "Accommodation")
    Accommodation.objects.filter(name__in=[data["name"] for data in ACCOMMODATIONS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("accommodations", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_accommodations, remove_accommodations),
    ]
