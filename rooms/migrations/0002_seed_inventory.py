from django.db import migrations

from rooms.inventory import seed_inventory


def create_rooms(apps, schema_editor):
    seed_inventory(room_model=apps.get_model('rooms', 'Room'))


def remove_rooms(apps, schema_editor):
    apps.get_model('rooms', 'Room').objects.all().delete()


class Migration(migrations.Migration):

    dependencies = [
        ('rooms', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_rooms, remove_rooms),
    ]
