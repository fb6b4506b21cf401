from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('rooms', '0002_seed_inventory'),
    ]

    operations = [
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_numbers', models.JSONField(default=list)),
                ('total_travel_time', models.PositiveIntegerField(default=0)),
                ('source', models.CharField(choices=[('request', 'REQUEST'), ('simulated', 'SIMULATED')], db_index=True, default='request', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
