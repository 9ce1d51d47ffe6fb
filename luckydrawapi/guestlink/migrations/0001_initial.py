from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='GuestToken',
            fields=[
                ('token', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField()),
                ('expires_at', models.DateTimeField()),
                ('created_by', models.CharField(max_length=254, null=True)),
                ('cycle_id', models.CharField(max_length=9)),
                ('month', models.CharField(max_length=64)),
            ],
            options={
                'db_table': 'guest_tokens',
                'ordering': ['-created_at'],
            },
        ),
    ]
