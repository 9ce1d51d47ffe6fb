import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('api', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SpinState',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('cycle_id', models.CharField(max_length=9)),
                ('month', models.CharField(max_length=64)),
                ('is_spinning', models.BooleanField(default=False)),
                ('started_at', models.DateTimeField(default=None, null=True)),
                ('started_by', models.CharField(default=None, max_length=254, null=True)),
            ],
            options={
                'db_table': 'game_state',
            },
        ),
        migrations.CreateModel(
            name='WinnerArchive',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('winner_name', models.CharField(max_length=200)),
                ('draw_month', models.CharField(max_length=64)),
                ('draw_year', models.IntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'winners',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Draw',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('cycle_id', models.CharField(db_index=True, max_length=9)),
                ('month', models.CharField(max_length=64)),
                ('winner_name', models.CharField(max_length=200)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('winner', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, to='api.participant')),
            ],
            options={
                'db_table': 'draws',
                'ordering': ['-timestamp'],
            },
        ),
    ]
