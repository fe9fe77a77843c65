from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Role',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Role label (e.g., 'ROLE_EDITOR')", max_length=70, unique=True)),
            ],
            options={
                'db_table': 'user_management_roles',
                'ordering': ['name'],
            },
        ),
    ]
