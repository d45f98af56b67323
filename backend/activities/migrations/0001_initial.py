import django.core.validators
import django.db.models.deletion
import django.db.models.manager
from django.conf import settings
from django.db import migrations, models


ONE_TO_TEN = [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(10)]
CLASSIFICATIONS = [('SIGNAL', 'Signal'), ('NOISE', 'Noise'), ('NEUTRAL', 'Neutral')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('goals', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.TextField(verbose_name='description')),
                ('duration_minutes', models.PositiveIntegerField(default=0, verbose_name='duration (minutes)')),
                ('energy_before', models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)),
                ('energy_after', models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)),
                ('impact', models.PositiveSmallIntegerField(blank=True, null=True, validators=ONE_TO_TEN)),
                ('effort', models.PositiveSmallIntegerField(blank=True, null=True, validators=ONE_TO_TEN)),
                ('signal_score', models.PositiveSmallIntegerField(default=50, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name='signal score')),
                ('classification', models.CharField(choices=CLASSIFICATIONS, default='NEUTRAL', max_length=10, verbose_name='classification')),
                ('confidence_score', models.FloatField(default=0.5, verbose_name='confidence')),
                ('reasoning', models.TextField(blank=True, verbose_name='reasoning')),
                ('classification_method', models.CharField(choices=[('rules', 'rules'), ('ai', 'ai'), ('ai_with_goal', 'ai_with_goal'), ('manual', 'manual')], default='rules', max_length=20, verbose_name='classification method')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('goal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='activities', to='goals.goal', verbose_name='related goal')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='KanbanTask',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255, verbose_name='title')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('project', models.CharField(default='PERSONAL', max_length=100, verbose_name='project')),
                ('category', models.CharField(default='General', max_length=100, verbose_name='category')),
                ('status', models.CharField(choices=[('todo', 'To do'), ('progress', 'In progress'), ('done', 'Done')], default='todo', max_length=10)),
                ('priority', models.CharField(choices=[('high', 'High'), ('medium', 'Medium'), ('low', 'Low')], default='medium', max_length=10)),
                ('generates_revenue', models.BooleanField(default=False, verbose_name='generates revenue')),
                ('urgent', models.BooleanField(default=False, verbose_name='urgent')),
                ('important', models.BooleanField(default=False, verbose_name='important')),
                ('impact', models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)),
                ('effort', models.PositiveSmallIntegerField(default=5, validators=ONE_TO_TEN)),
                ('signal_score', models.PositiveSmallIntegerField(default=0, verbose_name='signal score')),
                ('classification', models.CharField(choices=CLASSIFICATIONS, default='NOISE', max_length=10, verbose_name='classification')),
                ('reasoning', models.TextField(blank=True, verbose_name='reasoning')),
                ('due_date', models.DateField(blank=True, null=True, verbose_name='due date')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='completed at')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='board position')),
                ('is_active', models.BooleanField(default=True, verbose_name='is active')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='kanban_tasks', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'Kanban Task',
                'verbose_name_plural': 'Kanban Tasks',
                'ordering': ['position', '-created_at'],
            },
            managers=[
                ('objects', django.db.models.manager.Manager()),
            ],
        ),
    ]
