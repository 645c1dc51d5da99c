from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone
from django_celery_beat.models import CrontabSchedule, PeriodicTask


class Command(BaseCommand):
    ## docker compose exec app python manage.py setup_dashboard_tasks --hour 2 --minute 0


    help = 'Create or refresh the Celery Beat task that warms the metrics cache.'

    def add_arguments(self, parser):
        parser.add_argument('--hour', type=int, default=2, help='Hour (0-23) to run the task. Default: 2AM.')
        parser.add_argument('--minute', type=int, default=0, help='Minute (0-59) to run the task. Default: 00.')

    def handle(self, *args, **options):
        hour = options['hour']
        minute = options['minute']
        tzname = getattr(settings, 'TIME_ZONE', timezone.get_current_timezone_name())

        schedule, _ = CrontabSchedule.objects.get_or_create(
            minute=str(minute),
            hour=str(hour),
            day_of_week='*',
            day_of_month='*',
            month_of_year='*',
            timezone=tzname,
        )

        obj, created = PeriodicTask.objects.update_or_create(
            name='Refresh Metrics Cache',
            defaults={'task': 'dashboards.refresh_metrics_cache', 'crontab': schedule, 'enabled': True},
        )
        action = 'Created' if created else 'Updated'
        self.stdout.write(self.style.SUCCESS(f'{action} periodic task: {obj.name}'))
