"""
Management command to print a user's dashboard statistics as JSON.

Usage:
    python manage.py stats_report <username> [--from YYYY-MM-DD] [--to YYYY-MM-DD] [--daily]
"""

import json

from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder
from rest_framework.exceptions import PermissionDenied

from accounts.models import User
from dashboards.exceptions import StatsFetchError
from dashboards.serializers import StatsQuerySerializer
from dashboards.services import StatsDashboardService, viewpoint_for_user


class Command(BaseCommand):
    help = "Prints the dashboard statistics of a user's own role as JSON"

    def add_arguments(self, parser):
        parser.add_argument('username')
        parser.add_argument('--from', dest='from', help='First day of the range (YYYY-MM-DD)')
        parser.add_argument('--to', dest='to', help='Last day of the range (YYYY-MM-DD)')
        parser.add_argument(
            '--daily',
            action='store_true',
            help='Print only the daily profit / order series'
        )

    def handle(self, *args, **options):
        try:
            user = User.objects.get(username=options['username'])
        except User.DoesNotExist:
            raise CommandError(f"User '{options['username']}' does not exist")

        query = {key: options[key] for key in ('from', 'to') if options.get(key)}
        serializer = StatsQuerySerializer(data=query)
        if not serializer.is_valid():
            raise CommandError(json.dumps(serializer.errors))
        date_range = serializer.validated_data['date_range']

        try:
            viewpoint = viewpoint_for_user(user)
        except PermissionDenied as exc:
            raise CommandError(f'{user.username}: {exc.detail}')

        service = StatsDashboardService(viewpoint, date_range)
        try:
            if options['daily']:
                data = service.get_daily_report(date_range)
            else:
                data = service.get_report()
        except StatsFetchError as exc:
            raise CommandError(exc.default_code) from exc

        self.stdout.write(json.dumps(data, cls=DjangoJSONEncoder, indent=2))
