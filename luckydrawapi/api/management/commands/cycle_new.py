import datetime

from django.core.management.base import BaseCommand, CommandError

from api.auth import ADMIN, Capability
from api.exceptions import DrawError
from api.utils import create_cycle, latest_cycle


def next_cycle(latest, today):
    if latest:
        start = int(latest.split('-')[1])
    else:
        start = today.year
    return f'{start}-{start + 1}'


class Command(BaseCommand):
    help = 'Create the cycle following the most recent one (or starting this year).'

    def add_arguments(self, parser):
        parser.add_argument('name', nargs='?', help='Explicit cycle name, e.g. 2027-2028')

    def handle(self, *args, **options):
        name = options['name'] or next_cycle(latest_cycle(), datetime.date.today())
        try:
            cycles = create_cycle(Capability(role=ADMIN, email='manage.py'), name)
        except DrawError as e:
            raise CommandError(str(e))
        self.stdout.write(f'Cycle {name} created. Known cycles: {", ".join(cycles)}')
