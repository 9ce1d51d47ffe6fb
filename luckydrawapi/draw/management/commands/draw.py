import time

from django.core.management.base import BaseCommand, CommandError

from api.auth import ADMIN, Capability
from api.exceptions import DrawError
from draw.engine import DrawEngine


class Command(BaseCommand):
    help = 'Run (or reset) the lucky draw of a cycle month as admin.'

    def add_arguments(self, parser):
        parser.add_argument('cycle', help='Cycle name, e.g. 2025-2026')
        parser.add_argument('month', help='Draw month, e.g. "November 2025"')
        parser.add_argument('--reset', action='store_true', help='Delete the recorded winner instead.')
        parser.add_argument('--delay', type=float, default=0, help='Seconds to spin before picking.')

    def handle(self, *args, **options):
        capability = Capability(role=ADMIN, email='manage.py')
        engine = DrawEngine(delay=0)
        cycle, month = options['cycle'], options['month']

        try:
            if options['reset']:
                if engine.reset(capability, cycle, month):
                    self.stdout.write(f'Draw for {month} ({cycle}) reset.')
                else:
                    self.stdout.write(f'No draw recorded for {month} ({cycle}).')
                return

            engine.start(capability, cycle, month)
            if options['delay'] > 0:
                # Viewers see the wheel spinning in the meantime.
                time.sleep(options['delay'])
            draw = engine.resolve(cycle, month)
        except DrawError as e:
            raise CommandError(str(e))

        self.stdout.write(f'Winner for {month} ({cycle}): {draw.winner_name} (id {draw.winner_id})')
