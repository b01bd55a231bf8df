import click
from studysync.services.booking_service import BookingService
from studysync.utils.timeparse import parse_iso

def register_commands(app):

    @app.cli.command('update-availability')
    @click.option('--now', default=None, help='ISO-8601 reference time, defaults to the current UTC time.')
    def update_availability(now):
        """Complete ended reservations and mark started ones as occupied."""
        result = BookingService.update_availability(parse_iso(now, 'now') if now else None)
        click.echo(f"{result['endedReservations']} completed, {result['activatedReservations']} activated")
