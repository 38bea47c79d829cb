import click

from core.sa.database import Database
from core.sa.models import LoanDisplayStatus, as_utc, utcnow
from core.sa.repositories import LoanFilters
from core.services.circulation import CirculationService


@click.group()
def loans():
    """Loan reports"""
    pass


@loans.command()
@click.option('--limit', default=50, show_default=True, type=click.IntRange(1, 100), help='Maximum loans to list')
def overdue(limit: int):
    """List active loans that are past their due date"""
    database = Database()
    session = database.get_session()
    try:
        now = utcnow()
        service = CirculationService(session, clock=lambda: now)
        items, total = service.list_loans(LoanFilters(status=LoanDisplayStatus.OVERDUE), page=1, size=limit)

        if not items:
            click.echo(click.style("No overdue loans", fg='green'))
            return

        click.echo(click.style(f"\n{total} overdue loans", fg='red'))
        for loan in items:
            days = (now - as_utc(loan.due_date)).days
            click.echo(
                click.style(f"#{loan.id} ", fg='cyan') +
                f"{loan.book.title} - {loan.user.name} <{loan.user.email}> " +
                click.style(f"due {as_utc(loan.due_date):%Y-%m-%d} ({days} days late)", fg='yellow')
            )
    finally:
        session.close()
