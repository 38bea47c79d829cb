import click
from datetime import timedelta

from core.errors import LibraryError
from core.sa.database import Database
from core.sa.models import MembershipType, UserStatus, utcnow
from core.services.catalog import CatalogService
from core.services.circulation import CirculationService
from core.services.members import MemberService

DEMO_USERS = [
    ("Joan Silva", "joan.silva@example.com", "(11) 99999-9999", MembershipType.STUDENT, UserStatus.ACTIVE),
    ("Mary Santos", "mary.santos@example.com", "(11) 88888-8888", MembershipType.TEACHER, UserStatus.ACTIVE),
    ("Peter Oliver", "peter.oliver@example.com", "(11) 77777-7777", MembershipType.COMMUNITY, UserStatus.ACTIVE),
    ("Anne Costa", "anne.costa@example.com", "(11) 66666-6666", MembershipType.STUDENT, UserStatus.SUSPENDED),
]

DEMO_BOOKS = [
    ("Clean Code", "Robert C. Martin", "978-0132350884", 2008, "Technology", 3,
     "A handbook of agile software craftsmanship."),
    ("The Fellowship of the Ring", "J.R.R. Tolkien", "978-0547928210", 1954, "Fantasy", 5,
     "The first volume of The Lord of the Rings."),
    ("1984", "George Orwell", "978-0451524935", 1949, "Fiction", 2,
     "A dystopia of surveillance and totalitarian rule."),
    ("Dom Casmurro", "Machado de Assis", "978-0195103083", 1899, "Classics", 4,
     "A classic of Brazilian literature."),
    ("Introduction to Algorithms", "Thomas H. Cormen", "978-0262033848", 2009, "Technology", 2,
     "The standard reference on algorithms and data structures."),
    ("The Little Prince", "Antoine de Saint-Exupery", "978-0156012195", 1943, "Children", 6,
     "A poetic tale about friendship and what matters."),
]


@click.group()
def db():
    """Database setup commands"""
    pass


@db.command()
@click.option('--drop', is_flag=True, help='Drop existing tables first')
def init(drop: bool):
    """Create the database tables"""
    database = Database()
    if drop:
        database.drop_db()
        click.echo(click.style("Dropped existing tables", fg='yellow'))
    database.init_db()
    click.echo(click.style("Database ready", fg='green'))


@db.command()
@click.option('--reset', is_flag=True, help='Drop and recreate tables before seeding')
def seed(reset: bool):
    """Load demo members, books and loans"""
    database = Database()
    if reset:
        database.drop_db()
    database.init_db()

    now = utcnow()
    session = database.get_session()
    try:
        members = MemberService(session)
        users = [
            members.create_user(name=name, email=email, phone=phone, membership_type=kind, status=status)
            for name, email, phone, kind, status in DEMO_USERS
        ]
        click.echo(click.style("Created ", fg='blue') + click.style(str(len(users)), fg='cyan') +
                   click.style(" users", fg='blue'))

        catalog = CatalogService(session)
        books = [
            catalog.create_book(
                title=title, author=author, isbn=isbn, published_year=year,
                genre=genre, total_copies=copies, description=description
            )
            for title, author, isbn, year, genre, copies, description in DEMO_BOOKS
        ]
        click.echo(click.style("Created ", fg='blue') + click.style(str(len(books)), fg='cyan') +
                   click.style(" books", fg='blue'))

        # Back-dated clocks give the demo an overdue loan and a returned one
        CirculationService(session).create_loan(users[0].id, books[0].id, now + timedelta(days=14))
        overdue = CirculationService(session, clock=lambda: now - timedelta(days=16))
        overdue.create_loan(users[1].id, books[1].id, now - timedelta(days=2))
        past = CirculationService(session, clock=lambda: now - timedelta(days=20))
        returned = past.create_loan(users[2].id, books[2].id, now - timedelta(days=6))
        CirculationService(session, clock=lambda: now - timedelta(days=5)).return_loan(returned.id)
        CirculationService(session).create_loan(users[0].id, books[5].id, now + timedelta(days=7))
        click.echo(click.style("Created ", fg='blue') + click.style("4", fg='cyan') +
                   click.style(" loans", fg='blue'))
    except LibraryError as e:
        click.echo(click.style(f"\nSeeding failed: {e.message}", fg='red'))
        raise click.Abort()
    finally:
        session.close()

    click.echo(click.style("\nSeed complete", fg='green'))
