# api/dependencies.py
from typing import Iterator
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.sa.database import Database
from core.services.catalog import CatalogService
from core.services.circulation import CirculationService
from core.services.members import MemberService


def get_database(request: Request) -> Database:
    """The Database the app was built with, see api.main.create_app."""
    return request.app.state.database


def get_db(database: Database = Depends(get_database)) -> Iterator[Session]:
    """Get a database session.

    One session per request; it is closed when the request is complete,
    rolling back anything the services did not commit.

    Yields:
        Session: A SQLAlchemy session
    """
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_member_service(db: Session = Depends(get_db)) -> MemberService:
    return MemberService(db)


def get_circulation_service(db: Session = Depends(get_db)) -> CirculationService:
    return CirculationService(db)
