# api/routes/books.py

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from core.sa.repositories import BookFilters
from core.services.catalog import CatalogService
from api.dependencies import get_catalog_service
from api.schemas.book import Book, BookList, BookCreate, BookUpdate
from api.schemas.common import MessageResponse

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=BookList)
def get_books(
    search: Optional[str] = Query(None, description="Search title, author or genre"),
    available: Optional[bool] = Query(None, description="Only books with a copy on the shelf"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    service: CatalogService = Depends(get_catalog_service)
):
    """
    Get a paginated list of books ordered by title.

    Args:
        search: Optional case-insensitive text matched against title, author and genre
        available: When true, only books with available copies
        page: Page number (1-based)
        size: Number of items per page

    Returns:
        BookList containing the page of books
    """
    books, total = service.list_books(BookFilters(search=search, available=available), page=page, size=size)
    return BookList(
        items=[Book.model_validate(book) for book in books],
        total=total,
        page=page,
        size=size
    )


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(book: BookCreate, service: CatalogService = Depends(get_catalog_service)):
    created = service.create_book(**book.model_dump())
    return Book.model_validate(created)


@router.get("/{book_id}", response_model=Book)
def get_book(book_id: int, service: CatalogService = Depends(get_catalog_service)):
    return Book.model_validate(service.get_book(book_id))


@router.put("/{book_id}", response_model=Book)
def update_book(book_id: int, book: BookUpdate, service: CatalogService = Depends(get_catalog_service)):
    """
    Replace a book's details. Changing total_copies shifts available_copies
    by the same amount, never below zero.
    """
    updated = service.update_book(book_id, book.model_dump())
    return Book.model_validate(updated)


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(book_id: int, service: CatalogService = Depends(get_catalog_service)):
    service.delete_book(book_id)
    return MessageResponse(message="Book deleted")
