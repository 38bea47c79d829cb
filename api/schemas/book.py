# api/schemas/book.py
from datetime import datetime, UTC
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    author: str = Field(min_length=1, max_length=100)
    isbn: str = Field(min_length=10, max_length=17)
    published_year: int = Field(ge=1000)
    genre: str = Field(min_length=1, max_length=100)
    total_copies: int = Field(ge=1, le=100)
    description: Optional[str] = None

    @field_validator("published_year")
    @classmethod
    def not_in_future(cls, value: int) -> int:
        if value > datetime.now(UTC).year:
            raise ValueError("published_year cannot be in the future")
        return value


class BookCreate(BookBase):
    pass


class BookUpdate(BookBase):
    pass


class Book(BookBase):
    id: int
    available_copies: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookList(BaseModel):
    items: List[Book]
    total: int
    page: int
    size: int

    model_config = ConfigDict(from_attributes=True)
