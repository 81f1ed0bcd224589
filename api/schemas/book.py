# api/schemas/book.py
from datetime import datetime
from typing import Optional, List
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BookCreate(BaseModel):
    title: str = Field(..., examples=["The Lord of the Rings"])
    author: str = Field(..., examples=["J.R.R. Tolkien"])
    isbn: str = Field(..., examples=["978-0-618-64015-7"])
    publication_year: int = Field(..., examples=[1954])
    quantity: int = Field(..., examples=[10])
    cover_image: Optional[str] = Field(None, description="Base64 encoded PNG or JPEG")
    cover_filename: Optional[str] = Field(None, description="Original file name of the cover")


class BookUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = None
    publication_year: Optional[int] = None
    quantity: Optional[int] = None


class Book(BaseModel):
    id: int
    title: str
    author: str
    isbn: str
    publication_year: int
    quantity: int = Field(validation_alias=AliasChoices("total_copies", "quantity"))
    available_quantity: int = Field(validation_alias=AliasChoices("available_copies", "available_quantity"))
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookList(BaseModel):
    items: List[Book]
    total: int
    page: int
    limit: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)
