"""Pydantic schemas for the news import endpoint."""

from pydantic import BaseModel


class ImportedPost(BaseModel):
    id: int
    title: str
    category: str
    slug: str


class NewsImportResponse(BaseModel):
    success: bool = True
    message: str
    posts: list[ImportedPost]
    total_articles: int
