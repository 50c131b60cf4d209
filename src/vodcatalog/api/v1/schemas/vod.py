# Catalog response schemas.
# Created: 2026-10-19

from __future__ import annotations

from pydantic import BaseModel

from vodcatalog.models import CatalogEntry, CatalogPage, Category


class EntryOut(BaseModel):
    """A single catalog entry."""

    id: str
    name: str
    kind: str
    pic: str = ""
    remarks: str = ""
    time: str = ""
    size: int = 0
    type_name: str = ""
    actor: str = ""
    director: str = ""
    lang: str = ""
    area: str = ""
    year: str = ""
    content: str = ""
    play_from: str | None = None
    play_url: str = ""

    @classmethod
    def of(cls, entry: CatalogEntry) -> EntryOut:
        return cls(**entry.__dict__)


class PageOut(BaseModel):
    """One catalog page."""

    entries: list[EntryOut] = []
    page: int = 1
    total: int = 0
    page_size: int = 0
    page_count: int = 0

    @classmethod
    def of(cls, page: CatalogPage) -> PageOut:
        return cls(
            entries=[EntryOut.of(e) for e in page.entries],
            page=page.page,
            total=page.total,
            page_size=page.page_size,
            page_count=page.page_count,
        )


class SortOption(BaseModel):
    label: str
    value: str


class CategoryOut(BaseModel):
    type_id: str
    type_name: str

    @classmethod
    def of(cls, category: Category) -> CategoryOut:
        return cls(type_id=category.type_id, type_name=category.type_name)


class CategoriesOut(BaseModel):
    """Browse roots and the sort options each accepts."""

    categories: list[CategoryOut] = []
    sort_options: list[SortOption] = []
