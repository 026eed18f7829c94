"""Shared entity types and fixtures for the EntityForge tests."""

from datetime import date
from uuid import UUID, uuid4

import pytest

from entityforge.entity import Entity, column
from entityforge.hooks import HookRegistry


class Article(Entity):
    """UUID-keyed entity covering most field types."""

    entity_name = "Article"
    entity_name_plural = "Articles"

    id: UUID = column(default_factory=uuid4)
    title: str = column(title="Title")
    body: str = column("", field_type="markdown")
    published: bool = False
    views: int = 0
    published_on: date | None = None
    cover: str | None = column(None, field_type="image")


class Note(Entity):
    """Integer-keyed entity whose ids come from the database."""

    entity_name = "Note"
    entity_name_plural = "Notes"

    id: int | None = None
    text: str
    pinned: bool = False


@pytest.fixture(autouse=True)
def clear_hook_registry():
    """Clear hook registry before and after each test."""
    HookRegistry.clear()
    yield
    HookRegistry.clear()
