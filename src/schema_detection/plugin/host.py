"""Host application configuration seam.

Minimal description of the host application's configuration that the plugin
extends: collections with their fields, startup hooks and a free-form
``custom`` namespace through which subsystems expose services to each other.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Called once at host startup with the host's session factory
OnInitHook = Callable[[async_sessionmaker[AsyncSession]], Awaitable[None]]


@dataclass
class FieldConfig:
    """A field of a host collection."""

    name: str
    type: str  # "text", "textarea", "checkbox", "number", "json", "group", "relationship", "date"
    required: bool = False
    unique: bool = False
    default: Any = None
    relation_to: str | None = None
    fields: list[FieldConfig] = field(default_factory=list)
    admin: dict[str, Any] = field(default_factory=dict)


@dataclass
class CollectionConfig:
    """A host collection (persisted entity type)."""

    slug: str
    fields: list[FieldConfig] = field(default_factory=list)
    admin: dict[str, Any] = field(default_factory=dict)

    def get_field(self, name: str) -> FieldConfig | None:
        return next((f for f in self.fields if f.name == name), None)


@dataclass
class HostConfig:
    """Configuration of the host application."""

    collections: list[CollectionConfig] = field(default_factory=list)
    on_init: list[OnInitHook] = field(default_factory=list)
    custom: dict[str, Any] = field(default_factory=dict)

    def get_collection(self, slug: str) -> CollectionConfig | None:
        return next((c for c in self.collections if c.slug == slug), None)

    async def run_init_hooks(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Run the startup hooks in registration order."""
        for hook in self.on_init:
            await hook(session_factory)
