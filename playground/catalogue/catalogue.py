"""Catalogue — read-only challenge and snippet templates keyed by id."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from playground.state.schema import Language
from playground.utils.errors import CatalogueError


@dataclass(frozen=True)
class TemplateEntry:
    """One catalogue entry: a title plus one template body per supported language."""

    id: str
    title: str
    templates: Mapping[Language, str]
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "templates", MappingProxyType(dict(self.templates)))

    @property
    def languages(self) -> list[Language]:
        return [lang for lang in Language if lang in self.templates]

    def template_for(self, language: Language) -> str | None:
        return self.templates.get(language)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "languages": [lang.value for lang in self.languages],
        }


@dataclass(frozen=True)
class Catalogue:
    """Immutable tables of challenges and snippets plus per-language defaults."""

    challenges: Mapping[str, TemplateEntry]
    snippets: Mapping[str, TemplateEntry]
    defaults: Mapping[Language, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        missing = [lang.value for lang in Language if lang not in self.defaults]
        if missing:
            raise CatalogueError(f"No default template for: {', '.join(missing)}", entry_id="default")
        for name in ("challenges", "snippets", "defaults"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @classmethod
    def build(
        cls,
        challenges: Iterable[TemplateEntry],
        snippets: Iterable[TemplateEntry],
        defaults: Mapping[Language, str],
    ) -> Catalogue:
        return cls(
            challenges={entry.id: entry for entry in challenges},
            snippets={entry.id: entry for entry in snippets},
            defaults=defaults,
        )

    def default_template(self, language: Language) -> str:
        return self.defaults[language]

    def challenge(self, entry_id: str) -> TemplateEntry | None:
        return self.challenges.get(entry_id)

    def snippet(self, entry_id: str) -> TemplateEntry | None:
        return self.snippets.get(entry_id)


def default_catalogue() -> Catalogue:
    """The built-in StudyHub catalogue."""
    from playground.catalogue import templates

    return Catalogue.build(
        challenges=templates.CHALLENGES,
        snippets=templates.SNIPPETS,
        defaults=templates.DEFAULT_TEMPLATES,
    )
