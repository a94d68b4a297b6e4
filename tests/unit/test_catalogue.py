"""Tests for the template catalogue."""

from __future__ import annotations

import pytest

from playground.catalogue import templates
from playground.catalogue.catalogue import Catalogue, TemplateEntry
from playground.sandbox.validators import validate_code
from playground.state.schema import Language
from playground.utils.errors import CatalogueError


class TestCatalogue:
    def test_every_language_has_a_default(self, catalogue: Catalogue) -> None:
        for language in Language:
            assert catalogue.default_template(language).strip()

    def test_fizzbuzz_covers_both_languages(self, catalogue: Catalogue) -> None:
        entry = catalogue.challenge("fizzbuzz")
        assert entry is not None
        assert entry.template_for(Language.NATIVE) == templates.FIZZBUZZ
        assert entry.template_for(Language.SANDBOXED) == templates.FIZZBUZZ_SANDBOXED

    def test_every_challenge_supports_both_languages(self, catalogue: Catalogue) -> None:
        for entry in catalogue.challenges.values():
            assert entry.languages == list(Language), entry.id

    def test_single_language_snippets(self, catalogue: Catalogue) -> None:
        assert catalogue.snippet("output-channels").languages == [Language.NATIVE]
        assert catalogue.snippet("plotting").languages == [Language.SANDBOXED]

    def test_unknown_ids(self, catalogue: Catalogue) -> None:
        assert catalogue.challenge("nope") is None
        assert catalogue.snippet("nope") is None

    def test_inline_templates_pass_validation(self, catalogue: Catalogue) -> None:
        bodies = [catalogue.default_template(Language.NATIVE)]
        for entry in [*catalogue.challenges.values(), *catalogue.snippets.values()]:
            body = entry.template_for(Language.NATIVE)
            if body is not None:
                bodies.append(body)
        for body in bodies:
            result = validate_code(body)
            assert result.valid, result.error

    def test_missing_default_is_rejected(self) -> None:
        with pytest.raises(CatalogueError):
            Catalogue.build(challenges=[], snippets=[], defaults={Language.NATIVE: "print(1)"})

    def test_tables_are_read_only(self, catalogue: Catalogue) -> None:
        with pytest.raises(TypeError):
            catalogue.challenges["new"] = catalogue.challenge("fizzbuzz")  # type: ignore[index]
        entry = catalogue.challenge("fizzbuzz")
        with pytest.raises(TypeError):
            entry.templates[Language.NATIVE] = "x"  # type: ignore[index]

    def test_entry_to_dict(self) -> None:
        entry = TemplateEntry(id="demo", title="Demo", templates={Language.SANDBOXED: "1"})
        assert entry.to_dict() == {
            "id": "demo",
            "title": "Demo",
            "description": "",
            "languages": ["sandboxed"],
        }
