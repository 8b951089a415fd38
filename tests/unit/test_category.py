"""Category activity and naming"""

import pytest

from acme_csr.domain.entities.category import Category
from acme_csr.domain.enums import CategoryStatus
from acme_csr.domain.exceptions import CategoryException
from acme_csr.domain.value_objects.translatable import TranslatableText

pytestmark = pytest.mark.unit


class TestCategory:

    def test_is_active_follows_status(self):
        category = Category.create(TranslatableText({"en": "Environment"}))
        assert category.is_active()
        category.deactivate()
        assert category.status == CategoryStatus.INACTIVE
        assert not category.is_active()
        category.activate()
        assert category.is_active()

    def test_slug_is_derived_from_english_name(self):
        category = Category.create(TranslatableText({"en": "Clean Water & Sanitation", "fr": "Eau propre"}))
        assert str(category.slug) == "clean-water-sanitation"

    def test_blank_name_is_rejected(self):
        with pytest.raises(CategoryException):
            Category.create(TranslatableText({"en": "   "}))

    def test_rename_merges_translations(self):
        category = Category.create(TranslatableText({"en": "Health"}))
        category.rename(TranslatableText({"de": "Gesundheit"}))
        assert category.name.get("de") == "Gesundheit"
        assert category.name.get("en") == "Health"


class TestTranslatableText:

    def test_falls_back_to_english(self):
        text = TranslatableText({"en": "Hello", "fr": "Bonjour"})
        assert text.get("es") == "Hello"
        assert text.get("FR") == "Bonjour"

    def test_falls_back_to_any_translation(self):
        assert TranslatableText({"de": "Hallo"}).get("en") == "Hallo"

    def test_of_wraps_plain_strings(self):
        assert TranslatableText.of("Hola", "es").translations == {"es": "Hola"}
