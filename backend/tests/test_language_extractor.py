from models.schemas.extraction import ExtractorContext
from services.extractors.language import LanguageExtractor, find_language, find_level, parse_requirement


class TestFindLevel:
    def test_cefr_codes(self):
        assert find_level("B2") == "B2"
        assert find_level("c1") == "C1"

    def test_synonyms(self):
        assert find_level("Upper Intermediate") == "B2"
        assert find_level("Upper-Intermediate") == "B2"
        assert find_level("Intermediate") == "B1"
        assert find_level("носитель") == "Native"

    def test_unknown(self):
        assert find_level("Z9+ SomeRandomLanguage") is None
        assert find_level("") is None


def test_find_language_translates_cyrillic():
    assert find_language("Немецкий B1") == ("German", "немецкий")
    assert find_language("Klingon") is None


class TestParseRequirement:
    def test_trailing_modifier(self):
        req = parse_requirement("B2+", "English", "required")
        assert (req.language, req.level, req.modifier, req.priority) == ("English", "B2", "+", "required")

    def test_minus_modifier(self):
        assert parse_requirement("C1-", "German", "preferred").modifier == "-"

    def test_hyphen_inside_word_is_not_a_modifier(self):
        assert parse_requirement("Upper-Intermediate", "English", "required").modifier is None

    def test_unknown_level_dropped(self):
        assert parse_requirement("fluent-ish", "English", "required") is None


class TestLanguageExtractor:
    def setup_method(self):
        self.extractor = LanguageExtractor()

    def extract(self, fields):
        return self.extractor.extract("", ExtractorContext(numbered_fields=fields))

    def test_english_slot_is_required(self):
        result = self.extract({8: "Min уровень английского языка B2+"})
        assert len(result.value) == 1
        req = result.value[0]
        assert (req.language, req.level, req.modifier, req.priority) == ("English", "B2", "+", "required")
        assert result.confidence == 0.95

    def test_other_language_is_preferred(self):
        result = self.extract({8: "B2", 10: "Дополнительный язык German", 11: "C1"})
        assert [(r.language, r.level, r.priority) for r in result.value] == [
            ("English", "B2", "required"),
            ("German", "C1", "preferred"),
        ]

    def test_other_language_level_from_same_slot(self):
        result = self.extract({10: "Немецкий B1"})
        assert [(r.language, r.level) for r in result.value] == [("German", "B1")]

    def test_unknown_language_dropped_not_failed(self):
        result = self.extract({8: "C1", 10: "Klingon B2"})
        assert [r.language for r in result.value] == ["English"]

    def test_empty_markers(self):
        result = self.extract({8: "N/A", 10: "нет"})
        assert result.value == []
        assert result.confidence == 0.0

    def test_malformed_level(self):
        result = self.extract({8: "Z9+ SomeRandomLanguage"})
        assert result.value == []
        assert result.confidence == 0.0

    def test_no_context(self):
        result = self.extractor.extract("English B2", None)
        assert result.value == []
        assert result.confidence == 0.0
