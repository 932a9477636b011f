"""Tests for Korean unit conversion and quantity resolution."""

import pytest

from nutrisnap.nutrition.units import (
    QuantityKind,
    QuantityToken,
    UNIT_RULES,
    resolve_quantity,
    to_grams,
)


class TestResolveQuantity:
    @pytest.mark.parametrize("word", ["한", "하나", "일"])
    def test_one_synonyms(self, word):
        assert resolve_quantity(word) == 1.0

    def test_half(self):
        assert resolve_quantity("반") == 0.5

    def test_ten(self):
        assert resolve_quantity("열") == 10.0
        assert resolve_quantity("십") == 10.0

    def test_multi_syllable_numeral(self):
        assert resolve_quantity("다섯") == 5.0
        assert resolve_quantity("일곱") == 7.0

    def test_decimal(self):
        assert resolve_quantity("2") == 2.0
        assert resolve_quantity("1.5") == 1.5

    def test_empty(self):
        assert resolve_quantity("") == 1.0
        assert resolve_quantity(None) == 1.0

    def test_garbage(self):
        assert resolve_quantity("많이많이") == 1.0
        assert resolve_quantity("abc") == 1.0

    def test_zero_defaults_to_one(self):
        assert resolve_quantity("0") == 1.0

    def test_negative_defaults_to_one(self):
        assert resolve_quantity("-3") == 1.0


class TestQuantityToken:
    def test_classify_numeral(self):
        token = QuantityToken.classify("두")
        assert token.kind is QuantityKind.KOREAN_NUMERAL

    def test_classify_decimal(self):
        token = QuantityToken.classify(" 2.5 ")
        assert token.kind is QuantityKind.DECIMAL
        assert token.text == "2.5"

    def test_classify_empty(self):
        assert QuantityToken.classify("").kind is QuantityKind.EMPTY
        assert QuantityToken.classify("그릇").kind is QuantityKind.EMPTY

    def test_resolve_classified_token(self):
        assert resolve_quantity(QuantityToken.classify("세")) == 3.0


class TestToGrams:
    def test_grams_direct(self):
        assert to_grams("닭가슴살", 200.0, "g") == 200.0
        assert to_grams("닭가슴살", 150.0, "그램") == 150.0

    def test_food_override(self):
        assert to_grams("밥", 1.0, "공기") == 150.0

    def test_food_override_beats_default(self):
        # 그릇 defaults to 200g, but 냉면 is served in 350g bowls
        assert to_grams("냉면", 1.0, "그릇") == 350.0
        assert to_grams("김치찌개", 1.0, "그릇") == 200.0

    def test_unit_default_multiplied(self):
        assert to_grams("된장국", 2.0, "그릇") == 400.0

    def test_counter_override(self):
        assert to_grams("토스트", 2.0, "장") == 60.0
        assert to_grams("계란후라이", 1.0, "개") == 60.0

    def test_volume_unit(self):
        assert to_grams("김치", 2.0, "큰술") == 30.0
        assert to_grams("김치", 1.0, "작은술") == 5.0

    def test_size_word_ignores_quantity(self):
        assert to_grams("김치", 3.0, "조금") == 50.0
        assert to_grams("밥", 1.0, "많이") == 200.0

    def test_default_unit(self):
        assert to_grams("라면", 1.0, "기본") == 100.0

    def test_unknown_unit_fallback(self):
        assert to_grams("라면", 1.0, "봉지") == 100.0
        assert to_grams("라면", 2.0, "봉지") == 200.0

    def test_empty_unit_fallback(self):
        assert to_grams("김치", 1.0, "") == 100.0


def test_unit_rules_are_read_only():
    with pytest.raises(TypeError):
        UNIT_RULES["접시"] = None
    with pytest.raises(TypeError):
        UNIT_RULES["공기"].food_grams["잡곡밥"] = 150.0
