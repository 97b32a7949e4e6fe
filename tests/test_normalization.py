"""
Input normalization and pagination clamping
"""

import math

import pytest

from services.normalization import MAX_OFFSET, build_update_set, normalize_user_data, validate_pagination


class TestNormalizeUserData:

    def test_trims_and_lowercases(self):
        fields = normalize_user_data({
            "name": "  Ann  ",
            "age": 30,
            "email": "  Ann@Example.COM ",
            "address": " 1 Main St  "
        })

        assert fields.provided() == {
            "name": "Ann",
            "age": 30,
            "email": "ann@example.com",
            "address": "1 Main St"
        }

    @pytest.mark.parametrize("raw_age,expected", [
        (29.9, 29),
        ("29.9", 29),
        (" 12 ", 12),
        ("", 0),
        ("   ", 0),
        ("0x1A", 26),
        ("0b101", 5),
        ("1e3", 1000),
        (10 ** 20, 10 ** 20),
        (-1.5, -2),
        ("42", 42),
        (0, 0),
    ])
    def test_age_is_floored(self, raw_age, expected):
        assert normalize_user_data({"age": raw_age}).age == expected

    @pytest.mark.parametrize("raw_age", ["abc", "1_000", "-0x1A", "12abc", [], {}, "inf", "nan", "1e999"])
    def test_non_numeric_age_becomes_nan(self, raw_age):
        assert math.isnan(normalize_user_data({"age": raw_age}).age)

    def test_absent_and_null_fields_are_omitted(self):
        fields = normalize_user_data({"name": "Bob", "email": None})

        assert fields.provided() == {"name": "Bob"}

    def test_unknown_keys_are_dropped(self):
        fields = normalize_user_data({"name": "Bob", "role": "admin", "id": "x"})

        assert fields.provided() == {"name": "Bob"}

    def test_values_are_converted_to_text(self):
        fields = normalize_user_data({"name": 12345, "address": 7})

        assert fields.provided() == {"name": "12345", "address": "7"}


class TestBuildUpdateSet:

    def test_drops_blank_name_and_email(self):
        updates = build_update_set(normalize_user_data({"name": "   ", "email": " "}))

        assert updates == {}

    def test_drops_nan_age(self):
        updates = build_update_set(normalize_user_data({"age": "soon", "name": "Ann"}))

        assert updates == {"name": "Ann"}

    def test_keeps_empty_address(self):
        updates = build_update_set(normalize_user_data({"address": "  "}))

        assert updates == {"address": ""}

    def test_keeps_zero_age(self):
        assert build_update_set(normalize_user_data({"age": 0})) == {"age": 0}


class TestValidatePagination:

    @pytest.mark.parametrize("page,limit,expected", [
        (None, None, (1, 5)),
        ("3", "10", (3, 10)),
        ("0", "5", (1, 5)),
        ("-4", "5", (1, 5)),
        ("2", "1000", (2, 100)),
        ("1", "-3", (1, 1)),
        ("1", "0", (1, 5)),
        ("abc", "xyz", (1, 5)),
        ("2.7", "7abc", (2, 7)),
        ("99999999999999999999", "100", (MAX_OFFSET // 100 + 1, 100)),
    ])
    def test_clamps_values(self, page, limit, expected):
        assert validate_pagination(page, limit) == expected

    @pytest.mark.parametrize("limit", ["1", "7", "100"])
    def test_offset_of_huge_page_fits_bigint(self, limit):
        page, valid_limit = validate_pagination("9" * 40, limit)

        assert (page - 1) * valid_limit <= MAX_OFFSET
