from __future__ import annotations

import datetime

import pytest

from bankcal.errors import FormatError
from bankcal.holidays import (
    CARRY_OVER_RULES,
    HOLIDAY_COLOR,
    DatedEntry,
    HolidayEntry,
    HolidayRecord,
    apply_carry_over,
    build_holiday_index,
    bulgarian_carry_over,
    decode,
    encode,
    get_carry_over_rule,
    index_entries,
    key_for,
    normalize,
    parse_key,
)


def _record(
    iso: str, name: str, local_name: str = "", types: tuple[str, ...] = ("Public",)
) -> HolidayRecord:
    return HolidayRecord(
        date=datetime.date.fromisoformat(iso), local_name=local_name, name=name, types=types
    )


def _bg_2022_december() -> list[HolidayRecord]:
    # Dec 25 2022 is a Sunday, Dec 26 is already a holiday.
    return [
        _record("2022-12-24", "Christmas Eve", "Бъдни вечер"),
        _record("2022-12-25", "Christmas Day", "Рождество Христово"),
        _record("2022-12-26", "St. Stephen's Day", "Рождество Христово"),
    ]


class TestDateKeys:
    def test_encode_zero_pads(self) -> None:
        assert encode(2024, 0, 5) == "2024-01-05"
        assert encode(2024, 11, 31) == "2024-12-31"

    def test_decode_inverts_encode(self) -> None:
        for year, month_index, day in [(2024, 1, 29), (1999, 11, 31), (2025, 0, 1)]:
            assert decode(encode(year, month_index, day)) == (year, month_index, day)

    def test_key_for_date(self) -> None:
        assert key_for(datetime.date(2024, 5, 6)) == "2024-05-06"

    def test_parse_key(self) -> None:
        assert parse_key("2024-02-29") == datetime.date(2024, 2, 29)

    @pytest.mark.parametrize(
        "key",
        [
            "2024-05",
            "2024/05/06",
            "abcd-ef-gh",
            "",
            "2024-05-06x",
            "\uff12\uff10\uff12\uff14-\uff10\uff15-\uff10\uff16",  # full-width digits
        ],
    )
    def test_decode_rejects_bad_shape(self, key: str) -> None:
        with pytest.raises(FormatError):
            decode(key)

    def test_decode_rejects_non_string(self) -> None:
        with pytest.raises(FormatError):
            decode(20240506)  # type: ignore[arg-type]

    def test_parse_key_rejects_impossible_date(self) -> None:
        with pytest.raises(FormatError, match="Invalid calendar date"):
            parse_key("2023-02-29")

    def test_format_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode("nope")


class TestNormalize:
    def test_keeps_only_public(self) -> None:
        records = [
            _record("2024-01-01", "New Year's Day"),
            _record("2024-02-14", "Valentine", types=("Observance",)),
            _record("2024-03-03", "Liberation Day", types=("Public", "Bank")),
        ]
        entries = normalize(records)
        assert [e.date_key for e in entries] == ["2024-01-01", "2024-03-03"]

    def test_title_prefers_local_name(self) -> None:
        (dated,) = normalize([_record("2024-03-03", "Liberation Day", "Ден на Освобождението")])
        assert dated.entry.title == "Ден на Освобождението"
        assert dated.entry.global_name == "Liberation Day"

    def test_title_falls_back_to_name(self) -> None:
        (dated,) = normalize([_record("2024-03-03", "Liberation Day")])
        assert dated.entry.title == "Liberation Day"

    def test_single_colour(self) -> None:
        entries = normalize(
            [_record("2024-01-01", "A"), _record("2024-01-02", "B", types=("Public", "School"))]
        )
        assert {e.entry.color for e in entries} == {HOLIDAY_COLOR}

    def test_preserves_order(self) -> None:
        entries = normalize([_record("2024-12-25", "Z"), _record("2024-01-01", "A")])
        assert [e.entry.global_name for e in entries] == ["Z", "A"]

    def test_record_without_types_is_dropped(self) -> None:
        assert normalize([_record("2024-01-01", "A", types=())]) == []


class TestBulgarianCarryOver:
    def test_sunday_holiday_gets_monday_substitute(self) -> None:
        # Jan 1 2023 is a Sunday
        entries = normalize([_record("2023-01-01", "New Year's Day", "Нова година")])
        result = bulgarian_carry_over(entries)
        assert len(result) == 2
        substitute = result[1]
        assert substitute.date_key == "2023-01-02"
        assert substitute.entry.title == "Нова година (преместен)"
        assert substitute.entry.global_name == "New Year's Day (carry-over)"
        assert substitute.entry.types == ("Bank",)

    def test_no_substitute_when_monday_taken(self) -> None:
        entries = normalize(_bg_2022_december())
        assert bulgarian_carry_over(entries) == entries

    def test_weekday_holiday_untouched(self) -> None:
        entries = normalize([_record("2024-03-04", "Mon")])
        assert bulgarian_carry_over(entries) == entries

    def test_saturday_holiday_untouched(self) -> None:
        entries = normalize([_record("2024-03-02", "Sat")])
        assert bulgarian_carry_over(entries) == entries

    def test_originals_precede_substitutes(self) -> None:
        entries = normalize(
            [_record("2024-05-05", "X"), _record("2024-05-01", "Labour Day")]
        )
        result = bulgarian_carry_over(entries)
        assert result[:2] == entries
        assert result[2].date_key == "2024-05-06"

    def test_does_not_mutate_input(self) -> None:
        entries = normalize([_record("2023-01-01", "New Year's Day")])
        snapshot = list(entries)
        bulgarian_carry_over(entries)
        assert entries == snapshot

    def test_two_holidays_on_same_sunday(self) -> None:
        entries = normalize([_record("2024-05-05", "X"), _record("2024-05-05", "Y")])
        result = bulgarian_carry_over(entries)
        substitutes = [e for e in result if e.date_key == "2024-05-06"]
        assert [s.entry.global_name for s in substitutes] == ["X (carry-over)", "Y (carry-over)"]

    def test_no_substitute_in_following_year(self) -> None:
        # Dec 31 2023 is a Sunday
        entries = normalize([_record("2023-12-31", "Eve")])
        assert bulgarian_carry_over(entries) == entries

    def test_index_keys_stay_in_record_year(self) -> None:
        index = build_holiday_index(
            [_record("2023-01-01", "New Year's Day"), _record("2023-12-31", "Eve")], "BG"
        )
        assert list(index) == ["2023-01-01", "2023-12-31", "2023-01-02"]
        assert all(key.startswith("2023-") for key in index)


class TestRuleLookup:
    def test_bg_registered(self) -> None:
        assert CARRY_OVER_RULES["BG"] is bulgarian_carry_over
        assert get_carry_over_rule("bg") is bulgarian_carry_over

    def test_unknown_country_is_identity(self) -> None:
        entries = normalize([_record("2023-01-01", "New Year's Day")])
        assert apply_carry_over(entries, "US") == entries
        assert apply_carry_over(entries, "ZZ") == entries


class TestIndex:
    def test_groups_by_date_in_order(self) -> None:
        a = HolidayEntry("A", "A", HOLIDAY_COLOR, ("Public",))
        b = HolidayEntry("B", "B", HOLIDAY_COLOR, ("Public",))
        c = HolidayEntry("C", "C", HOLIDAY_COLOR, ("Bank",))
        index = index_entries(
            [DatedEntry("2024-01-01", a), DatedEntry("2024-01-02", c), DatedEntry("2024-01-01", b)]
        )
        assert index == {"2024-01-01": [a, b], "2024-01-02": [c]}

    def test_example_bg_sunday(self) -> None:
        index = build_holiday_index([_record("2024-05-05", "X")], "BG")
        assert list(index) == ["2024-05-05", "2024-05-06"]
        assert index["2024-05-05"][0].title == "X"
        assert index["2024-05-06"][0].title == "X (преместен)"

    def test_existing_monday_holiday_blocks_substitute(self) -> None:
        index = build_holiday_index(
            [_record("2024-05-05", "X"), _record("2024-05-06", "St. George's Day")], "BG"
        )
        assert [e.global_name for e in index["2024-05-06"]] == ["St. George's Day"]

    def test_non_public_monday_record_does_not_block_substitute(self) -> None:
        index = build_holiday_index(
            [
                _record("2024-05-05", "X"),
                _record("2024-05-06", "Observance", types=("Observance",)),
            ],
            "BG",
        )
        assert [e.global_name for e in index["2024-05-06"]] == ["X (carry-over)"]

    def test_non_bg_has_no_substitutes(self) -> None:
        index = build_holiday_index([_record("2024-05-05", "X")], "DE")
        assert list(index) == ["2024-05-05"]

    @pytest.mark.parametrize("code", ["BG", "US", "DE", "ZZ"])
    def test_empty_records_give_empty_index(self, code: str) -> None:
        assert build_holiday_index([], code) == {}
