"""Tests for the day-grouping itinerary parser."""

from itinerary_resolver.domain.models import MAX_DURATION_DAYS, NO_PLACES_FOUND
from itinerary_resolver.nlp.itinerary_parser import (
    build_cleaned_request,
    parse_itinerary_text,
)

MULTI_DAY_SAMPLE = """DAY 1 6/8 WED
7:30 AM flight into Lisbon
Breakfast: Pastel de Belem
Alfama walk

DAY 2 - Thu
Time Out Market lunch
LX Factory
Notes: bring comfy shoes"""

MIXED_HEADER_SAMPLE = """Day 1
9am coffee
Sintra Palace

DAY 2 - Tue
Belem Tower"""

NO_HEADER_SAMPLE = """Arrive in Lisbon
Pastel de Belem
Alfama walk"""

HEADERS_ONLY_SAMPLE = """DAY 1

DAY 2"""

HATYAI_SAMPLE = """I'm planning a trip to 🇹🇭 HATYAI TRIP 6/8-8/8.

Places from my itinerary:
- 🇹🇭 HATYAI TRIP 6/8-8/8
- DAY 1 6/8 WED*
- 9am take van >> 11.30am reached
- 12pm reached Neo Grand Hatyai \ufe0f
- Krua Pa Yad 叫菜吃饭
- thefellows.hdy café \ufe0f
- Mookata Paeyim晚餐 5pm
- Greeway Night Market 逛夜市 6pm
- DAY 2 7/8 THURS*
- Choo Ja Roean Boat Noodle 早餐 9am
- Kim Yong Market 逛逛
- 东方燕窝 \ufe0f
- Porkleg Tuateaw @Samchai
- Central Festival Hatyai 2pm
- Maribu晚餐 6pm
- Lee Garden Night Market \ufe0f
- Lee Garden 按摩
- Pa Ad Fresh Milk 宵夜
- DAY3 8/8 FRI*
- Kuay Jab Jae Khwan
- Lee Garden附近走走
- 最大的7-11
- Baan Khun Bhu
- Hood Hatyai café \ufe0f
- 古早味炭烧鸡蛋糕"""

COMMA_SEPARATED_SAMPLE = (
    "12pm reached Neo Grand Hatyai, Krua Pa Yad 叫菜吃饭, thefellows.hdy café, "
    "Mookata Paeyim晚餐 5pm, Greeway Night Market 逛夜市 6pm"
)


def labels(result):
    return [day.label for day in result.days]


def names(result, index):
    return [place.name for place in result.days[index].places]


def all_names(result):
    return [place.name for place in result.places]


def test_day_segmentation():
    result = parse_itinerary_text("Day 1\nA\nDay 2\nB")

    assert labels(result) == ["Day 1", "Day 2"]
    assert names(result, 0) == ["A"]
    assert names(result, 1) == ["B"]


def test_no_header_default():
    result = parse_itinerary_text("A\nB")

    assert labels(result) == ["Day 1"]
    assert names(result, 0) == ["A", "B"]
    assert result.warnings == ()


def test_groups_by_day_headers_and_filters_non_place_lines():
    result = parse_itinerary_text(MULTI_DAY_SAMPLE, "Lisbon")

    assert labels(result) == ["DAY 1 6/8 WED", "DAY 2 - Thu"]
    assert names(result, 0) == ["Breakfast: Pastel de Belem", "Alfama walk"]
    assert names(result, 1) == ["Time Out Market lunch", "LX Factory"]
    assert "flight into Lisbon" not in all_names(result)
    assert "Notes: bring comfy shoes" not in all_names(result)
    assert result.destination == "Lisbon"


def test_extracts_time_prefixes_and_preserves_order():
    result = parse_itinerary_text(MIXED_HEADER_SAMPLE)

    assert labels(result) == ["Day 1", "DAY 2 - Tue"]
    first = result.days[0].places[0]
    assert first.name == "coffee"
    assert first.time_text == "9am"
    assert names(result, 0) == ["coffee", "Sintra Palace"]


def test_falls_back_to_single_day_without_headers():
    result = parse_itinerary_text(NO_HEADER_SAMPLE)

    assert labels(result) == ["Day 1"]
    assert names(result, 0) == ["Pastel de Belem", "Alfama walk"]


def test_keeps_empty_day_groups_created_by_headers():
    result = parse_itinerary_text(HEADERS_ONLY_SAMPLE)

    assert labels(result) == ["DAY 1", "DAY 2"]
    assert all(day.is_empty for day in result.days)
    assert result.warnings == (NO_PLACES_FOUND,)


def test_parses_messy_hatyai_itinerary():
    result = parse_itinerary_text(HATYAI_SAMPLE, "Hatyai")

    assert labels(result) == ["DAY 1 6/8 WED", "DAY 2 7/8 THURS", "DAY3 8/8 FRI"]
    assert names(result, 0) == [
        "Neo Grand Hatyai",
        "Krua Pa Yad 叫菜吃饭",
        "thefellows.hdy café",
        "Mookata Paeyim晚餐",
        "Greeway Night Market 逛夜市",
    ]
    assert names(result, 1) == [
        "Choo Ja Roean Boat Noodle 早餐",
        "Kim Yong Market 逛逛",
        "东方燕窝",
        "Porkleg Tuateaw @Samchai",
        "Central Festival Hatyai",
        "Maribu晚餐",
        "Lee Garden Night Market",
        "Lee Garden 按摩",
        "Pa Ad Fresh Milk 宵夜",
    ]
    assert names(result, 2) == [
        "Kuay Jab Jae Khwan",
        "Lee Garden附近走走",
        "最大的7-11",
        "Baan Khun Bhu",
        "Hood Hatyai café",
        "古早味炭烧鸡蛋糕",
    ]
    assert "Places from my itinerary" not in all_names(result)


def test_preserves_time_tokens_that_are_part_of_a_name():
    result = parse_itinerary_text("DAY 1\n7AM Cafe\n11:11 Coffee\n9am coffee")

    assert names(result, 0) == ["7AM Cafe", "11:11 Coffee", "coffee"]


def test_splits_comma_separated_places_on_one_line():
    result = parse_itinerary_text(COMMA_SEPARATED_SAMPLE)

    assert labels(result) == ["Day 1"]
    assert names(result, 0) == [
        "Neo Grand Hatyai",
        "Krua Pa Yad 叫菜吃饭",
        "thefellows.hdy café",
        "Mookata Paeyim晚餐",
        "Greeway Night Market 逛夜市",
    ]


def test_preserves_time_named_places_when_comma_separated():
    result = parse_itinerary_text("7AM Cafe, 11:11 Coffee")

    assert names(result, 0) == ["7AM Cafe", "11:11 Coffee"]


def test_day_headers_with_commas_stay_headers():
    result = parse_itinerary_text("DAY 1, Wed\nPlace A, Place B\nDAY 2, Thu\nPlace C")

    assert labels(result) == ["DAY 1, Wed", "DAY 2, Thu"]
    assert names(result, 0) == ["Place A", "Place B"]
    assert names(result, 1) == ["Place C"]
    assert "DAY 1, Wed" not in all_names(result)


def test_travel_line_only_is_not_an_error():
    result = parse_itinerary_text("9am take van >> 11.30am reached")

    assert result.places == ()
    assert result.warnings == (NO_PLACES_FOUND,)
    assert labels(result) == ["Day 1"]


def test_only_meta_and_logistics_lines_warn():
    result = parse_itinerary_text(
        "Places from my itinerary:\nFlight to Lisbon\nNotes: pack light"
    )

    assert NO_PLACES_FOUND in result.warnings


def test_empty_input_still_has_one_day():
    result = parse_itinerary_text("")

    assert labels(result) == ["Day 1"]
    assert result.warnings == (NO_PLACES_FOUND,)


class TestDuration:
    """Spreading header-less places across the trip length."""

    def test_places_are_spread_over_days(self):
        result = parse_itinerary_text("klcc\ntrx\nmidvalley", None, 2)

        assert labels(result) == ["Day 1", "Day 2"]
        assert names(result, 0) == ["klcc", "trx"]
        assert names(result, 1) == ["midvalley"]

    def test_extra_days_stay_empty(self):
        result = parse_itinerary_text("klcc\ntrx", None, 3)

        assert labels(result) == ["Day 1", "Day 2", "Day 3"]
        assert names(result, 0) == ["klcc"]
        assert names(result, 1) == ["trx"]
        assert names(result, 2) == []

    def test_duration_prefix_and_commas(self):
        result = parse_itinerary_text("2 days in klcc, trx, midvalley", None, 2)

        assert labels(result) == ["Day 1", "Day 2"]
        assert names(result, 0) == ["klcc", "trx"]
        assert names(result, 1) == ["midvalley"]

    def test_short_comma_list_leaves_trailing_days_empty(self):
        result = parse_itinerary_text("3 days in klcc, trx", None, 3)

        assert labels(result) == ["Day 1", "Day 2", "Day 3"]
        assert names(result, 0) == ["klcc"]
        assert names(result, 1) == ["trx"]
        assert names(result, 2) == []

    def test_explicit_headers_win_over_duration(self):
        result = parse_itinerary_text("Day 1\nPlace A\nDay 2\nPlace B", None, 3)

        assert labels(result) == ["Day 1", "Day 2"]
        assert names(result, 0) == ["Place A"]
        assert names(result, 1) == ["Place B"]

    def test_single_day_duration_is_ignored(self):
        result = parse_itinerary_text("klcc\ntrx", None, 1)

        assert labels(result) == ["Day 1"]
        assert names(result, 0) == ["klcc", "trx"]

    def test_huge_duration_is_capped(self):
        result = parse_itinerary_text("klcc\ntrx", None, 2_000_000)

        assert len(result.days) == MAX_DURATION_DAYS
        assert labels(result)[-1] == f"Day {MAX_DURATION_DAYS}"
        assert names(result, 0) == ["klcc"]
        assert names(result, 1) == ["trx"]


class TestCleanedRequest:
    def test_single_day_lists_places_without_labels(self):
        result = parse_itinerary_text("Alfama\nLX Factory", "Lisbon")

        assert result.cleaned_request == (
            "I'm planning a trip to Lisbon.\n"
            "\n"
            "Places from my itinerary:\n"
            "- Alfama\n"
            "- LX Factory"
        )
        assert result.preview_text == result.cleaned_request

    def test_multi_day_includes_day_labels(self):
        result = parse_itinerary_text("Day 1\nAlfama\nDay 2\nBelem Tower")

        assert result.cleaned_request.splitlines() == [
            "I'm planning a trip.",
            "",
            "Places from my itinerary:",
            "Day 1",
            "- Alfama",
            "Day 2",
            "- Belem Tower",
        ]

    def test_blank_destination_is_ignored(self):
        result = parse_itinerary_text("Alfama")

        assert build_cleaned_request(result.days, "   ").startswith(
            "I'm planning a trip.\n"
        )
