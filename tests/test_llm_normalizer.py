"""
Tests for the normalization of raw model completions.

This test suite covers:
- JSON extraction from fenced, wrapped, truncated and empty completions
- Field coercion (numbers with decimal commas, string lists, macros)
- Shape normalizers for dish drafts, macro estimates, substitutes and plans
- Shape normalizers for dish drafts, macro estimates, substitutes, plans and lab reports
"""

import pytest

from services.llm_normalizer import (
    EMPTY,
    INVALID_JSON,
    NO_JSON,
    RAW_CLIP,
    TRUNCATED,
    WRONG_SHAPE,
    extract_json,
    normalize_dish_draft,
    normalize_ingredients,
    normalize_lab_report,
    normalize_macro_estimate,
    normalize_macros,
    normalize_plan,
    normalize_substitutes,
    num_or_null,
    str_list,
    strip_code_fence,
)


# =============================================================================
# JSON EXTRACTION
# =============================================================================


def test_extract_plain_object():
    result = extract_json('{"title": "Borscht"}')
    assert result.ok
    assert result.data == {"title": "Borscht"}
    assert result.error is None


def test_extract_fenced_json():
    """Markdown fences with or without a language tag are removed"""
    text = 'Here it is:\n```json\n{"a": 1, "b": [1, 2]}\n```\nEnjoy!'
    result = extract_json(text)
    assert result.ok
    assert result.data == {"a": 1, "b": [1, 2]}
    assert strip_code_fence("```\n[1]\n```") == "[1]"


def test_extract_object_surrounded_by_prose():
    result = extract_json('Sure! {"calories": 250} Let me know if you need more.')
    assert result.ok
    assert result.data == {"calories": 250}


def test_extract_ignores_brackets_inside_strings():
    """A closing brace inside a string value must not end the object early"""
    result = extract_json('Answer: {"note": "use } and ] freely", "n": 2} done')
    assert result.ok
    assert result.data == {"note": "use } and ] freely", "n": 2}


def test_extract_skips_unparseable_span():
    """When the first balanced span is not JSON the next one is tried"""
    result = extract_json('Format is {like this}, result: {"ok": true}')
    assert result.ok
    assert result.data == {"ok": True}


def test_extract_accepts_raw_newlines_in_strings():
    result = extract_json('{"instructions": "Boil water.\nAdd oats."}')
    assert result.ok
    assert result.data["instructions"] == "Boil water.\nAdd oats."


def test_extract_top_level_array():
    result = extract_json('[{"name": "tofu"}]')
    assert result.ok
    assert result.data == [{"name": "tofu"}]


def test_extract_truncated_output():
    """Output cut off by the token limit is reported as truncated"""
    result = extract_json('{"title": "Soup", "ingredients": [{"name": "beet"')
    assert not result.ok
    assert result.error == TRUNCATED


def test_extract_no_json():
    result = extract_json("I am sorry, I cannot help with that.")
    assert not result.ok
    assert result.error == NO_JSON


def test_extract_invalid_json():
    result = extract_json("Result: {calories: 250}")
    assert not result.ok
    assert result.error == INVALID_JSON


@pytest.mark.parametrize("text", ["", "   \n ", None, 42])
def test_extract_empty_input(text):
    result = extract_json(text)
    assert not result.ok
    assert result.error == EMPTY


def test_raw_is_clipped():
    result = extract_json("x" * (RAW_CLIP * 3))
    assert not result.ok
    assert len(result.raw) == RAW_CLIP


def test_bare_string_literal_is_not_accepted():
    """A JSON scalar is not an object or array"""
    result = extract_json('"just text"')
    assert not result.ok
    assert result.error == NO_JSON


@pytest.mark.parametrize(
    "text",
    [
        'Sure :-[ here is the dish: {"title": "Soup"}',
        'Options [a, b or c... anyway: {"title": "Soup"}',
        'Example:\n```python\nprint(1)\n```\nAnswer: {"title": "Soup"}',
        'Query:\n```sql\nSELECT * FROM t WHERE x IN [1]\n```\n{"title": "Soup"}',
        'Note { unfinished thought.\n```json\n{"title": "Soup"}\n```',
        'He said "hi {" then {"title": "Soup"}',
        '```\n{"title": "Soup"}\n``` and some {broken} text',
        '{{{ {"title": "Soup"}',
    ],
)
def test_extract_object_from_noisy_wrappers(text):
    """Stray brackets, foreign code blocks and unclosed prose do not hide the answer"""
    result = extract_json(text)
    assert result.ok, result.error
    assert result.data == {"title": "Soup"}


def test_json_fence_is_preferred_over_other_blocks():
    text = (
        "```python\nitems = [1, 2]\n```\n"
        "```json\n{\"title\": \"Soup\"}\n```"
    )
    assert extract_json(text).data == {"title": "Soup"}
    assert strip_code_fence(text) == '{"title": "Soup"}'


@pytest.mark.parametrize(
    "text,error",
    [
        ("[" * 100000 + "]" * 100000, INVALID_JSON),
        ("[" * 100000, TRUNCATED),
        ('{"a": ' * 100000 + "1" + "}" * 100000, INVALID_JSON),
    ],
)
def test_extract_deeply_nested_input_fails_cleanly(text, error):
    result = extract_json(text)
    assert not result.ok
    assert result.error == error
    assert len(result.raw) == RAW_CLIP


def test_deeply_nested_output_is_an_llm_output_error():
    result = normalize_dish_draft("Here: " + "[" * 100000 + "]" * 100000)
    assert not result.ok
    assert result.error == INVALID_JSON


# =============================================================================
# FIELD COERCION
# =============================================================================


@pytest.mark.parametrize(
    "value,expected",
    [
        (3, 3.0),
        (2.5, 2.5),
        ("12,5", 12.5),
        (" 40 ", 40.0),
        ("", None),
        ("abc", None),
        ("inf", None),
        (float("nan"), None),
        (True, None),
        (None, None),
        ([1], None),
    ],
)
def test_num_or_null(value, expected):
    assert num_or_null(value) == expected


def test_str_list_splits_strings_and_filters_lists():
    assert str_list("eggs, milk;flour\n sugar") == ["eggs", "milk", "flour", "sugar"]
    assert str_list(["tofu", " ", 7, "rice "]) == ["tofu", "rice"]
    assert str_list(None) == []


def test_normalize_macros_keeps_only_present_keys():
    """Unknown keys are dropped, negative or unusable values become None"""
    macros = normalize_macros({"calories": "250", "protein": -3, "sugar": 5})
    assert macros == {"calories": 250.0, "protein": None}


def test_normalize_macros_without_known_keys():
    assert normalize_macros({"sugar": 5}) is None
    assert normalize_macros("250 kcal") is None


def test_normalize_ingredients_requires_name_and_amount():
    items = normalize_ingredients(
        [
            {"name": " Beet ", "amount": "200 g", "calories": "86"},
            {"name": "Salt"},
            {"amount": "1 tsp"},
            "carrot",
            {"name": "Oil", "amount": "1 tbsp", "calories": -10},
        ]
    )
    assert items == [
        {"name": "Beet", "amount": "200 g", "calories": 86.0},
        {"name": "Oil", "amount": "1 tbsp", "calories": None},
    ]
    assert normalize_ingredients({"name": "x"}) == []


# =============================================================================
# SHAPE NORMALIZERS
# =============================================================================


def test_normalize_dish_draft():
    text = """```json
    {
      "title": "Borscht",
      "ingredients": [{"name": "Beet", "amount": "200 g", "calories": 86}],
      "instructions": "  Simmer everything for 40 minutes. ",
      "macros": {"calories": 320, "protein": "12,5", "fat": null},
      "comment": ""
    }
    ```"""
    result = normalize_dish_draft(text)
    assert result.ok
    assert result.data == {
        "title": "Borscht",
        "ingredients": [{"name": "Beet", "amount": "200 g", "calories": 86.0}],
        "instructions": "Simmer everything for 40 minutes.",
        "macros": {"calories": 320.0, "protein": 12.5, "fat": None},
        "comment": None,
    }


def test_normalize_dish_draft_rejects_array():
    result = normalize_dish_draft('[{"name": "Beet"}]')
    assert not result.ok
    assert result.error == WRONG_SHAPE
    assert result.data == [{"name": "Beet"}]


def test_normalize_dish_draft_passes_extraction_error_through():
    result = normalize_dish_draft('{"title": "Borscht", "ingredients": [')
    assert not result.ok
    assert result.error == TRUNCATED


def test_normalize_macro_estimate_always_has_five_keys():
    result = normalize_macro_estimate('{"macros": {"calories": 520, "protein": "31"}}')
    assert result.ok
    assert result.data == {
        "macros": {
            "calories": 520.0,
            "protein": 31.0,
            "fat": None,
            "carbs": None,
            "fiber": None,
        },
        "comment": "",
    }


def test_normalize_macro_estimate_without_macros_object():
    result = normalize_macro_estimate('{"comment": " raw weights assumed "}')
    assert result.ok
    assert set(result.data["macros"]) == {"calories", "protein", "fat", "carbs", "fiber"}
    assert all(v is None for v in result.data["macros"].values())
    assert result.data["comment"] == "raw weights assumed"


def test_normalize_substitutes_from_object():
    text = '{"substitutes": [{"name": "Tofu", "reason": "plant protein"}, {"reason": "no name"}, "Tempeh"]}'
    result = normalize_substitutes(text)
    assert result.ok
    assert result.data == {
        "substitutes": [
            {"name": "Tofu", "reason": "plant protein"},
            {"name": "Tempeh", "reason": ""},
        ]
    }


def test_normalize_substitutes_from_bare_list():
    result = normalize_substitutes('["Coconut milk", {"name": "Oat milk"}]')
    assert result.ok
    assert result.data["substitutes"] == [
        {"name": "Coconut milk", "reason": ""},
        {"name": "Oat milk", "reason": ""},
    ]


def test_normalize_substitutes_wrong_shape():
    result = normalize_substitutes('{"items": ["tofu"]}')
    assert not result.ok
    assert result.error == WRONG_SHAPE


def test_normalize_plan():
    text = """
    {
      "summary": "High protein week",
      "days": [
        {
          "day": 1,
          "meals": {
            "breakfast": {"title": "Omelette", "ingredients": "eggs 2 pcs, spinach 50 g",
                          "approx_macros": {"calories": 310}},
            "brunch": {"title": "Not a slot"},
            "lunch": {"ingredients": ["no title"]}
          },
          "notes": "Drink water"
        },
        {"day": "x", "meals": {"dinner": {"title": "Salmon", "instructions": "Bake 20 min"}}},
        "not a day",
        {"day": 0}
      ],
      "shopping_list": "eggs; spinach; salmon"
    }
    """
    result = normalize_plan(text)
    assert result.ok
    data = result.data
    assert data["summary"] == "High protein week"
    assert data["shopping_list"] == ["eggs", "spinach", "salmon"]
    assert [d["day"] for d in data["days"]] == [1, 2, 4]

    first = data["days"][0]
    assert list(first["meals"]) == ["breakfast"]
    assert first["meals"]["breakfast"] == {
        "title": "Omelette",
        "ingredients": ["eggs 2 pcs", "spinach 50 g"],
        "approx_macros": {"calories": 310.0},
        "instructions": None,
    }
    assert first["notes"] == "Drink water"
    assert data["days"][1]["meals"]["dinner"]["instructions"] == "Bake 20 min"
    assert data["days"][2]["meals"] == {}


def test_normalize_plan_requires_days():
    result = normalize_plan('{"summary": "nothing"}')
    assert not result.ok
    assert result.error == WRONG_SHAPE


def test_normalize_plan_defaults():
    result = normalize_plan('{"days": []}')
    assert result.ok
    assert result.data == {"summary": "", "days": [], "shopping_list": []}


def test_normalize_lab_report():
    text = """{
      "short_summary": " Mild iron deficiency signs. ",
      "key_findings": "Ferritin low; hemoglobin normal",
      "nutrition_notes": ["Pair legumes with vitamin C", ""],
      "red_flags": null,
      "disclaimer": "Discuss the results with your doctor."
    }"""
    result = normalize_lab_report(text)
    assert result.ok
    assert result.data == {
        "short_summary": "Mild iron deficiency signs.",
        "key_findings": ["Ferritin low", "hemoglobin normal"],
        "possible_causes": [],
        "nutrition_notes": ["Pair legumes with vitamin C"],
        "questions_for_doctor": [],
        "red_flags": [],
        "disclaimer": "Discuss the results with your doctor.",
    }


@pytest.mark.parametrize(
    "text",
    [
        '{"short_summary": "ok", "key_findings": []}',
        '{"short_summary": "ok", "disclaimer": "See a doctor"}',
        '{"short_summary": " ", "key_findings": [], "disclaimer": "See a doctor"}',
        '{"short_summary": "ok", "key_findings": 3, "disclaimer": "See a doctor"}',
        '["short_summary", "key_findings", "disclaimer"]',
    ],
)
def test_normalize_lab_report_wrong_shape(text):
    result = normalize_lab_report(text)
    assert not result.ok
    assert result.error == WRONG_SHAPE
