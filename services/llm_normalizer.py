"""
Normalization of raw chat completions into application data.

Models are asked for strict JSON but still wrap it in markdown fences, add
prose around it, or stop mid-object when they hit the token limit. The
functions here recover the JSON document when there is one and coerce the
fields the application knows about; anything else is dropped or nulled.

Nothing in this module raises on bad model output: every entry point returns
a ParseResult and callers decide how to report a failure.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

RAW_CLIP = 2000

MACRO_KEYS = ("calories", "protein", "fat", "carbs", "fiber")
PLAN_SLOTS = ("breakfast", "lunch", "dinner", "snack", "extra")
LAB_REPORT_LISTS = ("possible_causes", "nutrition_notes", "questions_for_doctor", "red_flags")

# error kinds
EMPTY = "empty"
NO_JSON = "no_json"
TRUNCATED = "truncated"
INVALID_JSON = "invalid_json"
WRONG_SHAPE = "wrong_shape"

_FENCE_RE = re.compile(r"```([\w+-]*)[^\S\n]*([\s\S]*?)```")
_SPLIT_RE = re.compile(r"[,;\n]")

# strict=False lets raw newlines inside strings through
_DECODER = json.JSONDecoder(strict=False)


@dataclass
class ParseResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    raw: str = ""

    @classmethod
    def success(cls, data: Any, raw: str) -> "ParseResult":
        return cls(ok=True, data=data, raw=raw[:RAW_CLIP])

    @classmethod
    def failure(cls, error: str, raw: str, data: Any = None) -> "ParseResult":
        return cls(ok=False, data=data, error=error, raw=raw[:RAW_CLIP])


# ============================================================================
# JSON extraction
# ============================================================================


def _is_json_fence(lang: str) -> bool:
    return lang.lower() in ("", "json")


def fenced_blocks(text: str) -> List[str]:
    """Contents of ```json and untagged code fences, in order."""
    return [m.group(2).strip() for m in _FENCE_RE.finditer(text) if _is_json_fence(m.group(1))]


def strip_code_fence(text: str) -> str:
    blocks = fenced_blocks(text)
    return (blocks[0] if blocks else text).strip()


def _without_foreign_fences(text: str) -> str:
    """The text with code blocks in other languages (python, sql...) cut out."""
    return _FENCE_RE.sub(lambda m: m.group(0) if _is_json_fence(m.group(1)) else "\n", text)


def _balanced_end(text: str, start: int) -> int:
    """Index of the bracket closing the one at `start`, or -1 when it is never closed."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _next_opener(text: str, pos: int) -> int:
    positions = [p for p in (text.find("{", pos), text.find("[", pos)) if p != -1]
    return min(positions) if positions else -1


def _first_document(text: str) -> Any:
    """
    Decode the first object or array found at any `{` or `[` of the text.

    Openers that start prose (":-[", "[sic") or an unclosed fragment are
    skipped. Returns None when no position decodes.
    """
    pos = _next_opener(text, 0)
    while pos != -1:
        try:
            data, _ = _DECODER.raw_decode(text, pos)
            return data
        except ValueError:
            pos = _next_opener(text, pos + 1)
        except RecursionError:
            # nested deeper than the decoder allows: skip the whole span
            end = _balanced_end(text, pos)
            if end == -1:
                return None
            pos = _next_opener(text, end + 1)
    return None


def _failure_kind(text: str) -> str:
    """Classify text with no decodable document: no bracket, unclosed bracket or bad span."""
    start = _next_opener(text, 0)
    if start == -1:
        return NO_JSON
    while start != -1:
        end = _balanced_end(text, start)
        if end == -1:
            return TRUNCATED
        start = _next_opener(text, end + 1)
    return INVALID_JSON


def extract_json(text: Any) -> ParseResult:
    """
    Find the JSON object or array in a completion.

    Candidates are tried in order: json-tagged or untagged fenced blocks, the
    text without code blocks in other languages, then the whole text. Within a
    candidate every `{` or `[` is a possible start, so brackets in the
    surrounding prose do not hide the document.
    """
    if not isinstance(text, str) or not text.strip():
        return ParseResult.failure(EMPTY, text if isinstance(text, str) else "")

    candidates = fenced_blocks(text) + [_without_foreign_fences(text), text]
    seen = set()
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        data = _first_document(candidate)
        if data is not None:
            return ParseResult.success(data, text)
    return ParseResult.failure(_failure_kind(text), text)


# ============================================================================
# Field coercion
# ============================================================================


def num_or_null(v: Any) -> Optional[float]:
    """Finite number, or a numeric string with `.` or `,` as decimal separator."""
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v) if math.isfinite(v) else None
    if isinstance(v, str):
        s = v.strip().replace(",", ".")
        if not s:
            return None
        try:
            n = float(s)
        except ValueError:
            return None
        return n if math.isfinite(n) else None
    return None


def str_or_none(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    return v.strip() or None


def str_list(v: Any) -> List[str]:
    if isinstance(v, str):
        v = _SPLIT_RE.split(v)
    if not isinstance(v, list):
        return []
    return [s.strip() for s in v if isinstance(s, str) and s.strip()]


def _macro_value(v: Any) -> Optional[float]:
    n = num_or_null(v)
    return n if n is not None and n >= 0 else None


def normalize_macros(v: Any) -> Optional[Dict[str, Optional[float]]]:
    """
    Keep the five known macro keys.

    Keys absent from the input stay absent; keys present with an unusable
    value become None. Returns None when no key is recognised.
    """
    if not isinstance(v, dict):
        return None
    out = {k: _macro_value(v[k]) for k in MACRO_KEYS if k in v}
    return out or None


def normalize_ingredients(v: Any) -> List[Dict[str, Any]]:
    if not isinstance(v, list):
        return []
    out = []
    for item in v:
        if not isinstance(item, dict):
            continue
        name = str_or_none(item.get("name"))
        amount = str_or_none(item.get("amount"))
        if not name or not amount:
            continue
        out.append({"name": name, "amount": amount, "calories": _macro_value(item.get("calories"))})
    return out


# ============================================================================
# Shape normalizers
# ============================================================================


def _object_or_failure(text: Any):
    parsed = extract_json(text)
    if not parsed.ok:
        return None, parsed
    if not isinstance(parsed.data, dict):
        return None, ParseResult.failure(WRONG_SHAPE, parsed.raw, data=parsed.data)
    return parsed.data, parsed


def normalize_dish_draft(text: Any) -> ParseResult:
    obj, parsed = _object_or_failure(text)
    if obj is None:
        return parsed
    return ParseResult.success(
        {
            "title": str_or_none(obj.get("title")),
            "ingredients": normalize_ingredients(obj.get("ingredients")),
            "instructions": str_or_none(obj.get("instructions")),
            "macros": normalize_macros(obj.get("macros")),
            "comment": str_or_none(obj.get("comment")),
        },
        parsed.raw,
    )


def normalize_macro_estimate(text: Any) -> ParseResult:
    """All five keys are always returned; unknown values are None."""
    obj, parsed = _object_or_failure(text)
    if obj is None:
        return parsed
    macros = obj.get("macros") if isinstance(obj.get("macros"), dict) else {}
    comment = obj.get("comment")
    return ParseResult.success(
        {
            "macros": {k: _macro_value(macros.get(k)) for k in MACRO_KEYS},
            "comment": comment.strip() if isinstance(comment, str) else "",
        },
        parsed.raw,
    )


def normalize_substitutes(text: Any) -> ParseResult:
    parsed = extract_json(text)
    if not parsed.ok:
        return parsed
    data = parsed.data
    items = data.get("substitutes") if isinstance(data, dict) else data
    if not isinstance(items, list):
        return ParseResult.failure(WRONG_SHAPE, parsed.raw, data=data)

    out = []
    for item in items:
        if isinstance(item, str) and item.strip():
            out.append({"name": item.strip(), "reason": ""})
            continue
        if not isinstance(item, dict):
            continue
        name = str_or_none(item.get("name"))
        if not name:
            continue
        out.append({"name": name, "reason": str_or_none(item.get("reason")) or ""})
    return ParseResult.success({"substitutes": out}, parsed.raw)


def normalize_lab_report(text: Any) -> ParseResult:
    """short_summary, key_findings and disclaimer are required; the other lists default to []."""
    obj, parsed = _object_or_failure(text)
    if obj is None:
        return parsed
    summary = str_or_none(obj.get("short_summary"))
    disclaimer = str_or_none(obj.get("disclaimer"))
    findings = obj.get("key_findings")
    if not summary or not disclaimer or not isinstance(findings, (list, str)):
        return ParseResult.failure(WRONG_SHAPE, parsed.raw, data=obj)

    data = {
        "short_summary": summary,
        "key_findings": str_list(findings),
        "disclaimer": disclaimer,
    }
    for key in LAB_REPORT_LISTS:
        data[key] = str_list(obj.get(key))
    return ParseResult.success(data, parsed.raw)


def _plan_meal(v: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(v, dict):
        return None
    title = str_or_none(v.get("title"))
    if not title:
        return None
    return {
        "title": title,
        "ingredients": str_list(v.get("ingredients")),
        "approx_macros": normalize_macros(v.get("approx_macros")),
        "instructions": str_or_none(v.get("instructions")),
    }


def _day_number(v: Any, position: int) -> int:
    n = num_or_null(v)
    if n is None or n < 1 or not n.is_integer():
        return position
    return int(n)


def normalize_plan(text: Any) -> ParseResult:
    """Requires a `days` list; meals outside the known slots are dropped."""
    obj, parsed = _object_or_failure(text)
    if obj is None:
        return parsed
    days_in = obj.get("days")
    if not isinstance(days_in, list):
        return ParseResult.failure(WRONG_SHAPE, parsed.raw, data=obj)

    days = []
    for position, day in enumerate(days_in, start=1):
        if not isinstance(day, dict):
            continue
        meals_in = day.get("meals") if isinstance(day.get("meals"), dict) else {}
        meals = {}
        for slot in PLAN_SLOTS:
            meal = _plan_meal(meals_in.get(slot))
            if meal is not None:
                meals[slot] = meal
        days.append(
            {
                "day": _day_number(day.get("day"), position),
                "meals": meals,
                "notes": str_or_none(day.get("notes")),
            }
        )

    return ParseResult.success(
        {
            "summary": str_or_none(obj.get("summary")) or "",
            "days": days,
            "shopping_list": str_list(obj.get("shopping_list")),
        },
        parsed.raw,
    )
