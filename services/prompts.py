"""
Prompt builders for the AI drafting endpoints.

Every builder returns a list of chat messages (system + user). JSON tasks get
a strict-JSON instruction and the expected shape appended to the system turn;
the free-text menu review does not.
"""

import json
from typing import Any, Dict, List, Optional

from app.config import settings
from domain.enums import LabReportDetail, Language, PlanGoal
from domain.schemas.ai_schemas import (
    DishAutofillRequest,
    DishDraftRequest,
    GeneratePlanRequest,
    IngredientHint,
)

Message = Dict[str, str]

STRICT_JSON = {
    "ru": "Ответь СТРОГО валидным JSON без markdown, без пояснений и без текста вокруг.",
    "en": "Answer with STRICT valid JSON only, without markdown, explanations or any text around it.",
}
SCHEMA_INTRO = {
    "ru": "Схема/формат, которого нужно придерживаться:",
    "en": "Follow this schema/format:",
}
NOT_SET = {"ru": "не указано", "en": "not specified"}

MACROS_SHAPE = {"calories": 0, "protein": 0, "fat": 0, "carbs": 0, "fiber": 0}

DISH_DRAFT_SCHEMA = {
    "title": "optional",
    "ingredients": [{"name": "...", "amount": "...", "calories": None}],
    "instructions": "short cooking steps",
    "macros": MACROS_SHAPE,
    "comment": "assumptions",
}

MACRO_ESTIMATE_SCHEMA = {
    "macros": {
        "calories": "number|null",
        "protein": "number|null",
        "fat": "number|null",
        "carbs": "number|null",
        "fiber": "number|null",
    },
    "comment": "string",
}

SUBSTITUTES_SCHEMA = {"substitutes": [{"name": "...", "reason": "..."}]}

LAB_REPORT_SCHEMA = {
    "short_summary": "string",
    "key_findings": ["string"],
    "possible_causes": ["string"],
    "nutrition_notes": ["string"],
    "questions_for_doctor": ["string"],
    "red_flags": ["string"],
    "disclaimer": "string",
}

PLAN_SCHEMA = {
    "summary": "string",
    "days": [
        {
            "day": 1,
            "meals": {
                "breakfast": {
                    "title": "string",
                    "ingredients": ["string"],
                    "approx_macros": MACROS_SHAPE,
                    "instructions": "string",
                },
            },
            "notes": "string",
        },
    ],
    "shopping_list": ["string"],
}

GOAL_TEXT = {
    "ru": {
        PlanGoal.FAT_LOSS: "похудение",
        PlanGoal.MUSCLE_GAIN: "набор мышц",
        PlanGoal.MAINTENANCE: "поддержание веса",
    },
    "en": {
        PlanGoal.FAT_LOSS: "fat loss",
        PlanGoal.MUSCLE_GAIN: "muscle gain",
        PlanGoal.MAINTENANCE: "weight maintenance",
    },
}


def resolve_language(language: Optional[Language]) -> str:
    if language is None:
        return settings.llm_default_language
    return language.value


def schema_hint(language: str, schema: Any = None) -> str:
    """Strict-JSON instruction, followed by the expected shape when one is given."""
    text = STRICT_JSON[language]
    if schema is None:
        return text
    return f"{text}\n{SCHEMA_INTRO[language]}\n{json.dumps(schema, indent=2, ensure_ascii=False)}"


def json_messages(system: str, user: str, language: str, schema: Any = None) -> List[Message]:
    return [
        {"role": "system", "content": f"{system}\n\n{schema_hint(language, schema)}"},
        {"role": "user", "content": user},
    ]


def _or_not_set(value: Any, language: str) -> str:
    if value is None or value == "":
        return NOT_SET[language]
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _ingredients_text(items: List[IngredientHint]) -> str:
    parts = [i.as_text() for i in items]
    return ", ".join(p for p in parts if p) or "—"


def _dish_system(language: str) -> str:
    if language == "ru":
        return "\n".join([
            "Ты — помощник нутрициолога.",
            "Все строки — на русском языке.",
            "Сгенерируй реалистичные ингредиенты и граммовки на 1 порцию.",
            "Дай краткую инструкцию приготовления.",
            "Если считаешь КБЖУ — делай это приблизительно по стандартным продуктам.",
            "Если есть допущения — напиши в comment.",
        ])
    return "\n".join([
        "You are a nutritionist assistant.",
        "All strings must be in English.",
        "Generate realistic ingredients and amounts for one serving.",
        "Give short cooking instructions.",
        "Estimate macros approximately from standard products.",
        "Put any assumptions into comment.",
    ])


def dish_draft_messages(req: DishDraftRequest, language: str) -> List[Message]:
    lines = [f'Dish: "{req.title}"']
    if req.category:
        lines.append(f"Category: {req.category}")
    lines.append(f"Current ingredients (if any): {_ingredients_text(req.ingredients)}")
    return json_messages(_dish_system(language), "\n".join(lines), language, DISH_DRAFT_SCHEMA)


def dish_autofill_messages(req: DishAutofillRequest, language: str) -> List[Message]:
    lines = [f'Dish: "{req.title}"']
    if req.category:
        lines.append(f"Category: {req.category}")
    lines.append(f"Current ingredients (if any): {_ingredients_text(req.ingredients)}")
    lines.append(f"Client preferences: {_or_not_set(req.preferences, language)}")
    if language == "ru":
        lines.append("Дополни недостающие поля блюда, сохранив уже заданные ингредиенты.")
    else:
        lines.append("Fill in the missing fields of the dish and keep the ingredients already given.")
    return json_messages(_dish_system(language), "\n".join(lines), language, DISH_DRAFT_SCHEMA)


def macro_estimate_messages(name: Optional[str], ingredients: str, language: str) -> List[Message]:
    if language == "ru":
        system = "Ты профессиональный нутрициолог. Отвечай СТРОГО на русском языке."
        user = "\n".join([
            "Оцени КБЖУ для ВСЕГО блюда по ингредиентам и типичным значениям (сырая масса/обычные продукты).",
            "Если что-то неизвестно — сделай разумные допущения и кратко объясни в comment.",
            "",
            f"Название: {name or 'Блюдо'}",
            f"Ингредиенты: {ingredients}",
        ])
    else:
        system = "You are a professional nutritionist. Answer in English."
        user = "\n".join([
            "Estimate calories, protein, fat, carbs and fiber for the WHOLE dish from its ingredients.",
            "If something is unknown make reasonable assumptions and explain them briefly in comment.",
            "",
            f"Name: {name or 'Dish'}",
            f"Ingredients: {ingredients}",
        ])
    return json_messages(system, user, language, MACRO_ESTIMATE_SCHEMA)


def substitute_messages(ingredient: str, reason: Optional[str], language: str) -> List[Message]:
    if language == "ru":
        system = (
            "Ты нутрициолог. Подбираешь безопасные и реалистичные замены ингредиентов."
        )
        user = "\n".join([
            "Подбери 3-5 замен для ингредиента с учётом причины.",
            f"Ингредиент: {ingredient}",
            f"Причина замены: {reason or 'не указана'}",
        ])
    else:
        system = "You are a nutritionist. You suggest safe and realistic ingredient substitutes."
        user = "\n".join([
            "Suggest 3-5 substitutes for the ingredient, taking the reason into account.",
            f"Ingredient: {ingredient}",
            f"Reason: {reason or 'not specified'}",
        ])
    return json_messages(system, user, language, SUBSTITUTES_SCHEMA)


def menu_hints_messages(
    menu: Dict[str, Any], client_profile: Optional[Dict[str, Any]], language: str
) -> List[Message]:
    """Free-text review of a menu; the only builder without a JSON instruction."""
    menu_json = json.dumps(menu, indent=2, ensure_ascii=False, default=str)
    profile_json = json.dumps(client_profile or {}, indent=2, ensure_ascii=False, default=str)
    if language == "ru":
        system = (
            "Ты профессиональный нутрициолог. Анализируешь недельные рационы, "
            "подсказываешь, что улучшить. Пиши коротко и по делу."
        )
        user = "\n".join([
            "Вот рацион (структура в JSON). Дай рекомендации:",
            "",
            "1) Насколько он соответствует цели (если указана).",
            "2) Достаточно ли белка, овощей, разнообразия.",
            "3) Что можно улучшить (конкретные рекомендации).",
            "4) Возможные предупреждения (слишком мало/много калорий, опасные сочетания и т.п.).",
            "",
            "Рацион (Menu JSON):",
            menu_json,
            "",
            "Профиль клиента (если есть):",
            profile_json,
        ])
    else:
        system = (
            "You are a professional nutritionist reviewing weekly meal plans. "
            "Be short and to the point."
        )
        user = "\n".join([
            "Here is a meal plan (as JSON). Give recommendations:",
            "",
            "1) How well it matches the goal (if set).",
            "2) Whether protein, vegetables and variety are sufficient.",
            "3) What to improve (concrete advice).",
            "4) Warnings (too few or too many calories, risky combinations).",
            "",
            "Menu JSON:",
            menu_json,
            "",
            "Client profile (if any):",
            profile_json,
        ])
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def plan_messages(req: GeneratePlanRequest, language: str) -> List[Message]:
    goal = GOAL_TEXT[language][req.goal]
    if language == "ru":
        system = (
            "Ты профессиональный нутрициолог. Отвечай СТРОГО на русском языке. "
            "Учитывай аллергию/запреты/бюджет. Если данных мало — делай разумные "
            "допущения и пиши их в summary."
        )
        user = "\n".join([
            f"Составь план питания на {req.days} дней.",
            f"Цель: {goal}",
            f"Приёмов пищи в день: {req.meals_per_day}",
            f"Целевые калории в день (если указано): {_or_not_set(req.calories_target, language)}",
            "",
            f"Аллергии/непереносимость: {_or_not_set(req.allergies, language)}",
            f"Запрещённые продукты: {_or_not_set(req.banned_foods, language)}",
            f"Предпочтения: {_or_not_set(req.preferences, language)}",
            f"Бюджет: {_or_not_set(req.budget, language)}",
            f"Доп. заметки: {_or_not_set(req.notes, language)}",
            "",
            "Требования:",
            "- Для каждого дня: meals (breakfast/lunch/dinner/snack/extra по необходимости).",
            "- ingredients — строками с граммовками/штучками.",
            "- instructions — коротко.",
            "- shopping_list — общий список покупок на весь период (кратко).",
        ])
    else:
        system = (
            "You are a professional nutritionist. Answer in English. "
            "Respect allergies, banned foods and budget. If data is scarce make "
            "reasonable assumptions and state them in summary."
        )
        user = "\n".join([
            f"Create a meal plan for {req.days} days.",
            f"Goal: {goal}",
            f"Meals per day: {req.meals_per_day}",
            f"Daily calorie target (if set): {_or_not_set(req.calories_target, language)}",
            "",
            f"Allergies/intolerances: {_or_not_set(req.allergies, language)}",
            f"Banned foods: {_or_not_set(req.banned_foods, language)}",
            f"Preferences: {_or_not_set(req.preferences, language)}",
            f"Budget: {_or_not_set(req.budget, language)}",
            f"Notes: {_or_not_set(req.notes, language)}",
            "",
            "Requirements:",
            "- For every day: meals (breakfast/lunch/dinner/snack/extra as needed).",
            "- ingredients as strings with amounts.",
            "- instructions short.",
            "- shopping_list: one short list for the whole period.",
        ])
    return json_messages(system, user, language, PLAN_SCHEMA)


def lab_report_messages(
    ocr_text: str, detail: LabReportDetail, language: str
) -> List[Message]:
    """Explain a recognized lab report without diagnoses or prescriptions."""
    if language == "ru":
        system = (
            "Ты аккуратный помощник нутрициолога. Ты объясняешь понятно и безопасно. "
            "Не даёшь медицинских назначений."
        )
        style = (
            "Чуть подробнее, но всё равно без воды."
            if detail == LabReportDetail.DETAILED
            else "Очень коротко и по делу, как заметка в телефоне."
        )
        user = "\n".join([
            "Тебе дали распознанный текст лабораторного анализа (OCR).",
            "Сделай краткий разбор результатов и практичные рекомендации по питанию и образу жизни.",
            "Важно:",
            "- НЕ ставь диагнозов, не назначай лекарства и дозировки.",
            "- Если в тексте нет референсов или единиц, так и скажи.",
            "- Отмечай возможные тревожные признаки только как повод обсудить с врачом или лабораторией.",
            style,
            "",
            "OCR-ТЕКСТ:",
            ocr_text,
        ])
    else:
        system = (
            "You are a careful nutritionist assistant. You explain clearly and safely "
            "and never give medical prescriptions."
        )
        style = (
            "Be a bit more detailed, but still concise."
            if detail == LabReportDetail.DETAILED
            else "Be very short and to the point, like a phone note."
        )
        user = "\n".join([
            "You are given the recognized text of a lab report (OCR).",
            "Briefly explain the results and give practical nutrition and lifestyle advice.",
            "Important:",
            "- Do NOT diagnose, do not prescribe drugs or doses.",
            "- If reference ranges or units are missing, say so.",
            "- Mention possible warning signs only as a reason to talk to a doctor or the lab.",
            style,
            "",
            "OCR TEXT:",
            ocr_text,
        ])
    return json_messages(system, user, language, LAB_REPORT_SCHEMA)
