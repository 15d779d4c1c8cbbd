import logging

from adapters.llm_adapter import LLMClient
from adapters.ocr_adapter import OCRReader
from app.config import settings
from app.exceptions import LLMOutputError
from domain.schemas.ai_schemas import (
    DishAutofillRequest,
    DishDraftRequest,
    DishDraftResponse,
    DishMacrosRequest,
    DishMacrosResponse,
    GeneratePlanRequest,
    LabReportAnalysis,
    LabReportMeta,
    LabReportRequest,
    LabReportResponse,
    MenuHintsRequest,
    MenuHintsResponse,
    PlanResponse,
    SubstituteRequest,
    SubstituteResponse,
)
from services import prompts
from services.llm_normalizer import (
    ParseResult,
    normalize_dish_draft,
    normalize_lab_report,
    normalize_macro_estimate,
    normalize_plan,
    normalize_substitutes,
)

logger = logging.getLogger("nutricoach.services.ai")

PLAN_MAX_TOKENS = 1400
LAB_REPORT_MAX_TOKENS = 900
NO_TEXT_MESSAGE = "No text was recognized; try a sharper photo without glare, straight and well lit"


def clip_ocr_text(text: str) -> str:
    text = (text or "").replace("\x00", "").strip()
    return text[: settings.lab_report_max_chars]


def _draft_response(data: dict) -> DishDraftResponse:
    # top-level fields the model left out stay unset; nulls inside macros and
    # ingredients are kept
    return DishDraftResponse(**{k: v for k, v in data.items() if v is not None})


def _unwrap(result: ParseResult, task: str):
    if not result.ok:
        logger.warning(f"llm_output_rejected task={task} error={result.error}")
        raise LLMOutputError(details={"error": result.error, "raw": result.raw})
    return result.data


class AIService:
    """Prompt the model for drafting tasks and normalize what it returns."""

    @staticmethod
    def dish_draft(llm: LLMClient, req: DishDraftRequest) -> DishDraftResponse:
        language = prompts.resolve_language(req.language)
        content = llm.chat(
            prompts.dish_draft_messages(req, language), temperature=0.2, json_mode=True
        )
        data = _unwrap(normalize_dish_draft(content), "dish_draft")
        logger.info(f"dish_draft_ready ingredients={len(data['ingredients'])}")
        return _draft_response(data)

    @staticmethod
    def dish_autofill(llm: LLMClient, req: DishAutofillRequest) -> DishDraftResponse:
        language = prompts.resolve_language(req.language)
        content = llm.chat(
            prompts.dish_autofill_messages(req, language), temperature=0.2, json_mode=True
        )
        data = _unwrap(normalize_dish_draft(content), "dish_autofill")
        logger.info(f"dish_autofill_ready ingredients={len(data['ingredients'])}")
        return _draft_response(data)

    @staticmethod
    def dish_macros(llm: LLMClient, req: DishMacrosRequest) -> DishMacrosResponse:
        language = prompts.resolve_language(req.language)
        content = llm.chat(
            prompts.macro_estimate_messages(req.name, req.ingredients, language),
            temperature=0,
        )
        return DishMacrosResponse(**_unwrap(normalize_macro_estimate(content), "dish_macros"))

    @staticmethod
    def ingredient_substitutes(llm: LLMClient, req: SubstituteRequest) -> SubstituteResponse:
        language = prompts.resolve_language(req.language)
        content = llm.chat(
            prompts.substitute_messages(req.ingredient, req.reason, language),
            temperature=0,
        )
        data = _unwrap(normalize_substitutes(content), "ingredient_substitute")
        logger.info(f"substitutes_ready count={len(data['substitutes'])}")
        return SubstituteResponse(**data)

    @staticmethod
    def menu_hints(llm: LLMClient, req: MenuHintsRequest) -> MenuHintsResponse:
        language = prompts.resolve_language(req.language)
        profile = (
            req.client_profile.model_dump(exclude_none=True) if req.client_profile else None
        )
        text = llm.chat(prompts.menu_hints_messages(req.menu, profile, language))
        return MenuHintsResponse(text=text)

    @staticmethod
    def generate_plan(llm: LLMClient, req: GeneratePlanRequest) -> PlanResponse:
        language = prompts.resolve_language(req.language)
        content = llm.chat(
            prompts.plan_messages(req, language),
            temperature=0,
            max_tokens=PLAN_MAX_TOKENS,
        )
        data = _unwrap(normalize_plan(content), "generate_plan")
        logger.info(
            f"plan_generated goal={req.goal.value} requested_days={req.days} "
            f"returned_days={len(data['days'])}"
        )
        return PlanResponse(**data)

    @staticmethod
    def lab_report(llm: LLMClient, ocr: OCRReader, req: LabReportRequest) -> LabReportResponse:
        """
        Explain a lab report from client-side OCR text or from a scan image.

        An image without recognizable text is not an error: the response
        carries `error` and no analysis, and the model is not called.
        """
        language = prompts.resolve_language(req.language)
        if req.ocr_text:
            meta = LabReportMeta(detail=req.detail, source="text")
            text = clip_ocr_text(req.ocr_text)
        else:
            ocr_lang = req.ocr_lang or settings.ocr_default_lang
            raw_text, content_type = ocr.read_url(req.signed_url, ocr_lang)
            meta = LabReportMeta(
                ocr_lang=ocr_lang, detail=req.detail, content_type=content_type, source="image"
            )
            text = clip_ocr_text(raw_text)

        if not text:
            logger.info(f"lab_report_no_text source={meta.source}")
            return LabReportResponse(ocr_text="", error=NO_TEXT_MESSAGE, meta=meta)

        content = llm.chat(
            prompts.lab_report_messages(text, req.detail, language),
            temperature=0.2,
            max_tokens=LAB_REPORT_MAX_TOKENS,
            json_mode=True,
        )
        analysis = _unwrap(normalize_lab_report(content), "lab_report")
        logger.info(
            f"lab_report_ready source={meta.source} detail={req.detail.value} "
            f"chars={len(text)} findings={len(analysis['key_findings'])}"
        )
        return LabReportResponse(ocr_text=text, analysis=LabReportAnalysis(**analysis), meta=meta)
