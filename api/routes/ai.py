"""AI drafting routes: prompt the completion API and normalize its answer"""

from fastapi import APIRouter, Depends
import logging

from adapters.llm_adapter import LLMClient
from adapters.ocr_adapter import OCRReader
from api.dependencies import get_current_user, get_llm, get_ocr
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas.ai_schemas import (
    DishAutofillRequest,
    DishDraftRequest,
    DishDraftResponse,
    DishMacrosRequest,
    DishMacrosResponse,
    GeneratePlanRequest,
    LabReportRequest,
    LabReportResponse,
    MenuHintsRequest,
    MenuHintsResponse,
    PlanResponse,
    SubstituteRequest,
    SubstituteResponse,
)
from services.ai_service import AIService

router = APIRouter(prefix="/ai", tags=["AI"], responses=ERROR_RESPONSES)
logger = logging.getLogger("nutricoach.api.ai")


@router.post("/dish-draft", response_model=DishDraftResponse, response_model_exclude_unset=True)
def dish_draft(
    payload: DishDraftRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
):
    """Draft ingredients, instructions and macros for a dish title"""
    logger.info(f"dish_draft_requested user_id={user.user_id}")
    return AIService.dish_draft(llm, payload)


@router.post("/dish-autofill", response_model=DishDraftResponse, response_model_exclude_unset=True)
def dish_autofill(
    payload: DishAutofillRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
):
    logger.info(f"dish_autofill_requested user_id={user.user_id}")
    return AIService.dish_autofill(llm, payload)


@router.post("/dish-macros", response_model=DishMacrosResponse)
def dish_macros(
    payload: DishMacrosRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
):
    """Estimate macros of a whole dish; unknown values are null"""
    return AIService.dish_macros(llm, payload)


@router.post("/ingredient-substitute", response_model=SubstituteResponse)
def ingredient_substitute(
    payload: SubstituteRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
):
    return AIService.ingredient_substitutes(llm, payload)


@router.post("/menu-hints", response_model=MenuHintsResponse)
def menu_hints(
    payload: MenuHintsRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
):
    """Free-text review of a menu against the client's goal and restrictions"""
    return AIService.menu_hints(llm, payload)


@router.post("/generate-plan", response_model=PlanResponse)
def generate_plan(
    payload: GeneratePlanRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
):
    """Multi-day plan; days are clamped to 3..30 and meals per day to 3..5"""
    logger.info(f"plan_requested user_id={user.user_id} goal={payload.goal.value} days={payload.days}")
    return AIService.generate_plan(llm, payload)


@router.post("/lab-report", response_model=LabReportResponse)
def lab_report(
    payload: LabReportRequest,
    user: AppUser = Depends(get_current_user),
    llm: LLMClient = Depends(get_llm),
    ocr: OCRReader = Depends(get_ocr),
):
    """Plain-language notes on a lab report: summary, findings, questions for a doctor"""
    logger.info(
        f"lab_report_requested user_id={user.user_id} detail={payload.detail.value} "
        f"source={'text' if payload.ocr_text else 'image'}"
    )
    return AIService.lab_report(llm, ocr, payload)
