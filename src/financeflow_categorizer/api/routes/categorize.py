from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from financeflow_categorizer.api.dependencies import get_pipeline
from financeflow_categorizer.api.schemas import (
    BatchCategorizeRequest,
    CategorizeRequest,
    LearnRequest,
    LearnResponse,
    SuggestRequest,
)
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import CategorizationResult, CategorizationStats
from financeflow_categorizer.services.categorization import CategorizationPipeline

logger = get_logger(__name__)

router = APIRouter()


@router.post("/categorize", response_model=CategorizationResult)
async def categorize_transaction(
    req: CategorizeRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationResult:
    return await pipeline.predict(req.description, req.type)


@router.post("/categorize/batch", response_model=list[CategorizationResult])
async def categorize_batch(
    req: BatchCategorizeRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> list[CategorizationResult]:
    return await pipeline.predict_batch(req.descriptions, req.type)


@router.post("/categorize/stats", response_model=CategorizationStats)
async def categorization_stats(
    req: BatchCategorizeRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationStats:
    return await pipeline.stats(req.descriptions, req.type)


@router.post("/suggest", response_model=CategorizationResult)
async def suggest_category(
    req: SuggestRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> CategorizationResult:
    return await pipeline.suggest(req.description, req.categories)


@router.post("/learn", response_model=LearnResponse)
async def learn_override(
    req: LearnRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> LearnResponse:
    logger.info("[LEARN] '%s' -> '%s' (%s)", req.description[:50], req.category, req.type)
    try:
        rule = await pipeline.learn(req.description, req.category, req.type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return LearnResponse(status="rule_created" if rule else "history_only", rule=rule)
