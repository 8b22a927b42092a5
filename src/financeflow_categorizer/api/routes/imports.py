from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from financeflow_categorizer.api.dependencies import get_pipeline
from financeflow_categorizer.api.schemas import ImportRequest
from financeflow_categorizer.ingestion.banks import UnknownBankError
from financeflow_categorizer.services.categorization import CategorizationPipeline, ImportReport

router = APIRouter()


@router.post("/import/csv", response_model=ImportReport)
async def import_csv(
    req: ImportRequest,
    pipeline: Annotated[CategorizationPipeline, Depends(get_pipeline)],
) -> ImportReport:
    try:
        return await pipeline.import_csv(req.content, bank=req.bank, categorize=req.categorize)
    except UnknownBankError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
