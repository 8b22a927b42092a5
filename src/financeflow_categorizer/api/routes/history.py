from typing import Annotated

from fastapi import APIRouter, Depends

from financeflow_categorizer.api.dependencies import get_history
from financeflow_categorizer.api.schemas import ObserveRequest
from financeflow_categorizer.models import HistoryPattern
from financeflow_categorizer.stores.history import HistoryIndex

router = APIRouter(prefix="/history")


@router.get("", response_model=list[HistoryPattern])
def list_patterns(
    history: Annotated[HistoryIndex, Depends(get_history)],
) -> list[HistoryPattern]:
    return sorted(history.patterns(), key=lambda pattern: pattern.occurrence_count, reverse=True)


@router.post("/observe", response_model=HistoryPattern | None)
def observe(
    req: ObserveRequest,
    history: Annotated[HistoryIndex, Depends(get_history)],
) -> HistoryPattern | None:
    return history.observe(req.description, req.category)


@router.post("/clear")
def clear_history(
    history: Annotated[HistoryIndex, Depends(get_history)],
) -> dict[str, str]:
    history.clear()
    return {"status": "success", "message": "History cleared"}
