from fastapi import HTTPException, Request

from financeflow_categorizer.manager import CategorizationEngine
from financeflow_categorizer.services.categorization import CategorizationPipeline
from financeflow_categorizer.stores.history import HistoryIndex
from financeflow_categorizer.stores.rules import RuleStore


def get_engine(request: Request) -> CategorizationEngine:
    engine = getattr(request.app.state, "engine", None)
    if not engine:
        raise HTTPException(status_code=500, detail="Engine not initialized")
    return engine


def get_pipeline(request: Request) -> CategorizationPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline


def get_rule_store(request: Request) -> RuleStore:
    return get_engine(request).rules


def get_history(request: Request) -> HistoryIndex:
    return get_engine(request).history
