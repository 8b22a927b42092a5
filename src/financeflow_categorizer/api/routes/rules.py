from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from financeflow_categorizer.api.dependencies import get_rule_store
from financeflow_categorizer.models import ApplicableType, CategorizationRule, RuleDraft, RulePatch
from financeflow_categorizer.stores.rules import RuleNotFoundError, RuleStore

router = APIRouter(prefix="/rules")


@router.get("", response_model=list[CategorizationRule])
def list_rules(
    store: Annotated[RuleStore, Depends(get_rule_store)],
    active_only: bool = False,
    transaction_type: Annotated[ApplicableType | None, Query(alias="type")] = None,
) -> list[CategorizationRule]:
    if transaction_type == "both":
        transaction_type = None
    return store.list(active_only=active_only, transaction_type=transaction_type)


@router.post("", response_model=CategorizationRule, status_code=201)
def create_rule(
    draft: RuleDraft,
    store: Annotated[RuleStore, Depends(get_rule_store)],
) -> CategorizationRule:
    # Rules created over HTTP are always user rules.
    return store.add(draft.model_copy(update={"origin": "user"}))


@router.patch("/{rule_id}", response_model=CategorizationRule)
def update_rule(
    rule_id: str,
    patch: RulePatch,
    store: Annotated[RuleStore, Depends(get_rule_store)],
) -> CategorizationRule:
    try:
        return store.update(rule_id, patch)
    except RuleNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{rule_id}", response_model=CategorizationRule)
def delete_rule(
    rule_id: str,
    store: Annotated[RuleStore, Depends(get_rule_store)],
) -> CategorizationRule:
    try:
        return store.remove(rule_id)
    except RuleNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
