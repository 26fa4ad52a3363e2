"""Decision card endpoints (cards are created through /projects/{id}/decision)."""
from fastapi import APIRouter, Depends

from research_tracker.deps import get_store
from research_tracker.exceptions import EntityNotFound
from research_tracker.schemas.decision import DecisionUpdate
from research_tracker.services import mutations
from research_tracker.services.tracker_store import TrackerStore

router = APIRouter()


@router.get("")
def list_decisions(store: TrackerStore = Depends(get_store)):
    return [d.to_wire() for d in store.document.decisions]


@router.get("/{decision_id}")
def get_decision(decision_id: str, store: TrackerStore = Depends(get_store)):
    decision = store.document.get_decision(decision_id)
    if decision is None:
        raise EntityNotFound("Decision", decision_id)
    return decision.to_wire()


@router.patch("/{decision_id}")
def update_decision(decision_id: str, payload: DecisionUpdate, store: TrackerStore = Depends(get_store)):
    doc = store.apply(mutations.update_decision, decision_id, payload.to_patch())
    return doc.get_decision(decision_id).to_wire()
