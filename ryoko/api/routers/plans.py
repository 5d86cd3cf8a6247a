from fastapi import APIRouter

from ryoko.core.preference_aggregator import aggregate_plan_preferences
from ryoko.core.schemas import AggregatedPreferences, PlanPreferencesRequest

router = APIRouter(prefix="/plans", tags=["plans"])


@router.post("/preferences", response_model=AggregatedPreferences)
def aggregate_preferences(payload: PlanPreferencesRequest) -> AggregatedPreferences:
    """Merge member preferences into the plan's vibe, must-do and veto text."""
    return aggregate_plan_preferences(payload)
