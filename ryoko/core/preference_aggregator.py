"""
Utility for aggregating preferences from multiple members for group trips.
"""

from ryoko.core.schemas import (
    AggregatedPreferences,
    MemberPreferences,
    PlanPreferencesRequest,
)


def _unique(values: list[str]) -> list[str]:
    # Keeps first-seen order
    return list(dict.fromkeys(v for v in values if v))


def aggregate_group_vibe(preferences: list[MemberPreferences], base_vibe: str) -> str:
    """
    Fold member budgets, interests and dietary needs into the group vibe.

    Args:
        preferences: Preferences of every member who joined the plan
        base_vibe: Vibe text written by the plan creator

    Returns:
        Group vibe text for the itinerary prompt
    """
    budgets = [p.budget for p in preferences if p.budget]
    interests = _unique([i for p in preferences for i in p.interests])
    dietary = _unique([d for p in preferences for d in p.dietary])

    parts = [base_vibe] if base_vibe else []
    if budgets:
        parts.append(f"Budget considerations: {', '.join(budgets)}.")
    if interests:
        parts.append(f"Group interests include: {', '.join(interests)}.")
    if dietary:
        parts.append(f"Dietary preferences: {', '.join(dietary)}.")

    return " ".join(parts).strip() or base_vibe or ""


def _merge_lists(base: str, member_items: list[str]) -> str:
    member_items = [i for i in member_items if i]
    if not member_items:
        return base
    combined = [base, *member_items] if base else member_items
    return ", ".join(_unique(combined))


def aggregate_must_do(preferences: list[MemberPreferences], base_must_do: str) -> str:
    """Combine the creator's must-do text with every member's must-do items."""
    return _merge_lists(base_must_do, [m for p in preferences for m in p.must_do])


def aggregate_veto(preferences: list[MemberPreferences], base_veto: str) -> str:
    """Combine the creator's veto text with every member's veto items."""
    return _merge_lists(base_veto, [v for p in preferences for v in p.veto])


def aggregate_plan_preferences(request: PlanPreferencesRequest) -> AggregatedPreferences:
    members = request.members
    return AggregatedPreferences(
        group_vibe=aggregate_group_vibe(members, request.group_vibe),
        must_do_list=aggregate_must_do(members, request.must_do_list),
        veto_list=aggregate_veto(members, request.veto_list),
        member_count=len(members),
    )
