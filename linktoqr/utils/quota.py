"""Plan-based quota policy

Functions:
    limit_for(plan) -> int | None:
        Maximum number of active dynamic codes an account on `plan` may own.
        None means unlimited.

    format_limit(limit) -> int | str:
        API representation of a limit ('unlimited' for None).

Example:
    >>> limit_for('free')
    2
    >>> limit_for('business') is None
    True
    >>> limit_for('no-such-plan')
    2
"""

from linktoqr.constants import Plan, PLAN_LIMITS


def resolve_plan(plan: str | Plan | None) -> Plan:
    """Map a stored plan name to a Plan, falling back to the free tier."""
    try:
        return Plan(plan)
    except ValueError:
        return Plan.FREE


def limit_for(plan: str | Plan | None) -> int | None:
    return PLAN_LIMITS[resolve_plan(plan)]


def format_limit(limit: int | None) -> int | str:
    return 'unlimited' if limit is None else limit
