import enum
from dataclasses import dataclass
from pmc_portal.core.roles import (
    LOGIN_ROUTE,
    NOT_FOUND_ROUTE,
    UNAUTHORIZED_ROUTE,
    PortalRole,
    allowed_roles_for,
    is_known_route,
)
from pmc_portal.client.session import SessionState


class GuardOutcome(str, enum.Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    location: str | None = None
    from_path: str | None = None


def guard(state: SessionState, path: str, allowed_roles: frozenset[PortalRole] | None = None) -> GuardDecision:
    """Decide what navigating to ``path`` shows for the current session."""
    if allowed_roles is None:
        if not is_known_route(path):
            return GuardDecision(GuardOutcome.NOT_FOUND, location=NOT_FOUND_ROUTE)
        allowed_roles = allowed_roles_for(path)
        if allowed_roles is None:
            return GuardDecision(GuardOutcome.RENDER)

    if state.is_loading:
        return GuardDecision(GuardOutcome.LOADING)
    if not state.is_authenticated or state.user is None:
        return GuardDecision(GuardOutcome.REDIRECT, location=LOGIN_ROUTE, from_path=path)
    if state.user.role not in allowed_roles:
        return GuardDecision(GuardOutcome.REDIRECT, location=UNAUTHORIZED_ROUTE)
    return GuardDecision(GuardOutcome.RENDER)
