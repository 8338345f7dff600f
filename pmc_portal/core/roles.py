"""Role vocabulary and route authorization tables.

The backend hands out PascalCase role strings (``AccountRole``). Everything that
decides access, on the server and in the client session, works on the internal
lowercase ``PortalRole`` obtained through ``map_role``. Several external roles
intentionally collapse onto the same internal role.
"""
import enum

from pmc_portal.models.enums import AccountRole


class PortalRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"
    JUNIOR_ARCHITECT = "juniorarchitect"
    ASSISTANT_ARCHITECT = "assistantarchitect"
    JUNIOR_LICENCE_ENGINEER = "juniorlicenceengineer"
    ASSISTANT_LICENCE_ENGINEER = "assistantlicenceengineer"
    JUNIOR_STRUCTURAL_ENGINEER = "juniorstructuralengineer"
    ASSISTANT_STRUCTURAL_ENGINEER = "assistantstructuralengineer"
    JUNIOR_SUPERVISOR1 = "juniorsupervisor1"
    ASSISTANT_SUPERVISOR1 = "assistantsupervisor1"
    JUNIOR_SUPERVISOR2 = "juniorsupervisor2"
    ASSISTANT_SUPERVISOR2 = "assistantsupervisor2"
    EXECUTIVE_ENGINEER = "executiveengineer"
    CITY_ENGINEER = "cityengineer"
    CLERK = "clerk"


ROLE_MAPPING: dict[str, PortalRole] = {
    AccountRole.USER.value: PortalRole.USER,
    AccountRole.ADMIN.value: PortalRole.ADMIN,
    AccountRole.JUNIOR_ENGINEER.value: PortalRole.JUNIOR_ARCHITECT,
    AccountRole.JUNIOR_ARCHITECT.value: PortalRole.JUNIOR_ARCHITECT,
    AccountRole.ASSISTANT_ENGINEER.value: PortalRole.ASSISTANT_ARCHITECT,
    AccountRole.ASSISTANT_ARCHITECT.value: PortalRole.ASSISTANT_ARCHITECT,
    AccountRole.JUNIOR_LICENCE_ENGINEER.value: PortalRole.JUNIOR_LICENCE_ENGINEER,
    AccountRole.ASSISTANT_LICENCE_ENGINEER.value: PortalRole.ASSISTANT_LICENCE_ENGINEER,
    AccountRole.JUNIOR_STRUCTURAL_ENGINEER.value: PortalRole.JUNIOR_STRUCTURAL_ENGINEER,
    AccountRole.ASSISTANT_STRUCTURAL_ENGINEER.value: PortalRole.ASSISTANT_STRUCTURAL_ENGINEER,
    AccountRole.JUNIOR_SUPERVISOR1.value: PortalRole.JUNIOR_SUPERVISOR1,
    AccountRole.ASSISTANT_SUPERVISOR1.value: PortalRole.ASSISTANT_SUPERVISOR1,
    AccountRole.JUNIOR_SUPERVISOR2.value: PortalRole.JUNIOR_SUPERVISOR2,
    AccountRole.ASSISTANT_SUPERVISOR2.value: PortalRole.ASSISTANT_SUPERVISOR2,
    AccountRole.EXECUTIVE_ENGINEER.value: PortalRole.EXECUTIVE_ENGINEER,
    AccountRole.CITY_ENGINEER.value: PortalRole.CITY_ENGINEER,
    AccountRole.CLERK.value: PortalRole.CLERK,
}

OFFICER_ROLES = frozenset(r for r in PortalRole if r not in (PortalRole.USER, PortalRole.ADMIN))
JUNIOR_ROLES = frozenset(r for r in OFFICER_ROLES if r.value.startswith("junior"))
ASSISTANT_ROLES = frozenset(r for r in OFFICER_ROLES if r.value.startswith("assistant"))
SIGNING_ROLES = frozenset({PortalRole.EXECUTIVE_ENGINEER, PortalRole.CITY_ENGINEER})

LANDING_ROUTES: dict[PortalRole, str] = {
    PortalRole.USER: "/user/dashboard",
    PortalRole.ADMIN: "/officers/admin/dashboard",
    PortalRole.JUNIOR_ARCHITECT: "/officers/junior-architect/dashboard",
    PortalRole.ASSISTANT_ARCHITECT: "/officers/assistant-architect/dashboard",
    PortalRole.JUNIOR_LICENCE_ENGINEER: "/officers/junior-licence-engineer/dashboard",
    PortalRole.ASSISTANT_LICENCE_ENGINEER: "/officers/assistant-licence-engineer/dashboard",
    PortalRole.JUNIOR_STRUCTURAL_ENGINEER: "/officers/junior-structural-engineer/dashboard",
    PortalRole.ASSISTANT_STRUCTURAL_ENGINEER: "/officers/assistant-structural-engineer/dashboard",
    PortalRole.JUNIOR_SUPERVISOR1: "/officers/junior-supervisor1/dashboard",
    PortalRole.ASSISTANT_SUPERVISOR1: "/officers/assistant-supervisor1/dashboard",
    PortalRole.JUNIOR_SUPERVISOR2: "/officers/junior-supervisor2/dashboard",
    PortalRole.ASSISTANT_SUPERVISOR2: "/officers/assistant-supervisor2/dashboard",
    PortalRole.EXECUTIVE_ENGINEER: "/officers/executive-engineer/dashboard",
    PortalRole.CITY_ENGINEER: "/officers/city-engineer/dashboard",
    PortalRole.CLERK: "/officers/clerk/dashboard",
}

PROTECTED_ROUTES: tuple[tuple[str, frozenset[PortalRole]], ...] = (
    ("/user", frozenset({PortalRole.USER})),
    ("/payment", frozenset({PortalRole.USER})),
    ("/officers/admin", frozenset({PortalRole.ADMIN})),
    ("/officers/junior-architect", frozenset({PortalRole.JUNIOR_ARCHITECT})),
    ("/officers/assistant-engineer", frozenset({PortalRole.ASSISTANT_ARCHITECT})),
    ("/officers/assistant-architect", frozenset({PortalRole.ASSISTANT_ARCHITECT})),
    ("/officers/junior-licence-engineer", frozenset({PortalRole.JUNIOR_LICENCE_ENGINEER})),
    ("/officers/assistant-licence-engineer", frozenset({PortalRole.ASSISTANT_LICENCE_ENGINEER})),
    ("/officers/junior-structural-engineer", frozenset({PortalRole.JUNIOR_STRUCTURAL_ENGINEER})),
    ("/officers/assistant-structural-engineer", frozenset({PortalRole.ASSISTANT_STRUCTURAL_ENGINEER})),
    ("/officers/junior-supervisor1", frozenset({PortalRole.JUNIOR_SUPERVISOR1})),
    ("/officers/assistant-supervisor1", frozenset({PortalRole.ASSISTANT_SUPERVISOR1})),
    ("/officers/junior-supervisor2", frozenset({PortalRole.JUNIOR_SUPERVISOR2})),
    ("/officers/assistant-supervisor2", frozenset({PortalRole.ASSISTANT_SUPERVISOR2})),
    ("/officers/chief-engineer", frozenset({PortalRole.EXECUTIVE_ENGINEER})),
    ("/officers/executive-engineer", frozenset({PortalRole.EXECUTIVE_ENGINEER})),
    ("/officers/city-engineer", frozenset({PortalRole.CITY_ENGINEER})),
    ("/officers/clerk", frozenset({PortalRole.CLERK})),
)

PUBLIC_ROUTES = frozenset({
    "/",
    "/auth/login",
    "/auth/officer-login",
    "/auth/guest-login",
    "/guest/login",
    "/guest/certificates",
    "/guest/certificate-download",
    "/unauthorized",
})

LOGIN_ROUTE = "/auth/login"
UNAUTHORIZED_ROUTE = "/unauthorized"
NOT_FOUND_ROUTE = "/404"


def map_role(external_role: str | None) -> PortalRole:
    if not external_role:
        return PortalRole.USER
    return ROLE_MAPPING.get(external_role, PortalRole.USER)


def landing_route_for(role: PortalRole) -> str:
    return LANDING_ROUTES[role]


def external_roles_for(role: PortalRole) -> frozenset[AccountRole]:
    return frozenset(AccountRole(ext) for ext, internal in ROLE_MAPPING.items() if internal == role)


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def allowed_roles_for(path: str) -> frozenset[PortalRole] | None:
    """Allow-list of the protected route owning ``path``, or None when unprotected."""
    normalized = "/" + path.strip("/") if path.strip("/") else "/"
    best: tuple[str, frozenset[PortalRole]] | None = None
    for prefix, roles in PROTECTED_ROUTES:
        if _matches(normalized, prefix) and (best is None or len(prefix) > len(best[0])):
            best = (prefix, roles)
    return best[1] if best else None


def is_known_route(path: str) -> bool:
    normalized = "/" + path.strip("/") if path.strip("/") else "/"
    return normalized in PUBLIC_ROUTES or allowed_roles_for(normalized) is not None
