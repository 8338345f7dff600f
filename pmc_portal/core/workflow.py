"""Application stage model.

Stages advance strictly along the officer chain of the application's position
type. Each (position type, stage) pair is owned by exactly one transition, and
therefore by exactly one officer role; payment completion is the only transition
not performed by an officer. ``REJECTED`` is reachable from every pending stage
(an admin rejects while payment is awaited) and, like ``APPROVED``, is terminal.
"""
import enum
from dataclasses import dataclass

from pmc_portal.core.roles import PortalRole
from pmc_portal.models.enums import ApplicationStage, ApplicationStatus, PositionType


class ActionKind(str, enum.Enum):
    SCHEDULE = "schedule"
    APPROVE = "approve"
    SIGN = "sign"
    CERTIFICATE = "certificate"
    PAYMENT = "payment"


@dataclass(frozen=True)
class Transition:
    role: PortalRole | None
    positions: frozenset[PositionType]
    from_stage: ApplicationStage
    to_stage: ApplicationStage
    action: ActionKind

    def applies_to(self, position: PositionType, stage: ApplicationStage) -> bool:
        return self.from_stage == stage and position in self.positions


ALL_POSITIONS = frozenset(PositionType)

TERMINAL_STAGES = frozenset({ApplicationStage.APPROVED, ApplicationStage.REJECTED})
PENDING_STAGES = frozenset(s for s in ApplicationStage if s not in TERMINAL_STAGES)

# (junior role, assistant role, position) for each position-specific officer chain.
_POSITION_CHAINS = (
    (PortalRole.JUNIOR_ARCHITECT, PortalRole.ASSISTANT_ARCHITECT, PositionType.ARCHITECT),
    (PortalRole.JUNIOR_LICENCE_ENGINEER, PortalRole.ASSISTANT_LICENCE_ENGINEER, PositionType.LICENCE_ENGINEER),
    (PortalRole.JUNIOR_STRUCTURAL_ENGINEER, PortalRole.ASSISTANT_STRUCTURAL_ENGINEER, PositionType.STRUCTURAL_ENGINEER),
    (PortalRole.JUNIOR_SUPERVISOR1, PortalRole.ASSISTANT_SUPERVISOR1, PositionType.SUPERVISOR1),
    (PortalRole.JUNIOR_SUPERVISOR2, PortalRole.ASSISTANT_SUPERVISOR2, PositionType.SUPERVISOR2),
)

# Structural engineer applications go straight from document verification to
# the executive engineer.
_SKIPS_ASSISTANT = frozenset({PositionType.STRUCTURAL_ENGINEER})


def _build_transitions() -> tuple[Transition, ...]:
    table: list[Transition] = []
    for junior, assistant, position in _POSITION_CHAINS:
        only = frozenset({position})
        table.append(
            Transition(junior, only, ApplicationStage.JUNIOR_ENGINEER_PENDING,
                       ApplicationStage.DOCUMENT_VERIFICATION_PENDING, ActionKind.SCHEDULE)
        )
        after_verification = (
            ApplicationStage.EXECUTIVE_ENGINEER_PENDING
            if position in _SKIPS_ASSISTANT
            else ApplicationStage.ASSISTANT_ENGINEER_PENDING
        )
        table.append(
            Transition(junior, only, ApplicationStage.DOCUMENT_VERIFICATION_PENDING,
                       after_verification, ActionKind.APPROVE)
        )
        table.append(
            Transition(assistant, only, ApplicationStage.ASSISTANT_ENGINEER_PENDING,
                       ApplicationStage.EXECUTIVE_ENGINEER_PENDING, ActionKind.APPROVE)
        )
    table.extend([
        Transition(PortalRole.EXECUTIVE_ENGINEER, ALL_POSITIONS, ApplicationStage.EXECUTIVE_ENGINEER_PENDING,
                   ApplicationStage.CITY_ENGINEER_PENDING, ActionKind.SIGN),
        Transition(PortalRole.CITY_ENGINEER, ALL_POSITIONS, ApplicationStage.CITY_ENGINEER_PENDING,
                   ApplicationStage.PAYMENT_PENDING, ActionKind.APPROVE),
        Transition(None, ALL_POSITIONS, ApplicationStage.PAYMENT_PENDING,
                   ApplicationStage.CLERK_PENDING, ActionKind.PAYMENT),
        Transition(PortalRole.CLERK, ALL_POSITIONS, ApplicationStage.CLERK_PENDING,
                   ApplicationStage.EXECUTIVE_ENGINEER_SIGN_PENDING, ActionKind.CERTIFICATE),
        Transition(PortalRole.EXECUTIVE_ENGINEER, ALL_POSITIONS, ApplicationStage.EXECUTIVE_ENGINEER_SIGN_PENDING,
                   ApplicationStage.CITY_ENGINEER_SIGN_PENDING, ActionKind.SIGN),
        Transition(PortalRole.CITY_ENGINEER, ALL_POSITIONS, ApplicationStage.CITY_ENGINEER_SIGN_PENDING,
                   ApplicationStage.APPROVED, ActionKind.SIGN),
    ])
    return tuple(table)


TRANSITIONS = _build_transitions()

STAGE_STATUS: dict[ApplicationStage, ApplicationStatus] = {
    ApplicationStage.JUNIOR_ENGINEER_PENDING: ApplicationStatus.SUBMITTED,
    ApplicationStage.DOCUMENT_VERIFICATION_PENDING: ApplicationStatus.APPOINTMENT_SCHEDULED,
    ApplicationStage.ASSISTANT_ENGINEER_PENDING: ApplicationStatus.JUNIOR_ENGINEER_APPROVED,
    ApplicationStage.EXECUTIVE_ENGINEER_PENDING: ApplicationStatus.UNDER_REVIEW,
    ApplicationStage.CITY_ENGINEER_PENDING: ApplicationStatus.EXECUTIVE_ENGINEER_APPROVED,
    ApplicationStage.PAYMENT_PENDING: ApplicationStatus.PAYMENT_PENDING,
    ApplicationStage.CLERK_PENDING: ApplicationStatus.PAYMENT_COMPLETED,
    ApplicationStage.EXECUTIVE_ENGINEER_SIGN_PENDING: ApplicationStatus.CLERK_APPROVED,
    ApplicationStage.CITY_ENGINEER_SIGN_PENDING: ApplicationStatus.DIGITALLY_SIGNED_BY_EXECUTIVE,
    ApplicationStage.APPROVED: ApplicationStatus.COMPLETED,
    ApplicationStage.REJECTED: ApplicationStatus.REJECTED,
}

STAGE_LABELS: dict[ApplicationStage, str] = {
    ApplicationStage.JUNIOR_ENGINEER_PENDING: "Junior Engineer Pending",
    ApplicationStage.DOCUMENT_VERIFICATION_PENDING: "Document Verification Pending",
    ApplicationStage.ASSISTANT_ENGINEER_PENDING: "Assistant Engineer Pending",
    ApplicationStage.EXECUTIVE_ENGINEER_PENDING: "Executive Engineer Pending",
    ApplicationStage.CITY_ENGINEER_PENDING: "City Engineer Pending",
    ApplicationStage.PAYMENT_PENDING: "Payment Pending",
    ApplicationStage.CLERK_PENDING: "Clerk Pending",
    ApplicationStage.EXECUTIVE_ENGINEER_SIGN_PENDING: "Executive Engineer Signature Pending",
    ApplicationStage.CITY_ENGINEER_SIGN_PENDING: "City Engineer Signature Pending",
    ApplicationStage.APPROVED: "Approved",
    ApplicationStage.REJECTED: "Rejected",
}


def _check_table(transitions: tuple[Transition, ...]) -> None:
    owners: dict[tuple[PositionType, ApplicationStage], Transition] = {}
    for t in transitions:
        if t.to_stage <= t.from_stage:
            raise ValueError(f"Transition {t.from_stage.name} -> {t.to_stage.name} does not move forward")
        for position in t.positions:
            key = (position, t.from_stage)
            if key in owners:
                raise ValueError(f"Stage {t.from_stage.name} of {position.name} has two owners")
            owners[key] = t


_check_table(TRANSITIONS)


def is_terminal(stage: ApplicationStage) -> bool:
    return stage in TERMINAL_STAGES


def transition_at(position: PositionType, stage: ApplicationStage) -> Transition | None:
    for t in TRANSITIONS:
        if t.applies_to(position, stage):
            return t
    return None


def actor_for(position: PositionType, stage: ApplicationStage) -> PortalRole | None:
    """The single officer role allowed to act; None for payment and terminal stages."""
    t = transition_at(position, stage)
    return t.role if t else None


def transitions_for_role(role: PortalRole) -> tuple[Transition, ...]:
    return tuple(t for t in TRANSITIONS if t.role == role)


def find_transition(role: PortalRole, position: PositionType, stage: ApplicationStage) -> Transition | None:
    t = transition_at(position, stage)
    if t is None or t.role != role:
        return None
    return t


def next_stage(role: PortalRole, position: PositionType, stage: ApplicationStage) -> ApplicationStage | None:
    t = find_transition(role, position, stage)
    return t.to_stage if t else None


def can_reject(role: PortalRole, position: PositionType, stage: ApplicationStage) -> bool:
    """The stage owner may reject; while payment is awaited only an admin may."""
    if stage == ApplicationStage.PAYMENT_PENDING:
        return role == PortalRole.ADMIN
    return find_transition(role, position, stage) is not None


def pending_stages_for(role: PortalRole) -> frozenset[ApplicationStage]:
    return frozenset(t.from_stage for t in transitions_for_role(role))


def positions_for(role: PortalRole) -> frozenset[PositionType]:
    positions: set[PositionType] = set()
    for t in transitions_for_role(role):
        positions |= t.positions
    return frozenset(positions)


def queue_filter_for(role: PortalRole) -> tuple[tuple[ApplicationStage, frozenset[PositionType]], ...]:
    """(stage, positions) pairs making up an officer's pending queue."""
    return tuple((t.from_stage, t.positions) for t in transitions_for_role(role))


def path_for(position: PositionType) -> list[ApplicationStage]:
    """Stages an application of ``position`` visits when nobody rejects it."""
    stage = ApplicationStage.JUNIOR_ENGINEER_PENDING
    path = [stage]
    while not is_terminal(stage):
        t = transition_at(position, stage)
        if t is None:
            raise ValueError(f"No transition out of {stage.name} for {position.name}")
        stage = t.to_stage
        path.append(stage)
    return path


def status_for_stage(stage: ApplicationStage) -> ApplicationStatus:
    return STAGE_STATUS[stage]


def stages_for_status(status: ApplicationStatus) -> frozenset[ApplicationStage]:
    return frozenset(stage for stage, s in STAGE_STATUS.items() if s == status)


def stage_label(stage: ApplicationStage) -> str:
    return STAGE_LABELS[stage]
