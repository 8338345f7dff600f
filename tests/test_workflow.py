import pytest

from pmc_portal.core import workflow
from pmc_portal.core.roles import OFFICER_ROLES, PortalRole
from pmc_portal.core.workflow import ActionKind
from pmc_portal.models.enums import ApplicationStage, ApplicationStatus, PositionType

S = ApplicationStage


@pytest.mark.parametrize("position", list(PositionType))
def test_path_is_strictly_increasing_and_ends_approved(position):
    path = workflow.path_for(position)
    assert path[0] == S.JUNIOR_ENGINEER_PENDING
    assert path[-1] == S.APPROVED
    assert all(a < b for a, b in zip(path, path[1:]))


def test_structural_engineer_skips_assistant_stage():
    path = workflow.path_for(PositionType.STRUCTURAL_ENGINEER)
    assert S.ASSISTANT_ENGINEER_PENDING not in path
    assert workflow.next_stage(
        PortalRole.JUNIOR_STRUCTURAL_ENGINEER, PositionType.STRUCTURAL_ENGINEER, S.DOCUMENT_VERIFICATION_PENDING
    ) == S.EXECUTIVE_ENGINEER_PENDING


@pytest.mark.parametrize("position", [p for p in PositionType if p != PositionType.STRUCTURAL_ENGINEER])
def test_other_positions_visit_every_stage(position):
    assert workflow.path_for(position) == [s for s in S if s != S.REJECTED]


def test_every_pending_stage_has_exactly_one_owner():
    for position in PositionType:
        for stage in workflow.PENDING_STAGES:
            owners = [t for t in workflow.TRANSITIONS if t.applies_to(position, stage)]
            assert len(owners) == 1, (position, stage)


def test_payment_step_has_no_officer():
    assert workflow.actor_for(PositionType.ARCHITECT, S.PAYMENT_PENDING) is None
    t = workflow.transition_at(PositionType.ARCHITECT, S.PAYMENT_PENDING)
    assert t.action == ActionKind.PAYMENT
    assert t.to_stage == S.CLERK_PENDING


@pytest.mark.parametrize(
    "role, position, stage, expected",
    [
        (PortalRole.JUNIOR_ARCHITECT, PositionType.ARCHITECT, S.JUNIOR_ENGINEER_PENDING, S.DOCUMENT_VERIFICATION_PENDING),
        (PortalRole.JUNIOR_ARCHITECT, PositionType.ARCHITECT, S.DOCUMENT_VERIFICATION_PENDING, S.ASSISTANT_ENGINEER_PENDING),
        (PortalRole.ASSISTANT_ARCHITECT, PositionType.ARCHITECT, S.ASSISTANT_ENGINEER_PENDING, S.EXECUTIVE_ENGINEER_PENDING),
        (PortalRole.ASSISTANT_SUPERVISOR2, PositionType.SUPERVISOR2, S.ASSISTANT_ENGINEER_PENDING, S.EXECUTIVE_ENGINEER_PENDING),
        (PortalRole.EXECUTIVE_ENGINEER, PositionType.LICENCE_ENGINEER, S.EXECUTIVE_ENGINEER_PENDING, S.CITY_ENGINEER_PENDING),
        (PortalRole.CITY_ENGINEER, PositionType.SUPERVISOR1, S.CITY_ENGINEER_PENDING, S.PAYMENT_PENDING),
        (PortalRole.CLERK, PositionType.ARCHITECT, S.CLERK_PENDING, S.EXECUTIVE_ENGINEER_SIGN_PENDING),
        (PortalRole.EXECUTIVE_ENGINEER, PositionType.ARCHITECT, S.EXECUTIVE_ENGINEER_SIGN_PENDING, S.CITY_ENGINEER_SIGN_PENDING),
        (PortalRole.CITY_ENGINEER, PositionType.ARCHITECT, S.CITY_ENGINEER_SIGN_PENDING, S.APPROVED),
    ],
)
def test_next_stage(role, position, stage, expected):
    assert workflow.next_stage(role, position, stage) == expected


def test_wrong_role_or_position_gets_no_transition():
    assert workflow.next_stage(PortalRole.JUNIOR_ARCHITECT, PositionType.LICENCE_ENGINEER, S.JUNIOR_ENGINEER_PENDING) is None
    assert workflow.next_stage(PortalRole.CLERK, PositionType.ARCHITECT, S.CITY_ENGINEER_PENDING) is None
    assert workflow.next_stage(PortalRole.ADMIN, PositionType.ARCHITECT, S.JUNIOR_ENGINEER_PENDING) is None


def test_terminal_stages_accept_nothing():
    for role in OFFICER_ROLES:
        for position in PositionType:
            for stage in workflow.TERMINAL_STAGES:
                assert workflow.find_transition(role, position, stage) is None
                assert not workflow.can_reject(role, position, stage)


def test_reject_only_by_stage_owner():
    assert workflow.can_reject(PortalRole.CITY_ENGINEER, PositionType.ARCHITECT, S.CITY_ENGINEER_PENDING)
    assert not workflow.can_reject(PortalRole.EXECUTIVE_ENGINEER, PositionType.ARCHITECT, S.CITY_ENGINEER_PENDING)


def test_only_admin_rejects_while_payment_is_awaited():
    for position in PositionType:
        assert workflow.can_reject(PortalRole.ADMIN, position, S.PAYMENT_PENDING)
        for role in OFFICER_ROLES:
            assert not workflow.can_reject(role, position, S.PAYMENT_PENDING)
    assert not workflow.can_reject(PortalRole.ADMIN, PositionType.ARCHITECT, S.JUNIOR_ENGINEER_PENDING)


def test_queue_filters():
    assert workflow.pending_stages_for(PortalRole.EXECUTIVE_ENGINEER) == {
        S.EXECUTIVE_ENGINEER_PENDING,
        S.EXECUTIVE_ENGINEER_SIGN_PENDING,
    }
    assert workflow.positions_for(PortalRole.JUNIOR_LICENCE_ENGINEER) == {PositionType.LICENCE_ENGINEER}
    assert workflow.positions_for(PortalRole.CLERK) == set(PositionType)
    assert workflow.queue_filter_for(PortalRole.USER) == ()


def test_status_is_derived_from_stage():
    assert workflow.status_for_stage(S.JUNIOR_ENGINEER_PENDING) == ApplicationStatus.SUBMITTED
    assert workflow.status_for_stage(S.PAYMENT_PENDING) == ApplicationStatus.PAYMENT_PENDING
    assert workflow.status_for_stage(S.APPROVED) == ApplicationStatus.COMPLETED
    assert workflow.status_for_stage(S.REJECTED) == ApplicationStatus.REJECTED
    assert workflow.stages_for_status(ApplicationStatus.UNDER_REVIEW) == {S.EXECUTIVE_ENGINEER_PENDING}
    assert workflow.stages_for_status(ApplicationStatus.DRAFT) == frozenset()
    assert set(workflow.STAGE_STATUS) == set(S)


def test_table_check_rejects_backward_transition():
    bad = workflow.Transition(
        PortalRole.CLERK, frozenset({PositionType.ARCHITECT}), S.CLERK_PENDING, S.PAYMENT_PENDING, ActionKind.APPROVE
    )
    with pytest.raises(ValueError):
        workflow._check_table((bad,))


def test_table_check_rejects_two_owners():
    a = workflow.Transition(
        PortalRole.CLERK, frozenset({PositionType.ARCHITECT}), S.CLERK_PENDING, S.APPROVED, ActionKind.APPROVE
    )
    b = workflow.Transition(
        PortalRole.CITY_ENGINEER, frozenset({PositionType.ARCHITECT}), S.CLERK_PENDING, S.APPROVED, ActionKind.APPROVE
    )
    with pytest.raises(ValueError):
        workflow._check_table((a, b))
