import pytest

from src.task_tracker.domain.exceptions import InvalidValueError
from src.task_tracker.domain.models import Identity, InterfaceId, QuorumAmount, RoleId, TokenAmount
from src.task_tracker.domain.models.identifiers import UINT256_MAX
from tests.conftest import ALICE


def test_valid_values_are_accepted() -> None:
    assert int(RoleId.of(0)) == 0
    assert int(RoleId.of(UINT256_MAX)) == UINT256_MAX
    assert str(InterfaceId.of("0x01ffc9a7")) == "0x01ffc9a7"
    assert int(QuorumAmount.of(1)) == 1
    assert int(TokenAmount.of(10**18)) == 10**18
    assert str(Identity.of(ALICE)) == ALICE


def test_of_returns_existing_instance() -> None:
    role = RoleId(value=4)

    assert RoleId.of(role) is role


@pytest.mark.parametrize(
    ("value_type", "raw"),
    [
        (RoleId, -1),
        (RoleId, UINT256_MAX + 1),
        (RoleId, "5"),
        (RoleId, True),
        (InterfaceId, "0x01ffc9"),
        (InterfaceId, "01ffc9a7"),
        (QuorumAmount, 0),
        (TokenAmount, 0),
        (Identity, "0x1234"),
        (Identity, "alice"),
    ],
)
def test_invalid_values_are_rejected(value_type: type, raw: object) -> None:
    with pytest.raises(InvalidValueError) as exc_info:
        value_type.of(raw)

    assert exc_info.value.kind == value_type.__name__
    assert exc_info.value.value == raw


def test_values_are_immutable() -> None:
    role = RoleId.of(1)

    with pytest.raises(Exception):
        role.value = 2
