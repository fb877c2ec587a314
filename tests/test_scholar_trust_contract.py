from __future__ import annotations

import pytest

from scholar_trust import BlockClock, ErrorCode, InMemoryTokenLedger, Response, ScholarTrust
from scholar_trust.errors import PoolNotFound

DEPLOYER = "deployer"
DONOR = "wallet_1"
STUDENT = "wallet_2"
ORACLE = "wallet_3"
OUTSIDER = "wallet_4"
SECOND_STUDENT = "wallet_5"
AMOUNT = 1_000_000_000


def _deploy() -> tuple[ScholarTrust, InMemoryTokenLedger]:
    ledger = InMemoryTokenLedger({DONOR: 100 * AMOUNT})
    return ScholarTrust(DEPLOYER, ledger), ledger


def _deploy_with_pool() -> tuple[ScholarTrust, InMemoryTokenLedger]:
    contract, ledger = _deploy()
    contract.create_pool(DONOR, STUDENT, 350, 4, AMOUNT).unwrap()
    contract.add_oracle(DEPLOYER, ORACLE).unwrap()
    return contract, ledger


def test_initial_state() -> None:
    contract, _ = _deploy()

    assert contract.is_oracle(DEPLOYER) is True
    assert contract.get_pool_counter() == 0
    assert contract.get_pool_info(1) is None
    assert contract.get_contract_info() == {
        "name": "Scholar Trust",
        "version": "1.0.0",
        "description": "Milestone-based scholarship fund management system",
    }


def test_oracle_management_responses() -> None:
    contract, _ = _deploy()

    denied = contract.add_oracle(OUTSIDER, ORACLE)
    assert denied.ok is False
    assert denied.code == ErrorCode.UNAUTHORIZED
    assert denied.tag == "Unauthorized"

    assert contract.add_oracle(DEPLOYER, ORACLE) == Response.success(True)
    assert contract.is_oracle(ORACLE) is True
    assert contract.remove_oracle(OUTSIDER, ORACLE).code == ErrorCode.UNAUTHORIZED
    assert contract.remove_oracle(DEPLOYER, ORACLE).value is True
    assert contract.is_oracle(ORACLE) is False


def test_pool_info_reflects_creation() -> None:
    contract, ledger = _deploy()

    response = contract.create_pool(DONOR, STUDENT, 350, 4, AMOUNT)

    assert response.ok is True
    assert response.value == 1
    assert contract.get_pool_counter() == 1
    pool = contract.get_pool_info(1)
    assert pool is not None
    assert pool.to_dict() == {
        "pool_id": 1,
        "donor": DONOR,
        "student": STUDENT,
        "required_gpa": 350,
        "total_semesters": 4,
        "amount_per_semester": AMOUNT,
        "total_amount": 4 * AMOUNT,
        "remaining_amount": 4 * AMOUNT,
        "semesters_released": 0,
        "created_at": contract.clock.height,
        "active": True,
    }
    assert ledger.balance_of(contract.custody) == 4 * AMOUNT


def test_invalid_pool_parameters_return_code_105() -> None:
    contract, _ = _deploy()

    for args in ((350, 4, 0), (350, 0, AMOUNT), (500, 4, AMOUNT), (0, 4, AMOUNT)):
        response = contract.create_pool(DONOR, STUDENT, *args)
        assert response.code == ErrorCode.INVALID_PARAMETERS
        assert int(response.code) == 105

    assert contract.get_pool_counter() == 0


def test_verification_responses() -> None:
    contract, _ = _deploy_with_pool()

    assert contract.verify_milestone(OUTSIDER, 1, 1, 370).code == ErrorCode.UNAUTHORIZED_ORACLE
    assert contract.verify_milestone(ORACLE, 1, 2, 370).tag == "SequenceViolation"
    assert contract.verify_milestone(ORACLE, 999, 1, 370).code == ErrorCode.POOL_NOT_FOUND

    response = contract.verify_milestone(ORACLE, 1, 1, 370)
    assert response == Response.success(True)
    record = contract.get_milestone_verification(1, 1)
    assert record is not None
    assert record.to_dict() == {
        "pool_id": 1,
        "semester": 1,
        "gpa": 370,
        "verified_by": ORACLE,
        "verified_at": contract.clock.height,
        "released": False,
    }


def test_every_call_is_mined_in_its_own_block() -> None:
    clock = BlockClock(height=10)
    contract = ScholarTrust(DEPLOYER, InMemoryTokenLedger({DONOR: 4 * AMOUNT}), clock=clock)

    contract.add_oracle(OUTSIDER, ORACLE)
    contract.create_pool(DONOR, STUDENT, 350, 4, AMOUNT)
    clock.mine_empty_blocks(3)
    contract.verify_milestone(DEPLOYER, 1, 1, 360)

    pool = contract.get_pool_info(1)
    record = contract.get_milestone_verification(1, 1)
    assert pool is not None and record is not None
    assert pool.created_at == 12
    assert record.verified_at == 16
    assert clock.height == 16


def test_release_then_double_release_then_withdraw_remaining() -> None:
    contract, ledger = _deploy_with_pool()
    contract.verify_milestone(ORACLE, 1, 1, 370)

    assert contract.release_semester_funds(STUDENT, 1, 1) == Response.success(AMOUNT)
    assert contract.release_semester_funds(STUDENT, 1, 1).code == ErrorCode.ALREADY_RELEASED

    withdrawal = contract.emergency_withdrawal(DONOR, 1)
    assert withdrawal.value == 3 * AMOUNT
    pool = contract.get_pool_info(1)
    assert pool is not None
    assert pool.active is False
    assert pool.remaining_amount == 0
    assert pool.semesters_released == 1
    assert ledger.balance_of(STUDENT) == AMOUNT
    assert ledger.balance_of(DONOR) == 99 * AMOUNT


def test_failed_milestone_then_full_refund() -> None:
    contract, _ = _deploy_with_pool()
    contract.verify_milestone(ORACLE, 1, 1, 340)

    assert contract.release_semester_funds(STUDENT, 1, 1).code == ErrorCode.REQUIREMENT_NOT_MET
    assert contract.emergency_withdrawal(DONOR, 1).value == 4 * AMOUNT


def test_anyone_may_trigger_release_to_student() -> None:
    contract, ledger = _deploy_with_pool()
    contract.verify_milestone(ORACLE, 1, 1, 370)

    assert contract.release_semester_funds(OUTSIDER, 1, 1).ok is True
    assert ledger.balance_of(STUDENT) == AMOUNT
    assert ledger.balance_of(OUTSIDER) == 0


def test_withdrawal_responses() -> None:
    contract, _ = _deploy_with_pool()

    assert contract.emergency_withdrawal(OUTSIDER, 1).code == ErrorCode.UNAUTHORIZED
    assert contract.emergency_withdrawal(DONOR, 999).code == ErrorCode.POOL_NOT_FOUND

    contract.verify_milestone(ORACLE, 1, 1, 370)
    blocked = contract.emergency_withdrawal(DONOR, 1)
    assert blocked.tag == "RequirementMet"
    assert blocked.code == ErrorCode.REQUIREMENT_NOT_MET


def test_completed_pool_rejects_withdrawal_as_not_found() -> None:
    contract, _ = _deploy_with_pool()
    for semester in range(1, 5):
        contract.verify_milestone(ORACLE, 1, semester, 370).unwrap()
        contract.release_semester_funds(STUDENT, 1, semester).unwrap()

    pool = contract.get_pool_info(1)
    assert pool is not None
    assert pool.active is False
    assert contract.emergency_withdrawal(DONOR, 1).code == ErrorCode.POOL_NOT_FOUND
    assert contract.verify_milestone(ORACLE, 1, 5, 370).code == ErrorCode.POOL_NOT_FOUND


def test_multiple_pools_share_one_counter() -> None:
    contract, _ = _deploy()

    first = contract.create_pool(DONOR, STUDENT, 350, 4, AMOUNT)
    second = contract.create_pool(DONOR, SECOND_STUDENT, 300, 2, 500_000_000)

    assert (first.value, second.value) == (1, 2)
    assert contract.get_pool_counter() == 2


def test_insufficient_balance_returns_transfer_failure() -> None:
    contract = ScholarTrust(DEPLOYER, InMemoryTokenLedger({DONOR: AMOUNT}))

    response = contract.create_pool(DONOR, STUDENT, 350, 4, AMOUNT)

    assert response.code == ErrorCode.TRANSFER_FAILED
    assert contract.get_pool_counter() == 0


def test_unwrap_reraises_carried_error() -> None:
    contract, _ = _deploy()

    response = contract.release_semester_funds(STUDENT, 42, 1)

    with pytest.raises(PoolNotFound):
        response.unwrap()


def test_bool_semester_does_not_release_funds() -> None:
    contract, ledger = _deploy_with_pool()
    contract.verify_milestone(ORACLE, 1, 1, 370)

    assert contract.release_semester_funds(OUTSIDER, 1, True).code == ErrorCode.INVALID_PARAMETERS
    assert contract.release_semester_funds(OUTSIDER, 1, -1).code == ErrorCode.INVALID_PARAMETERS
    assert ledger.balance_of(STUDENT) == 0
