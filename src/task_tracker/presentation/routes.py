from __future__ import annotations

from typing import Any

import inject
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from pydantic import BaseModel, Field

from src.task_tracker.application.controller import TaskStateController
from src.task_tracker.application.dtos import ControllerStateDTO, TaskCardDTO
from src.task_tracker.domain.exceptions import InvalidValueError

router = APIRouter(tags=["tasks"])


def get_controller() -> TaskStateController:
    return inject.instance(TaskStateController)


class SubmissionResponse(BaseModel):
    task_id: int = Field(..., description="Task the transition was submitted for.")
    submitted: bool = Field(..., description="The ledger accepted the call.")


class AdminResponse(BaseModel):
    operation: str = Field(..., description="Administrative call that was sent.")
    receipt: str | None = Field(
        default=None, description="Ledger receipt, or None when the call failed."
    )


class RoleRequest(BaseModel):
    role_id: int = Field(..., description="Role to grant or revoke.")
    identity: str = Field(..., description="Account the role applies to.")
    authorized: bool = Field(..., description="Grant when true, revoke when false.")


class OperatorRequest(BaseModel):
    interface_id: str = Field(..., description="Four-byte interface selector, e.g. 0x01ffc9a7.")
    role_id: int = Field(..., description="Role allowed to operate the interface.")
    authorized: bool = Field(..., description="Allow when true, deny when false.")


class QuorumRequest(BaseModel):
    quorum: int = Field(..., description="Minimum number of approvals.")


class DepositRequest(BaseModel):
    role_id: int = Field(..., description="Role whose treasury receives the deposit.")
    amount: int = Field(..., description="Amount in the token's smallest unit.")


def _controller_failure(controller: TaskStateController) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=controller.error or "Ledger request failed",
    )


def _admin_response(operation: str, receipt: Any) -> AdminResponse:
    return AdminResponse(operation=operation, receipt=None if receipt is None else str(receipt))


@router.get("/state", response_model=ControllerStateDTO, summary="Current task state")
def read_state(controller: TaskStateController = Depends(get_controller)):
    return controller.snapshot()


@router.post("/refresh", response_model=ControllerStateDTO, summary="Repeat the last reads")
async def refresh(controller: TaskStateController = Depends(get_controller)):
    await controller.refresh()
    return controller.snapshot()


@router.get(
    "/tasks/{task_id}",
    response_model=TaskCardDTO,
    summary="Fetch one task",
    responses={502: {"description": "The ledger read failed."}},
)
async def fetch_task(
    task_id: int = Path(..., ge=0, description="Ledger task id"),
    controller: TaskStateController = Depends(get_controller),
):
    view = await controller.fetch_one(task_id)
    if view is None:
        raise _controller_failure(controller)
    return controller.card(view)


@router.get(
    "/tasks",
    response_model=list[TaskCardDTO],
    summary="Fetch a range of tasks",
    description="Reads task ids in [start, end) in one batched ledger call; empty slots are skipped.",
    responses={502: {"description": "The ledger read failed."}},
)
async def fetch_tasks(
    start: int = Query(..., ge=0, description="First task id"),
    end: int = Query(..., ge=0, description="Task id after the last one"),
    scope: bool = Query(False, description="Only tasks assigned to the caller"),
    controller: TaskStateController = Depends(get_controller),
):
    views = await controller.fetch_range(start, end, scope)
    if views is None:
        raise _controller_failure(controller)
    return [controller.card(view) for view in views]


@router.post(
    "/tasks/{task_id}/action",
    response_model=SubmissionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit the next lifecycle action",
)
async def submit_action(
    task_id: int = Path(..., ge=0),
    controller: TaskStateController = Depends(get_controller),
):
    if not await controller.submit_action(task_id):
        raise _controller_failure(controller)
    return SubmissionResponse(task_id=task_id, submitted=True)


@router.post(
    "/tasks/{task_id}/cancel",
    response_model=SubmissionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Cancel a task",
)
async def submit_cancel(
    task_id: int = Path(..., ge=0),
    controller: TaskStateController = Depends(get_controller),
):
    if not await controller.submit_cancel(task_id):
        raise _controller_failure(controller)
    return SubmissionResponse(task_id=task_id, submitted=True)


@router.post("/admin/roles", response_model=AdminResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_role(body: RoleRequest, controller: TaskStateController = Depends(get_controller)):
    try:
        receipt = await controller.set_role(body.role_id, body.identity, body.authorized)
    except InvalidValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _admin_response("set_role", receipt)


@router.post("/admin/operators", response_model=AdminResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_operator(
    body: OperatorRequest, controller: TaskStateController = Depends(get_controller)
):
    try:
        receipt = await controller.set_operator(body.interface_id, body.role_id, body.authorized)
    except InvalidValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _admin_response("set_operator", receipt)


@router.post("/admin/quorum", response_model=AdminResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_min_quorum(
    body: QuorumRequest, controller: TaskStateController = Depends(get_controller)
):
    try:
        receipt = await controller.set_min_quorum(body.quorum)
    except InvalidValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _admin_response("set_min_quorum", receipt)


@router.post("/admin/deposits", response_model=AdminResponse, status_code=status.HTTP_202_ACCEPTED)
async def deposit(body: DepositRequest, controller: TaskStateController = Depends(get_controller)):
    try:
        receipt = await controller.deposit(body.role_id, body.amount)
    except InvalidValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _admin_response("deposit", receipt)
