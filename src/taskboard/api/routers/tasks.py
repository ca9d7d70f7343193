"""Routes handling task CRUD operations."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import CurrentIdentityDependency, TaskFeedAccessDependency, TaskServiceDependency
from ...models import Task
from ...schemas import MessageResponse, OwnedTaskRead, TaskCreate, TaskRead, TaskUpdate
from ...services import OwnedTask

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _map_task(task: Task) -> TaskRead:
    return TaskRead.model_validate(task)


def _map_owned_task(item: OwnedTask) -> OwnedTaskRead:
    return OwnedTaskRead(**item.task.model_dump(), username=item.username)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task for the authenticated user",
)
async def create_task(
    payload: TaskCreate,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.create_task(
        identity.user_id,
        name=payload.name,
        description=payload.description,
        due_date=payload.due_date,
        priority=payload.priority,
        status=payload.status,
    )
    return _map_task(task)


@router.get("", response_model=list[TaskRead], summary="List the authenticated user's tasks")
async def list_tasks(
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> list[TaskRead]:
    return [_map_task(task) for task in await service.list_own(identity.user_id)]


@router.get(
    "/all",
    response_model=list[OwnedTaskRead],
    summary="List every user's tasks with the owning username",
)
async def list_all_tasks(
    _: TaskFeedAccessDependency,
    service: TaskServiceDependency,
) -> list[OwnedTaskRead]:
    return [_map_owned_task(item) for item in await service.list_all()]


@router.put("/{task_id}", response_model=TaskRead, summary="Replace one of the user's tasks")
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.update_task(
        identity.user_id,
        task_id,
        name=payload.name,
        description=payload.description,
        due_date=payload.due_date,
        priority=payload.priority,
        status=payload.status,
    )
    return _map_task(task)


@router.delete("/{task_id}", response_model=MessageResponse, summary="Delete a task")
async def delete_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    service: TaskServiceDependency,
) -> MessageResponse:
    await service.delete_task(task_id, requester=identity)
    return MessageResponse(message="Task deleted successfully.")
