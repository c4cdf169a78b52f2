from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse
from app.modules.tasks.service import TaskService
from app.core.dependencies import require_permission
from app.core.session import SessionContext
from supabase import Client
from typing import List

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_service(supabase: Client = Depends(get_supabase)) -> TaskService:
    return TaskService(supabase)


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    task_data: TaskCreate,
    session: SessionContext = Depends(require_permission("tasks:create")),
    service: TaskService = Depends(get_task_service)
):
    """Create a personal task"""
    return service.create_task(task_data, session.user_id)


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    session: SessionContext = Depends(require_permission("tasks:read")),
    service: TaskService = Depends(get_task_service)
):
    """List the caller's tasks"""
    return service.list_tasks(session.user_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    session: SessionContext = Depends(require_permission("tasks:update")),
    service: TaskService = Depends(get_task_service)
):
    """Update one of the caller's tasks"""
    return service.update_task(task_id, task_data, session.user_id)


@router.post("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task(
    task_id: str,
    session: SessionContext = Depends(require_permission("tasks:update")),
    service: TaskService = Depends(get_task_service)
):
    """Mark a task complete or incomplete"""
    return service.toggle_task(task_id, session.user_id)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    session: SessionContext = Depends(require_permission("tasks:delete")),
    service: TaskService = Depends(get_task_service)
):
    """Delete one of the caller's tasks"""
    service.delete_task(task_id, session.user_id)
    return None
