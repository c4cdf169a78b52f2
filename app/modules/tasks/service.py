import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_task(self, task_data: TaskCreate, user_id: str) -> TaskResponse:
        """Create a personal task"""
        try:
            result = self.supabase.table("tasks").insert({
                "title": task_data.title,
                "description": task_data.description,
                "due_date": task_data.due_date.isoformat() if task_data.due_date else None,
                "user_id": user_id
            }).execute()
        except Exception as e:
            logger.error(f"Error creating task: {e}")
            raise HTTPException(status_code=500, detail="Failed to create task")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create task")
        return TaskResponse(**result.data[0])

    def list_tasks(self, user_id: str) -> List[TaskResponse]:
        """The owner's tasks, newest first"""
        try:
            result = self.supabase.table("tasks")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [TaskResponse(**task) for task in result.data or []]
        except Exception as e:
            logger.error(f"Error loading tasks for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load tasks")

    def get_task(self, task_id: str, user_id: str) -> TaskResponse:
        result = self.supabase.table("tasks")\
            .select("*")\
            .eq("id", task_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Task not found")
        return TaskResponse(**result.data[0])

    def update_task(self, task_id: str, task_data: TaskUpdate, user_id: str) -> TaskResponse:
        self.get_task(task_id, user_id)
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        for field, value in task_data.model_dump(exclude_unset=True).items():
            if field == "title":
                if not value or not value.strip():
                    raise HTTPException(status_code=422, detail="Please enter a task title")
                value = value.strip()
            if field == "due_date" and value is not None:
                value = value.isoformat()
            update_data[field] = value
        return self._write(task_id, user_id, update_data)

    def toggle_task(self, task_id: str, user_id: str) -> TaskResponse:
        """Flip the completed flag"""
        task = self.get_task(task_id, user_id)
        return self._write(task_id, user_id, {
            "completed": not task.completed,
            "updated_at": datetime.now(timezone.utc).isoformat()
        })

    def delete_task(self, task_id: str, user_id: str) -> bool:
        self.get_task(task_id, user_id)
        try:
            result = self.supabase.table("tasks")\
                .delete()\
                .eq("id", task_id)\
                .eq("user_id", user_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting task {task_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete task")

    def _write(self, task_id: str, user_id: str, update_data: dict) -> TaskResponse:
        try:
            result = self.supabase.table("tasks")\
                .update(update_data)\
                .eq("id", task_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating task {task_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update task")
        if not result.data:
            raise HTTPException(status_code=404, detail="Task not found")
        return TaskResponse(**result.data[0])
