"""
Task API Routes
JSON access to the task actions; bodies are tagged action results
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from app.actions.task_actions import ActionResult
from app.utils.dependencies import TaskActionsDep

logger = structlog.get_logger(__name__)

router = APIRouter()

STATUS_BY_CODE = {
    "validation": 422,
    "auth": status.HTTP_401_UNAUTHORIZED,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "gateway": status.HTTP_502_BAD_GATEWAY,
}


def result_response(result: ActionResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Map an action result onto an HTTP response"""
    if result.success:
        status_code = success_status
    else:
        status_code = STATUS_BY_CODE.get(result.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.get("")
async def list_tasks(actions: TaskActionsDep):
    """Tasks for the caller, newest first"""
    return result_response(await actions.list_tasks())


@router.post("")
async def create_task(actions: TaskActionsDep, payload: Dict[str, Any] = Body(...)):
    """Create a task from {title, description}"""
    result = await actions.create_task(payload)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.post("/{task_id}/toggle")
async def toggle_task(task_id: str, actions: TaskActionsDep):
    """Flip a task's completion flag"""
    return result_response(await actions.toggle_task(task_id))


@router.delete("/{task_id}")
async def delete_task(task_id: str, actions: TaskActionsDep):
    """Delete a task"""
    return result_response(await actions.delete_task(task_id))
