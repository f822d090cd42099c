"""
Page Routes
Server-rendered landing, auth pages and the tasks dashboard
"""

import os
from typing import Optional

import structlog
from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError

from app.actions.task_actions import TaskActions
from app.ui.task_form import TaskFormController
from app.ui.task_list import TaskListView
from app.utils.dependencies import (
    AuthServiceDep, OptionalUser, SettingsDep, TaskActionsDep, get_access_token
)
from app.utils.errors import AuthError
from app.utils.session import clear_session_cookies, set_session_cookies
from shared.schemas.auth import LoginSchema, SignupSchema
from shared.schemas.task import collect_field_errors

logger = structlog.get_logger(__name__)

router = APIRouter()

templates = Jinja2Templates(
    directory=os.path.join(os.path.dirname(__file__), "..", "templates")
)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _first_errors(field_errors) -> dict:
    return {field: messages[0] for field, messages in field_errors.items() if messages}


async def _render_dashboard(
    request: Request,
    actions: TaskActions,
    form: Optional[TaskFormController] = None,
    task_list: Optional[TaskListView] = None,
    error: Optional[str] = None,
    status_code: int = status.HTTP_200_OK
) -> HTMLResponse:
    form = form or TaskFormController(actions.create_task)

    if task_list is None:
        result = await actions.list_tasks()
        if result.success:
            task_list = TaskListView.from_tasks(result.data, actions)
        else:
            task_list = TaskListView([])
            error = result.error

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "user": actions.user,
            "form": form,
            "task_list": task_list,
            "error": error,
        },
        status_code=status_code
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, user: OptionalUser):
    """Landing page"""
    return templates.TemplateResponse(request, "index.html", {"user": user})


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"values": {}, "errors": {}})


@router.post("/login", response_class=HTMLResponse)
async def login(
    request: Request,
    settings: SettingsDep,
    auth: AuthServiceDep,
    email: str = Form(""),
    password: str = Form("")
):
    """Log in with email and password"""
    values = {"email": email}
    try:
        credentials = LoginSchema(email=email, password=password)
    except PydanticValidationError as e:
        return templates.TemplateResponse(
            request, "login.html",
            {"values": values, "errors": _first_errors(collect_field_errors(e))},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        session = await auth.sign_in(credentials.email, credentials.password)
    except AuthError as e:
        return templates.TemplateResponse(
            request, "login.html",
            {"values": values, "errors": {}, "error": e.message},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    response = _redirect("/dashboard")
    set_session_cookies(response, session, settings)
    return response


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    return templates.TemplateResponse(request, "signup.html", {"values": {}, "errors": {}})


@router.post("/signup", response_class=HTMLResponse)
async def signup(
    request: Request,
    settings: SettingsDep,
    auth: AuthServiceDep,
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form("")
):
    """Create an account"""
    values = {"email": email}
    try:
        data = SignupSchema(email=email, password=password, confirm_password=confirm_password)
    except PydanticValidationError as e:
        return templates.TemplateResponse(
            request, "signup.html",
            {"values": values, "errors": _first_errors(collect_field_errors(e))},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        session = await auth.sign_up(data.email, data.password)
    except AuthError as e:
        return templates.TemplateResponse(
            request, "signup.html",
            {"values": values, "errors": {}, "error": e.message},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    if session is None:
        return templates.TemplateResponse(
            request, "signup.html",
            {
                "values": {},
                "errors": {},
                "notice": "Check your email to confirm your account, then log in."
            }
        )

    response = _redirect("/dashboard")
    set_session_cookies(response, session, settings)
    return response


@router.post("/logout")
async def logout(request: Request, settings: SettingsDep, auth: AuthServiceDep):
    """Log out and return to the landing page"""
    token = get_access_token(request)
    if token:
        await auth.sign_out(token)

    response = _redirect("/")
    clear_session_cookies(response, settings)
    return response


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, actions: TaskActionsDep):
    """Task dashboard"""
    if actions.user is None:
        return _redirect("/login")
    return await _render_dashboard(request, actions)


@router.post("/dashboard/tasks", response_class=HTMLResponse)
async def create_task(
    request: Request,
    actions: TaskActionsDep,
    title: str = Form(""),
    description: str = Form("")
):
    if actions.user is None:
        return _redirect("/login")

    form = TaskFormController(actions.create_task)
    if await form.submit(title, description):
        return _redirect("/dashboard")

    return await _render_dashboard(
        request, actions, form=form, status_code=status.HTTP_400_BAD_REQUEST
    )


async def _item_action(request: Request, actions: TaskActions, task_id: str, operation: str):
    if actions.user is None:
        return _redirect("/login")

    result = await actions.list_tasks()
    tasks = result.data if result.success else []
    task_list = TaskListView.from_tasks(tasks, actions)

    item = task_list.find(task_id)
    if item is None:
        return await _render_dashboard(
            request, actions, task_list=task_list, error="Task not found",
            status_code=status.HTTP_404_NOT_FOUND
        )

    if operation == "toggle":
        succeeded = await item.toggle()
    else:
        succeeded = await item.delete()

    if succeeded:
        return _redirect("/dashboard")

    return await _render_dashboard(
        request, actions, task_list=task_list, status_code=status.HTTP_400_BAD_REQUEST
    )


@router.post("/dashboard/tasks/{task_id}/toggle", response_class=HTMLResponse)
async def toggle_task(request: Request, task_id: str, actions: TaskActionsDep):
    return await _item_action(request, actions, task_id, "toggle")


@router.post("/dashboard/tasks/{task_id}/delete", response_class=HTMLResponse)
async def delete_task(request: Request, task_id: str, actions: TaskActionsDep):
    return await _item_action(request, actions, task_id, "delete")


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots(settings: SettingsDep):
    """Search engine rules; ROBOTS=noindex blocks all crawlers"""
    if not settings.allow_indexing:
        return "User-agent: *\nDisallow: /\n"
    return f"User-agent: *\nAllow: /\n\nSitemap: {settings.sitemap_url}\n"
