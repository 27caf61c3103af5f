import logging
from pathlib import Path
from typing import Optional
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from ..auth import AuthProvider
from ..dashboard import DashboardRegistry, DashboardState, priority_color, status_color
from ..deps import (
    clear_session_cookie,
    get_auth_provider,
    get_optional_session,
    get_registry,
    require_session,
    set_session_cookie,
)
from ..schemas import DEFAULT_PRIORITY, Session, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.globals.update(
    priority_color=priority_color,
    status_color=status_color,
    priorities=list(TaskPriority),
    statuses=list(TaskStatus),
)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _render_dashboard(request: Request, session: Session, state: DashboardState) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"session": session, "tasks": state.store.tasks, "form": state.form},
    )


async def _dashboard_state(session: Session, registry: DashboardRegistry) -> DashboardState:
    state = registry.get(session.owner_id)
    if not state.store.loaded:
        await state.store.load()
    return state


def _back_to_dashboard(state: DashboardState) -> RedirectResponse:
    state.reconciled = True
    return _redirect("/dashboard")


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Landing page"""
    return templates.TemplateResponse(request, "home.html", {})


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"email": "", "error": None})


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    auth: AuthProvider = Depends(get_auth_provider),
):
    """Sign in with email and password"""
    result = await auth.sign_in(email, password)
    if result.error or result.session is None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"email": email, "error": result.error or "Invalid login credentials"},
        )

    response = _redirect("/dashboard")
    set_session_cookie(response, result.session)
    return response


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    return templates.TemplateResponse(request, "signup.html", {"name": "", "email": "", "error": None})


@router.post("/signup")
async def signup(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    auth: AuthProvider = Depends(get_auth_provider),
):
    """Create an account; provider errors are shown verbatim"""
    result = await auth.sign_up(email, password, name)
    if result.error or result.user is None:
        return templates.TemplateResponse(
            request,
            "signup.html",
            {"name": name, "email": email, "error": result.error},
        )

    response = _redirect("/dashboard")
    if result.session is not None:
        set_session_cookie(response, result.session)
    return response


@router.post("/logout")
async def logout(
    session: Optional[Session] = Depends(get_optional_session),
    auth: AuthProvider = Depends(get_auth_provider),
    registry: DashboardRegistry = Depends(get_registry),
):
    if session is not None:
        error = await auth.sign_out(session.access_token)
        if error:
            logger.error("Error signing out owner=%s: %s", session.owner_id, error)
        registry.drop(session.owner_id)

    response = _redirect("/")
    clear_session_cookie(response)
    return response


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    session: Session = Depends(require_session),
    registry: DashboardRegistry = Depends(get_registry),
):
    """Every visit re-fetches the owner's tasks, except right after a mutation"""
    state = registry.get(session.owner_id)
    if state.reconciled and state.store.loaded:
        state.reconciled = False
    else:
        await state.store.load()
    return _render_dashboard(request, session, state)


@router.post("/dashboard/tasks")
async def add_task(
    title: str = Form(""),
    priority: TaskPriority = Form(DEFAULT_PRIORITY),
    session: Session = Depends(require_session),
    registry: DashboardRegistry = Depends(get_registry),
):
    state = await _dashboard_state(session, registry)
    await state.form.submit(state.store, title=title, priority=priority)
    return _back_to_dashboard(state)


@router.post("/dashboard/tasks/{task_id}/status")
async def change_status(
    task_id: int,
    status: TaskStatus = Form(...),
    session: Session = Depends(require_session),
    registry: DashboardRegistry = Depends(get_registry),
):
    state = await _dashboard_state(session, registry)
    await state.row(task_id).set_status(status)
    return _back_to_dashboard(state)


@router.post("/dashboard/tasks/{task_id}/priority")
async def change_priority(
    task_id: int,
    priority: TaskPriority = Form(...),
    session: Session = Depends(require_session),
    registry: DashboardRegistry = Depends(get_registry),
):
    state = await _dashboard_state(session, registry)
    await state.row(task_id).set_priority(priority)
    return _back_to_dashboard(state)


@router.post("/dashboard/tasks/{task_id}/delete")
async def delete_task(
    task_id: int,
    session: Session = Depends(require_session),
    registry: DashboardRegistry = Depends(get_registry),
):
    state = await _dashboard_state(session, registry)
    await state.row(task_id).delete()
    return _back_to_dashboard(state)
