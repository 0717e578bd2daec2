"""Admin area: login, registration, logout and post management (dashboard, add, edit, delete)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.auth import get_token_signer, require_session
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import AuthError, ConflictError, InternalError
from app.core.security import SessionTokenSigner
from app.core.templating import ADMIN_LAYOUT, LOGIN_LAYOUT, render
from app.schemas.auth import CurrentUser, RegisterForm
from app.schemas.post import PostForm
from app.services.auth import authenticate, register_user, revoke_session
from app.services.pagination import parse_page
from app.services.posts import PostRepository

logger = logging.getLogger(__name__)
router = APIRouter()

INTERNAL_ERROR_MESSAGE = "Internal server error."


def _login_view(request: Request, settings: Settings, message: str = "", status_code: int = 200):
    return render(
        request,
        "admin/index",
        settings,
        title="Admin",
        layout=LOGIN_LAYOUT,
        current_route="/admin",
        message=message,
        status_code=status_code,
    )


def _register_view(request: Request, settings: Settings, message: str = "", status_code: int = 200):
    return render(
        request,
        "admin/register",
        settings,
        title="Register",
        layout=LOGIN_LAYOUT,
        current_route="/register",
        message=message,
        status_code=status_code,
    )


def _redirect(url: str) -> RedirectResponse:
    # 303 so that browsers follow a PUT/DELETE/POST with a GET.
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid {field}." if field else "Invalid input."


@router.get("/admin")
def login_page(request: Request, settings: Annotated[Settings, Depends(get_settings)]):
    return _login_view(request, settings)


@router.post("/admin")
def login(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    signer: Annotated[SessionTokenSigner, Depends(get_token_signer)],
    settings: Annotated[Settings, Depends(get_settings)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """
    Check credentials; on success set the HTTP-only session cookie and go to the dashboard.
    Unknown user and wrong password get the same response.
    """
    if not username or not password:
        return _login_view(request, settings, AuthError.bad_credentials().message, 401)
    try:
        user = authenticate(db, username.strip(), password)
    except AuthError as e:
        return _login_view(request, settings, e.message, status.HTTP_401_UNAUTHORIZED)
    except (InternalError, SQLAlchemyError):
        logger.exception("Login failed with an internal error")
        return _login_view(
            request, settings, INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    response = _redirect("/dashboard")
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        signer.issue(user.id),
        max_age=signer.expire_minutes * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get("/register")
def register_page(request: Request, settings: Annotated[Settings, Depends(get_settings)]):
    return _register_view(request, settings)


@router.post("/register")
def register(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Create an admin user with a bcrypt-hashed password."""
    try:
        form = RegisterForm(username=username.strip(), password=password)
    except ValidationError as e:
        return _register_view(
            request, settings, _validation_message(e), status.HTTP_422_UNPROCESSABLE_ENTITY
        )
    try:
        register_user(db, form.username, form.password)
    except ConflictError as e:
        return _register_view(request, settings, e.message, status.HTTP_409_CONFLICT)
    except (InternalError, SQLAlchemyError):
        logger.exception("Registration failed with an internal error")
        return _register_view(
            request, settings, INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return _login_view(request, settings, "User successfully created.", status.HTTP_201_CREATED)


@router.get("/logout")
def logout(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    signer: Annotated[SessionTokenSigner, Depends(get_token_signer)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Clear the session cookie and denylist the token so it cannot be replayed."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        try:
            revoke_session(db, signer.decode(token))
        except AuthError:
            # Nothing to revoke; the cookie is cleared regardless.
            pass
    response = _redirect("/")
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get("/dashboard")
def dashboard(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(require_session)],
):
    return render(
        request,
        "admin/dashboard",
        settings,
        title="Dashboard",
        layout=ADMIN_LAYOUT,
        current_route="/dashboard",
        data=PostRepository(db).find_all(),
        user=user,
    )


@router.get("/adminHome")
def admin_home(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(require_session)],
    page: str | None = None,
):
    """The public listing, rendered inside the admin layout."""
    result = PostRepository(db).paginate(parse_page(page), per_page=settings.POSTS_PER_PAGE)
    return render(
        request,
        "index",
        settings,
        layout=ADMIN_LAYOUT,
        current_route="/adminHome",
        data=result.items,
        window=result.window,
        url_ext="/adminHome?page=",
        user=user,
    )


@router.get("/add-post")
def add_post_page(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(require_session)],
):
    return render(
        request,
        "admin/add-post",
        settings,
        title="Add Post",
        layout=ADMIN_LAYOUT,
        current_route="/add-post",
        user=user,
        message="",
    )


@router.post("/add-post")
def add_post(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(require_session)],
    title: Annotated[str, Form()] = "",
    body: Annotated[str, Form()] = "",
):
    try:
        form = PostForm(title=title, body=body)
    except ValidationError as e:
        return render(
            request,
            "admin/add-post",
            settings,
            title="Add Post",
            layout=ADMIN_LAYOUT,
            current_route="/add-post",
            user=user,
            message=_validation_message(e),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    PostRepository(db).create(form.title, form.body)
    return _redirect("/dashboard")


@router.get("/edit-post/{post_id}")
def edit_post_page(
    post_id: int,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(require_session)],
):
    return render(
        request,
        "admin/edit-post",
        settings,
        title="Edit Post",
        layout=ADMIN_LAYOUT,
        current_route="/edit-post",
        data=PostRepository(db).get(post_id),
        user=user,
        message="",
    )


@router.put("/edit-post/{post_id}")
def edit_post(
    post_id: int,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(require_session)],
    title: Annotated[str, Form()] = "",
    body: Annotated[str, Form()] = "",
):
    repo = PostRepository(db)
    try:
        form = PostForm(title=title, body=body)
    except ValidationError as e:
        return render(
            request,
            "admin/edit-post",
            settings,
            title="Edit Post",
            layout=ADMIN_LAYOUT,
            current_route="/edit-post",
            data=repo.get(post_id),
            user=user,
            message=_validation_message(e),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    repo.update(post_id, form.title, form.body)
    return _redirect(f"/edit-post/{post_id}")


@router.delete("/delete-post/{post_id}")
def delete_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_session)],
):
    """Delete permanently; deleting an id that no longer exists still lands on the dashboard."""
    if not PostRepository(db).delete(post_id):
        logger.info("Delete of missing post ignored", extra={"post_id": post_id})
    return _redirect("/dashboard")
