"""Public pages: paginated home listing, single post, search and static pages."""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.templating import render
from app.services.pagination import parse_page
from app.services.posts import PostRepository, sanitize_search_term

router = APIRouter()


@router.get("/")
def home(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    page: str | None = None,
):
    """Newest posts first, POSTS_PER_PAGE per page (?page=N, defaults to 1)."""
    result = PostRepository(db).paginate(parse_page(page), per_page=settings.POSTS_PER_PAGE)
    return render(
        request,
        "index",
        settings,
        current_route="/",
        data=result.items,
        window=result.window,
        url_ext="/?page=",
    )


@router.get("/post/{post_id}")
def view_post(
    post_id: int,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    post = PostRepository(db).get(post_id)
    return render(
        request,
        "post",
        settings,
        title=post.title,
        current_route=f"/post/{post_id}",
        data=post,
    )


@router.post("/search")
def search(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    searchTerm: Annotated[str, Form()] = "",
):
    """Posts whose title or body contains the sanitized term (case-insensitive, unpaginated)."""
    data = PostRepository(db).search(searchTerm)
    return render(
        request,
        "search",
        settings,
        title="Search",
        current_route="/search",
        data=data,
        search_term=sanitize_search_term(searchTerm),
    )


@router.get("/about")
def about(request: Request, settings: Annotated[Settings, Depends(get_settings)]):
    return render(request, "about", settings, title="About", current_route="/about")


@router.get("/contact")
def contact(request: Request, settings: Annotated[Settings, Depends(get_settings)]):
    return render(request, "contact", settings, title="Contact", current_route="/contact")
