"""Post persistence: CRUD, newest-first pagination and free-text search."""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InternalError, PostNotFoundError
from app.models import Post
from app.models.post import MAX_POST_ID
from app.services.pagination import DEFAULT_PER_PAGE, PageWindow

logger = logging.getLogger(__name__)

# Anything outside ASCII letters, digits and space is dropped before matching,
# so LIKE wildcards (% and _) and escape characters never reach the query.
_SEARCH_STRIP_RE = re.compile(r"[^A-Za-z0-9 ]")


def sanitize_search_term(term: str | None) -> str:
    """Strip every character that is not a letter, digit or space."""
    if not term:
        return ""
    return _SEARCH_STRIP_RE.sub("", term)


def _is_storable_id(post_id: int) -> bool:
    return 1 <= post_id <= MAX_POST_ID


@dataclass(frozen=True)
class PostPage:
    items: list[Post]
    window: PageWindow


class PostRepository:
    """Single-row operations on posts plus the listing queries used by the views."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _newest_first(self):
        return self.db.query(Post).order_by(Post.created_at.desc(), Post.id.desc())

    def find_all(self) -> list[Post]:
        return self._newest_first().all()

    def newest(self) -> Post | None:
        return self._newest_first().first()

    def find_by_id(self, post_id: int) -> Post | None:
        if not _is_storable_id(post_id):
            return None
        return self.db.get(Post, post_id)

    def get(self, post_id: int) -> Post:
        """Like find_by_id, but raises PostNotFoundError on a miss."""
        post = self.find_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def count(self) -> int:
        return self.db.query(Post).count()

    def create(self, title: str, body: str) -> Post:
        now = datetime.now(UTC)
        post = Post(title=title, body=body, created_at=now, updated_at=now)
        self.db.add(post)
        self._commit("create")
        self.db.refresh(post)
        logger.info("Post created", extra={"post_id": post.id})
        return post

    def update(self, post_id: int, title: str, body: str) -> Post:
        """Replace title and body and stamp updated_at; id and created_at are left alone."""
        post = self.get(post_id)
        post.title = title
        post.body = body
        post.updated_at = datetime.now(UTC)
        self._commit("update")
        self.db.refresh(post)
        logger.info("Post updated", extra={"post_id": post_id})
        return post

    def delete(self, post_id: int) -> bool:
        """Delete permanently. Returns False if there was nothing to delete."""
        if not _is_storable_id(post_id):
            return False
        deleted = self.db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
        self._commit("delete")
        if deleted:
            logger.info("Post deleted", extra={"post_id": post_id})
        return deleted > 0

    def paginate(self, page: int, per_page: int = DEFAULT_PER_PAGE) -> PostPage:
        window = PageWindow.build(page, self.count(), per_page=per_page)
        items = self._newest_first().offset(window.skip).limit(window.limit).all()
        return PostPage(items=items, window=window)

    def search(self, term: str | None) -> list[Post]:
        """
        Case-insensitive substring match on title or body, newest first.

        The term is sanitized first; an empty result of sanitizing matches every post.
        """
        pattern = f"%{sanitize_search_term(term)}%"
        return (
            self._newest_first()
            .filter(or_(Post.title.ilike(pattern), Post.body.ilike(pattern)))
            .all()
        )

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalError(f"Post {operation} failed.", cause=e) from e
