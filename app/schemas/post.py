"""Schemas for post create/edit submissions."""

from pydantic import BaseModel, Field, field_validator

TITLE_MAX_LEN = 255


class PostForm(BaseModel):
    """Title and body from the add/edit post forms."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    body: str = Field(..., min_length=1)

    @field_validator("title", "body")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v
