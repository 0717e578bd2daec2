"""Page-number parsing and the skip/limit window for paginated post listings."""

from dataclasses import dataclass

DEFAULT_PER_PAGE = 5
MAX_PER_PAGE = 100

# Largest page whose offset still fits a signed 64-bit OFFSET at MAX_PER_PAGE.
MAX_PAGE = (2**63 - 1) // MAX_PER_PAGE


def parse_page(raw: str | int | None) -> int:
    """
    Turn a ?page= value into a positive page number.

    Absent, empty, non-numeric, zero, negative or out-of-range input falls back to page 1.
    """
    if raw is None:
        return 1
    if isinstance(raw, int):
        page = raw
    else:
        raw = raw.strip()
        if not raw.isdecimal():
            return 1
        page = int(raw)
    return page if 1 <= page <= MAX_PAGE else 1


@dataclass(frozen=True)
class PageWindow:
    """One page of an ordered listing: where to slice and which neighbours exist."""

    page: int
    per_page: int
    total_count: int

    @classmethod
    def build(cls, page: int, total_count: int, per_page: int = DEFAULT_PER_PAGE) -> "PageWindow":
        if not 1 <= page <= MAX_PAGE:
            raise ValueError(f"page must be between 1 and {MAX_PAGE}")
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}")
        return cls(page=page, per_page=per_page, total_count=max(total_count, 0))

    @property
    def skip(self) -> int:
        return self.per_page * (self.page - 1)

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def last_page(self) -> int:
        """Last page holding any items; 1 for an empty listing."""
        return max(1, -(-self.total_count // self.per_page))

    @property
    def has_next_page(self) -> bool:
        return self.page * self.per_page < self.total_count

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next_page else None

    @property
    def prev_page(self) -> int | None:
        """The page before this one, or the last non-empty page when this one is past the end."""
        if not self.has_prev_page:
            return None
        return min(self.page - 1, self.last_page)
