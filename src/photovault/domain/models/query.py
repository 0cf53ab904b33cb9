from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Offset cursor handed to paged repository calls."""

    skip: int = 0
    take: int = 100

    def next(self) -> "PageRequest":
        return PageRequest(skip=self.skip + self.take, take=self.take)


@dataclass
class Page(Generic[T]):
    """One bounded batch of items plus the cursor for the following batch."""

    items: List[T] = field(default_factory=list)
    next_cursor: Optional[PageRequest] = None

    @property
    def has_next_page(self) -> bool:
        return self.next_cursor is not None

    def __len__(self) -> int:
        return len(self.items)
