from narrator.models import PaginationMeta


def offset_window(page: int, page_size: int) -> tuple[int, int]:
    """Return the zero-based, inclusive ``(first, last)`` row positions of *page*."""
    first = (page - 1) * page_size
    return first, first + page_size - 1


def page_meta(page: int, page_size: int, total: int | None) -> PaginationMeta:
    return PaginationMeta(page=page, page_size=page_size, total=total or 0)
