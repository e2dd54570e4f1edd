from typing import Tuple

from .settings import config_settings


def get_limit_from_page_index(page: int, per_page: int) -> Tuple[int, int]:
    """
    Translates a 1-based page number and page size into (limit, offset).

    A page below 1 means "no pagination" and yields (0, 0); a limit of 0 is
    read by the repositories as "return everything". Page sizes that are
    missing or larger than MAX_ITEMS_PER_PAGE fall back to that maximum.
    """
    if page < 1:
        return 0, 0

    max_per_page = config_settings.MAX_ITEMS_PER_PAGE
    limit = per_page if 0 < per_page <= max_per_page else max_per_page
    return limit, limit * (page - 1)
