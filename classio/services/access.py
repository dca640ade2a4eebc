# classio/services/access.py
"""Проверка, что ребёнок принадлежит родителю."""
import logging
from typing import Callable, Iterable, List

from classio.core.exceptions import AccessDenied
from classio.core.query_cache import QueryCache

logger = logging.getLogger(__name__)


def children_key(parent_id):
    return ("children", parent_id)


def child_class_key(parent_id, child_id):
    return ("child_class", parent_id, child_id)


class ChildAccessGuard:
    """
    Держит полный список детей родителя в кэше.

    Кэш заполняется целиком одним загрузчиком, поэтому проверка всегда
    идёт по полному списку, а не по его части.
    """

    def __init__(self, cache: QueryCache):
        self.cache = cache

    def children(self, parent_id, loader: Callable[[], Iterable]) -> List:
        return self.cache.get_or_load(children_key(parent_id), lambda: list(loader()))

    def verify_child_access(self, parent_id, child_id, loader: Callable[[], Iterable]) -> None:
        children = self.children(parent_id, loader)
        if not any(child.id == child_id for child in children):
            logger.warning(f"Родитель {parent_id} запросил чужого ребёнка {child_id}")
            raise AccessDenied()

    def refresh(self, parent_id) -> None:
        # Сбрасывает и зависящие от списка детей записи (классы детей)
        self.cache.invalidate(children_key(parent_id))
