# classio/core/query_cache.py
"""
Кэш именованных результатов запросов с зависимостями.

Эндпоинты FastAPI без async выполняются в пуле потоков, поэтому все
изменения состояния идут под одной блокировкой. Загрузчик вызывается
вне блокировки: если слот сбросили, пока шла загрузка, результат не
сохраняется. Сброс ключа сбрасывает и всё, что от него зависит.
"""
import logging
import threading
from typing import Any, Callable, Hashable, Iterable

logger = logging.getLogger(__name__)

_MISSING = object()


class QueryCache:
    def __init__(self):
        self._lock = threading.RLock()
        self._values: dict[Hashable, Any] = {}
        self._generations: dict[Hashable, int] = {}
        self._dependents: dict[Hashable, set[Hashable]] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._values

    def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Any],
        depends_on: Iterable[Hashable] = (),
    ) -> Any:
        with self._lock:
            value = self._values.get(key, _MISSING)
            if value is not _MISSING:
                return value
            generation = self._generations.get(key, 0)
            depends_on = tuple(depends_on)
            for parent in depends_on:
                self._dependents.setdefault(parent, set()).add(key)

        value = loader()

        with self._lock:
            # Ключ сбросили во время загрузки: отдаём свежий результат, но не кэшируем
            if self._generations.get(key, 0) == generation:
                self._values[key] = value
            else:
                logger.debug(f"Результат для {key!r} устарел, в кэш не попадёт")
        return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            pending = [key]
            seen = set()
            while pending:
                current = pending.pop()
                if current in seen:
                    continue
                seen.add(current)
                self._values.pop(current, None)
                self._generations[current] = self._generations.get(current, 0) + 1
                pending.extend(self._dependents.pop(current, ()))

    def clear(self) -> None:
        with self._lock:
            for key in list(self._values) + list(self._generations):
                self._generations[key] = self._generations.get(key, 0) + 1
            self._values.clear()
            self._dependents.clear()
