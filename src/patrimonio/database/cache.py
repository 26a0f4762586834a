"""
Cache de resultados de consulta.
"""

from collections import OrderedDict
from typing import Any, Hashable, Optional

from patrimonio.config import CACHE_CAPACITY


class QueryCache:
    """
    Cache FIFO de páginas de busca.

    Apenas consultivo: qualquer operação de escrita chama invalidate().
    """

    def __init__(self, capacity: int = CACHE_CAPACITY):
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()

    def get(self, key: Hashable) -> Optional[Any]:
        return self._entries.get(key)

    def put(self, key: Hashable, value: Any) -> None:
        if key in self._entries:
            self._entries[key] = value
            return
        if len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
        self._entries[key] = value

    def invalidate(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries
