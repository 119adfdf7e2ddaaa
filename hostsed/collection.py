"""
有序、可变的 hosts 条目集合
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from hostsed.models import HostsEntry

Listener = Callable[["EntryCollection"], None]


def _address_key(entry: HostsEntry) -> Tuple[int, Any]:
    if entry.address is None:
        return (1, (0, 0))
    return (0, (entry.address.version, int(entry.address)))


def _hostname_key(entry: HostsEntry) -> Tuple[int, str]:
    if entry.hostname is None:
        return (1, "")
    return (0, str(entry.hostname).lower())


def _comment_key(entry: HostsEntry) -> Tuple[int, str]:
    if not entry.has_comment:
        return (1, "")
    return (0, entry.comment.strip().lower())


SORT_KEYS: Dict[str, Callable[[HostsEntry], Tuple[int, Any]]] = {
    'address': _address_key,
    'hostname': _hostname_key,
    'comment': _comment_key,
}


class EntryCollection:
    """
    hosts 条目的有序集合

    插入顺序即文件顺序（或追加顺序），不要求地址或主机名唯一。
    结构变化（增、删、清空、排序）后通知已注册的监听器。
    """

    def __init__(
        self,
        entries: Optional[Iterable[HostsEntry]] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._entries: List[HostsEntry] = list(entries or [])
        self._listeners: List[Listener] = []
        self.logger = logger or logging.getLogger('hostsed')

    def add_listener(self, callback: Listener) -> None:
        """注册变化监听器"""
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        """移除变化监听器，未注册时忽略"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                # 监听器出错不影响集合本身
                self.logger.error(f"条目集合监听器出错: {e}", exc_info=True)

    def append(self, entry: HostsEntry) -> None:
        self._entries.append(entry)
        self._notify()

    def extend(self, entries: Iterable[HostsEntry]) -> None:
        new_entries = list(entries)
        if not new_entries:
            return
        self._entries.extend(new_entries)
        self._notify()

    def insert(self, index: int, entry: HostsEntry) -> None:
        self._entries.insert(index, entry)
        self._notify()

    def remove(self, entry: HostsEntry) -> None:
        self._entries.remove(entry)
        self._notify()

    def pop(self, index: int = -1) -> HostsEntry:
        entry = self._entries.pop(index)
        self._notify()
        return entry

    def clear(self) -> None:
        self._entries.clear()
        self._notify()

    def index(self, entry: HostsEntry) -> int:
        return self._entries.index(entry)

    def valid_entries(self) -> Iterator[HostsEntry]:
        """按当前顺序迭代有效条目"""
        return (entry for entry in self._entries if entry.is_valid)

    def sort_by(self, field: str, reverse: bool = False) -> None:
        """
        按字段稳定排序

        参数:
            field: address、hostname 或 comment
            reverse: 是否降序

        异常:
            ValueError: 如果字段未知
        """
        try:
            key = SORT_KEYS[field]
        except KeyError:
            raise ValueError(
                f"无效的排序字段: {field}. "
                f"必须是以下之一: {', '.join(SORT_KEYS)}"
            ) from None

        if reverse:
            # 空值始终排在最后
            present = [e for e in self._entries if key(e)[0] == 0]
            missing = [e for e in self._entries if key(e)[0] == 1]
            present.sort(key=key, reverse=True)
            self._entries = present + missing
        else:
            self._entries.sort(key=key)
        self._notify()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HostsEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> HostsEntry:
        return self._entries[index]

    def __delitem__(self, index: int) -> None:
        del self._entries[index]
        self._notify()

    def __repr__(self) -> str:
        return f"EntryCollection({len(self._entries)} entries)"
