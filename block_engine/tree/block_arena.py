from __future__ import annotations

from typing import Iterator, List, Optional

from block_engine.models.block_model import BlockRecord
from .tree_errors import BlockIndexError


class BlockArena:
    """积木仓库：按下标寻址的积木记录有序集合。

    积木之间的父子引用一律是本仓库中的整数下标。`remove()` 会物理删除记录并让其后的
    记录整体前移一位，但不会修正任何引用；下标重编号由 `DeletionEngine` 负责，
    因为只有它知道本批次删除了哪些下标。
    """

    def __init__(self, records: Optional[List[BlockRecord]] = None) -> None:
        self._records: List[BlockRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BlockRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> BlockRecord:
        self.check_index(index)
        return self._records[index]

    def contains_index(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < len(self._records)

    def check_index(self, index: int) -> None:
        # 负下标在这里视为越界，不沿用 list 的倒数语义
        if not self.contains_index(index):
            raise BlockIndexError(index, len(self._records))

    def index_of(self, record: BlockRecord) -> Optional[int]:
        """按对象身份查找记录的当前下标；记录已被删除时返回 None。"""
        for index, candidate in enumerate(self._records):
            if candidate is record:
                return index
        return None

    def append(self, record: BlockRecord) -> int:
        self._records.append(record)
        return len(self._records) - 1

    def remove(self, index: int) -> BlockRecord:
        self.check_index(index)
        return self._records.pop(index)

    def indices(self) -> range:
        return range(len(self._records))

    def records(self) -> List[BlockRecord]:
        """当前有序积木列表的浅拷贝（供绘制层读取）。"""
        return list(self._records)
