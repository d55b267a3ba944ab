"""积木树异常定义

积木树的结构性错误（越界下标、循环挂载、不变量被破坏）属于程序缺陷信号，
不提供可恢复路径：调用方应让异常直接向上传播。
"""

from __future__ import annotations


class BlockTreeError(RuntimeError):
    """积木树错误基类"""


class BlockIndexError(BlockTreeError, IndexError):
    """积木下标越界"""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"积木下标越界: {index}（当前积木数量 {size}）")
        self.index = index
        self.size = size


class CyclicAttachmentError(BlockTreeError):
    """遍历子树时遇到循环挂载"""

    def __init__(self, index: int) -> None:
        super().__init__(f"检测到循环挂载：积木 {index} 在同一次遍历中被重复访问")
        self.index = index


class TreeInvariantError(BlockTreeError):
    """积木树不变量校验失败"""

    def __init__(self, problems: list[str]) -> None:
        joined = "; ".join(problems)
        super().__init__(f"积木树不变量校验失败: {joined}")
        self.problems = list(problems)
