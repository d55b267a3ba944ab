"""积木树引擎子包。

暴露的核心组件：
- BlockArena：按下标寻址的积木仓库
- SnapResolver / SubtreeRepositioner / DeletionEngine：吸附、级联定位、级联删除
- BlockTreeEngine：交互事件入口
"""

from .block_arena import BlockArena  # noqa: F401
from .block_tree_engine import BlockTreeEngine  # noqa: F401
from .deletion_engine import DeletionEngine  # noqa: F401
from .snap_resolver import SnapResolver  # noqa: F401
from .subtree_repositioner import SubtreeRepositioner  # noqa: F401
from .tree_config import BlockTreeConfig  # noqa: F401
from .tree_errors import (  # noqa: F401
    BlockIndexError,
    BlockTreeError,
    CyclicAttachmentError,
    TreeInvariantError,
)
from .tree_invariants import collect_invariant_problems, validate_tree  # noqa: F401
