"""
测试级联删除与下标重编号

覆盖场景：
1. 删除根积木会带走整棵子树
2. 删除无关积木后，其余积木的父子下标整体前移
3. 删除子树中间的积木只影响该子树，父积木的 children 同步摘除
4. 非连续下标的批量删除（重编号按“小于 r 的被删下标个数”计算）
"""

from __future__ import annotations

import pytest

from block_engine.tree.block_arena import BlockArena
from block_engine.tree.deletion_engine import DeletionEngine
from block_engine.tree.tree_errors import BlockIndexError, CyclicAttachmentError
from block_engine.tree.tree_invariants import collect_invariant_problems

from block_tree_helpers import ids_of, link, make_block


def test_deleting_root_of_chain_empties_arena() -> None:
    arena = BlockArena([make_block("A"), make_block("B"), make_block("C")])
    link(arena, 0, 1)
    link(arena, 1, 2)

    removed = DeletionEngine(arena).delete_block(0)

    assert removed == [2, 1, 0]
    assert len(arena) == 0


def test_deleting_unrelated_root_renumbers_survivors() -> None:
    arena = BlockArena([make_block("A"), make_block("B"), make_block("C")])
    link(arena, 0, 2)

    DeletionEngine(arena).delete_block(1)

    assert ids_of(arena) == ["A", "C"]
    assert arena[0].children == [1]
    assert arena[1].attached_to == 0
    assert collect_invariant_problems(arena) == []


def test_deleting_child_detaches_it_from_parent() -> None:
    arena = BlockArena([make_block("A"), make_block("B"), make_block("C"), make_block("D")])
    link(arena, 0, 1)
    link(arena, 0, 3)
    link(arena, 1, 2)

    removed = DeletionEngine(arena).delete_block(1)

    assert removed == [2, 1]
    assert ids_of(arena) == ["A", "D"]
    assert arena[0].children == [1]
    assert arena[1].attached_to == 0
    assert collect_invariant_problems(arena) == []


def test_non_contiguous_subtree_renumbers_every_reference() -> None:
    # 0:P  1:X(删) 2:Q  3:Y(删，X 的子)  4:R（Q 的子） 5:S（R 的子）
    arena = BlockArena([
        make_block("P"), make_block("X"), make_block("Q"),
        make_block("Y"), make_block("R"), make_block("S"),
    ])
    link(arena, 0, 1)
    link(arena, 1, 3)
    link(arena, 2, 4)
    link(arena, 4, 5)

    DeletionEngine(arena).delete_block(1)

    assert ids_of(arena) == ["P", "Q", "R", "S"]
    assert arena[0].children == []
    assert arena[1].children == [2]
    assert arena[2].attached_to == 1
    assert arena[2].children == [3]
    assert arena[3].attached_to == 2
    assert collect_invariant_problems(arena) == []


def test_only_subtree_is_removed_and_size_shrinks_by_its_count() -> None:
    arena = BlockArena([make_block(name) for name in "ABCDEF"])
    link(arena, 1, 2)
    link(arena, 1, 4)
    link(arena, 4, 5)
    link(arena, 0, 3)

    removed = DeletionEngine(arena).delete_block(1)

    assert sorted(removed) == [1, 2, 4, 5]
    assert ids_of(arena) == ["A", "D"]
    assert arena[0].children == [1]
    assert arena[1].attached_to == 0


def test_dangling_reference_to_removed_block_is_dropped(capsys) -> None:
    arena = BlockArena([make_block("A"), make_block("B"), make_block("C")])
    link(arena, 1, 2)
    # 人为制造一个指向被删积木、但不在其父子链中的悬空引用
    arena[0].children.append(2)

    DeletionEngine(arena).delete_block(1)

    assert arena[0].children == []
    assert "指向已删除的积木" in capsys.readouterr().out


def test_out_of_range_delete_raises_without_mutation() -> None:
    arena = BlockArena([make_block("A")])
    with pytest.raises(BlockIndexError):
        DeletionEngine(arena).delete_block(3)
    assert ids_of(arena) == ["A"]


def test_cycle_is_detected_before_any_record_is_removed() -> None:
    arena = BlockArena([make_block("A"), make_block("B")])
    link(arena, 0, 1)
    arena[1].children.append(0)

    with pytest.raises(CyclicAttachmentError):
        DeletionEngine(arena).delete_block(0)
    assert len(arena) == 2
