"""
测试拖拽释放后的吸附判定

覆盖场景：
1. 落在父积木挂载点容差范围内 → 吸附并精确对齐
2. 任一方向超出容差 → 不吸附，积木留在原处
3. 多个候选同时命中 → 下标最小者优先（不比较距离）
4. 重复吸附不产生任何变化
5. 不会吸附到自己的子树中（避免循环挂载）
"""

from __future__ import annotations

from block_engine.tree.block_arena import BlockArena
from block_engine.tree.snap_resolver import SnapResolver
from block_engine.tree.tree_invariants import collect_invariant_problems

from block_tree_helpers import link, make_block

BLOCK_SIZE = (140.0, 90.0)
TOLERANCE = 12.0


def _resolver(arena: BlockArena) -> SnapResolver:
    return SnapResolver(arena, BLOCK_SIZE, TOLERANCE)


def test_release_near_anchor_attaches_and_snaps_exactly() -> None:
    arena = BlockArena([make_block("A", pos=(20.0, 60.0)), make_block("B", pos=(20.0, 150.0))])

    parent_index = _resolver(arena).try_snap(1)

    assert parent_index == 0
    assert arena[1].attached_to == 0
    assert arena[0].children == [1]
    assert arena[1].pos == (20.0, 150.0)


def test_residual_slack_is_removed_on_snap() -> None:
    arena = BlockArena([make_block("A", pos=(20.0, 60.0)), make_block("B", pos=(31.0, 139.5))])

    _resolver(arena).try_snap(1)

    assert arena[1].pos == (20.0, 150.0)


def test_child_offset_moves_the_anchor() -> None:
    arena = BlockArena([
        make_block("A", pos=(320.0, 60.0), child_offset=(20.0, 5.0)),
        make_block("B", pos=(345.0, 160.0)),
    ])

    assert _resolver(arena).try_snap(1) == 0
    assert arena[1].pos == (340.0, 155.0)


def test_outside_tolerance_on_one_axis_does_not_attach() -> None:
    arena = BlockArena([make_block("A", pos=(20.0, 60.0)), make_block("B", pos=(32.0, 150.0))])

    assert _resolver(arena).try_snap(1) is None
    assert arena[1].attached_to is None
    assert arena[0].children == []
    assert arena[1].pos == (32.0, 150.0)


def test_first_candidate_in_arena_order_wins_over_closer_one() -> None:
    arena = BlockArena([
        make_block("far", pos=(410.0, 60.0)),
        make_block("near", pos=(400.0, 60.0)),
        make_block("dragged", pos=(401.0, 150.0)),
    ])

    assert _resolver(arena).try_snap(2) == 0
    assert arena[2].pos == (410.0, 150.0)
    assert arena[1].children == []


def test_second_resolution_on_snapped_block_changes_nothing() -> None:
    arena = BlockArena([make_block("A", pos=(20.0, 60.0)), make_block("B", pos=(25.0, 145.0))])
    resolver = _resolver(arena)
    resolver.try_snap(1)
    before = (arena[1].pos, arena[1].attached_to, list(arena[0].children))

    assert resolver.try_snap(1) == 0
    assert (arena[1].pos, arena[1].attached_to, list(arena[0].children)) == before


def test_switching_parent_removes_block_from_previous_parent() -> None:
    arena = BlockArena([
        make_block("old", pos=(320.0, 60.0)),
        make_block("new", pos=(600.0, 60.0)),
        make_block("child", pos=(600.0, 150.0)),
    ])
    link(arena, 0, 2)

    assert _resolver(arena).try_snap(2) == 1
    assert arena[0].children == []
    assert arena[1].children == [2]
    assert collect_invariant_problems(arena) == []


def test_block_never_snaps_under_its_own_descendant() -> None:
    arena = BlockArena([
        make_block("root", pos=(320.0, 240.0)),
        make_block("child", pos=(320.0, 330.0)),
    ])
    link(arena, 0, 1)
    # 把 root 放到 child 的挂载点上
    arena[0].pos = (320.0, 420.0)

    assert _resolver(arena).try_snap(0) is None
    assert arena[0].attached_to is None
    assert collect_invariant_problems(arena) == []


def test_candidate_filter_skips_rejected_candidates() -> None:
    arena = BlockArena([
        make_block("template", pos=(20.0, 60.0)),
        make_block("canvas", pos=(20.0, 60.0)),
        make_block("dragged", pos=(20.0, 150.0)),
    ])

    parent_index = _resolver(arena).try_snap(2, candidate_filter=lambda index: index != 0)

    assert parent_index == 1
    assert arena[0].children == []
