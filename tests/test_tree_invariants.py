from __future__ import annotations

import pytest

from block_engine.tree.block_arena import BlockArena
from block_engine.tree.tree_errors import TreeInvariantError
from block_engine.tree.tree_invariants import collect_invariant_problems, validate_tree

from block_tree_helpers import link, make_block


def test_consistent_forest_has_no_problems() -> None:
    arena = BlockArena([make_block("a"), make_block("b"), make_block("c")])
    link(arena, 0, 1)
    link(arena, 1, 2)
    assert collect_invariant_problems(arena) == []
    validate_tree(arena)


def test_one_sided_links_are_reported() -> None:
    arena = BlockArena([make_block("a"), make_block("b")])
    arena[0].children.append(1)

    problems = collect_invariant_problems(arena)

    assert len(problems) == 1
    assert "父引用为 None" in problems[0]


def test_out_of_range_and_duplicate_references_are_reported() -> None:
    arena = BlockArena([make_block("a"), make_block("b")])
    link(arena, 0, 1)
    arena[0].children.append(1)
    arena[1].children.append(9)

    problems = collect_invariant_problems(arena)

    assert any("重复下标" in problem for problem in problems)
    assert any("越界" in problem for problem in problems)


def test_cycle_is_reported_and_validate_raises() -> None:
    arena = BlockArena([make_block("a"), make_block("b")])
    link(arena, 0, 1)
    link(arena, 1, 0)

    with pytest.raises(TreeInvariantError) as exc_info:
        validate_tree(arena)
    assert any("循环挂载" in problem for problem in exc_info.value.problems)
