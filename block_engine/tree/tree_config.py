from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from block_engine.configs.settings import settings
from block_engine.utils.logging.logger import log_info


@dataclass(frozen=True)
class BlockTreeConfig:
    """积木树引擎配置（构造时注入，便于测试使用不同的尺寸与容差）"""

    block_width: float = 140.0
    block_height: float = 90.0
    snap_tolerance: float = 12.0
    palette_boundary_x: float = 300.0
    palette_origin_x: float = 20.0
    canvas_origin_x: float = 320.0
    stack_origin_y: float = 60.0
    stack_spacing_y: float = 80.0

    @property
    def block_size(self) -> Tuple[float, float]:
        return (self.block_width, self.block_height)

    @classmethod
    def from_settings(cls) -> "BlockTreeConfig":
        return cls(
            block_width=float(settings.BLOCK_WIDTH),
            block_height=float(settings.BLOCK_HEIGHT),
            snap_tolerance=float(settings.SNAP_TOLERANCE),
            palette_boundary_x=float(settings.PALETTE_BOUNDARY_X),
            palette_origin_x=float(settings.PALETTE_ORIGIN_X),
            canvas_origin_x=float(settings.CANVAS_ORIGIN_X),
            stack_origin_y=float(settings.STACK_ORIGIN_Y),
            stack_spacing_y=float(settings.STACK_SPACING_Y),
        )


def debug(message: str, *args) -> None:
    """积木树调试输出：由 settings.BLOCK_TREE_VERBOSE 决定是否输出。"""
    if settings.BLOCK_TREE_VERBOSE:
        log_info("[TREE] " + message, *args)
