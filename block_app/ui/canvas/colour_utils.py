from __future__ import annotations

from typing import Optional

from PyQt6 import QtGui

# 积木未声明颜色时使用的默认填充色
DEFAULT_BLOCK_COLOUR = (80, 160, 240)
# 颜色串无法解析时的回退色
FALLBACK_BLOCK_COLOUR = QtGui.QColor(192, 192, 192)


def parse_hex_colour(hex_text: str) -> QtGui.QColor:
    """解析 "#RRGGBB"（井号可省略）；其他任何格式都返回浅灰色。"""
    digits = hex_text.strip().lstrip("#")
    if len(digits) != 6:
        return QtGui.QColor(FALLBACK_BLOCK_COLOUR)
    try:
        value = int(digits, 16)
    except ValueError:
        return QtGui.QColor(FALLBACK_BLOCK_COLOUR)
    return QtGui.QColor((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def resolve_block_colour(colour: Optional[str]) -> QtGui.QColor:
    if colour is None:
        return QtGui.QColor(*DEFAULT_BLOCK_COLOUR)
    return parse_hex_colour(colour)
