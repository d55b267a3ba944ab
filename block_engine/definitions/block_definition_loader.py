"""
积木定义加载器

从 JSON 文档读取积木定义。文档结构：

    {"block": {"sections": [{"id": "...",
                              "Block_colour": "#RRGGBB",
                              "Shown_element": "...",
                              "child_offset": {"x": 0, "y": 0},
                              "inputs": [{"name": "..."}]}]}}

约定：
- 每个文档只取第一个 section，section 列表为空时跳过该文档；
- 文件不可读、JSON 非法或结构不合法时在加载边界记录错误并跳过，
  不会产生任何残缺的积木记录，也不会影响引擎状态。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from block_engine.models.block_model import BlockDefinition, InputSlot
from block_engine.utils.logging.logger import log_error, log_info, log_warn


class BlockDefinitionError(ValueError):
    """积木定义文档结构不合法"""


def _optional_str(section: Dict[str, Any], key: str) -> Optional[str]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BlockDefinitionError(f"字段 '{key}' 必须是字符串，实际为 {type(value).__name__}")
    return value


def _parse_offset(raw_offset: Any) -> Optional[Tuple[float, float]]:
    if raw_offset is None:
        return None
    if not isinstance(raw_offset, dict):
        raise BlockDefinitionError("字段 'child_offset' 必须是包含 x/y 的对象")
    coords: List[float] = []
    for axis in ("x", "y"):
        value = raw_offset.get(axis)
        # bool 是 int 的子类，这里显式排除
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise BlockDefinitionError(f"字段 'child_offset.{axis}' 必须是数字")
        coords.append(float(value))
    return (coords[0], coords[1])


def _parse_inputs(raw_inputs: Any) -> List[InputSlot]:
    if raw_inputs is None:
        return []
    if not isinstance(raw_inputs, list):
        raise BlockDefinitionError("字段 'inputs' 必须是列表")
    slots: List[InputSlot] = []
    seen_names = set()
    for position, entry in enumerate(raw_inputs):
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise BlockDefinitionError(f"inputs[{position}] 缺少字符串字段 'name'")
        name = entry["name"]
        if name in seen_names:
            raise BlockDefinitionError(f"输入名 '{name}' 重复")
        seen_names.add(name)
        slots.append(InputSlot(name=name))
    return slots


def parse_block_section(section: Any) -> BlockDefinition:
    """将单个 section 解析为 BlockDefinition，结构不合法时抛出 BlockDefinitionError。"""
    if not isinstance(section, dict):
        raise BlockDefinitionError("section 必须是对象")
    block_id = section.get("id")
    if not isinstance(block_id, str) or not block_id:
        raise BlockDefinitionError("section 缺少非空字符串字段 'id'")

    return BlockDefinition(
        id=block_id,
        colour=_optional_str(section, "Block_colour"),
        display_label=_optional_str(section, "Shown_element"),
        child_offset=_parse_offset(section.get("child_offset")),
        input_slots=_parse_inputs(section.get("inputs")),
    )


def parse_block_document(document: Any) -> Optional[BlockDefinition]:
    """解析整个定义文档，返回第一个 section 的定义；section 列表为空时返回 None。"""
    if not isinstance(document, dict) or not isinstance(document.get("block"), dict):
        raise BlockDefinitionError("文档缺少对象字段 'block'")
    sections = document["block"].get("sections")
    if not isinstance(sections, list):
        raise BlockDefinitionError("字段 'block.sections' 必须是列表")
    if not sections:
        return None
    return parse_block_section(sections[0])


def load_block_definition_file(path: Path) -> Optional[BlockDefinition]:
    """从文件加载积木定义。任何读取/解析错误都只记录日志并返回 None。"""
    try:
        raw_text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log_error("[BLOCKS] 读取积木定义失败 {}: {}", path, exc)
        return None

    try:
        document = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        log_error("[BLOCKS] 积木定义不是合法 JSON {}: {}", path, exc)
        return None

    try:
        definition = parse_block_document(document)
    except BlockDefinitionError as exc:
        log_error("[BLOCKS] 积木定义结构不合法 {}: {}", path, exc)
        return None

    if definition is None:
        log_warn("[BLOCKS] 积木定义 {} 中没有任何 section，已跳过", path)
        return None

    log_info("[BLOCKS] 已加载积木定义 {}（{}）", definition.id, path)
    return definition


def load_block_definitions_from_dir(directory: Path) -> List[BlockDefinition]:
    """按文件名顺序加载目录下所有文件中的积木定义，跳过加载失败的文件。"""
    directory = Path(directory)
    if not directory.is_dir():
        log_warn("[BLOCKS] 积木定义目录不存在: {}", directory)
        return []

    definitions: List[BlockDefinition] = []
    for file_path in sorted(directory.iterdir()):
        if not file_path.is_file():
            continue
        definition = load_block_definition_file(file_path)
        if definition is not None:
            definitions.append(definition)

    log_info("[BLOCKS] 目录 {} 共加载 {} 个积木定义", directory, len(definitions))
    return definitions
