from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple


@dataclass
class InputSlot:
    name: str


@dataclass
class BlockDefinition:
    """积木定义（来自积木定义文档的静态字段）

    由定义加载器完成结构校验后产出；引擎信任其中的字段类型，不再重复校验。
    """
    id: str
    colour: Optional[str] = None  # 十六进制颜色串（如 "#FF8800"），缺省时由 UI 使用默认色
    display_label: Optional[str] = None  # 积木上显示的文字，缺省时回退为 id
    child_offset: Optional[Tuple[float, float]] = None  # 子积木挂载点相对偏移
    input_slots: List[InputSlot] = field(default_factory=list)

    def to_record(self, pos: Tuple[float, float]) -> "BlockRecord":
        """以定义构建一个位于 pos 的根积木记录（无父无子，输入值全部为空串）。"""
        return BlockRecord(
            id=self.id,
            display_label=self.display_label,
            colour=self.colour,
            pos=pos,
            child_offset=self.child_offset,
            input_slots=[InputSlot(name=slot.name) for slot in self.input_slots],
            input_values=empty_input_values(self.input_slots),
        )


@dataclass
class BlockRecord:
    id: str
    display_label: Optional[str] = None
    colour: Optional[str] = None
    pos: Tuple[float, float] = (0.0, 0.0)
    child_offset: Optional[Tuple[float, float]] = None
    input_slots: List[InputSlot] = field(default_factory=list)
    # 用户在每个输入框中填写的文本 {输入名: 文本}
    input_values: Dict[str, str] = field(default_factory=dict)

    # -------- 树结构（均为积木仓库中的下标）--------
    attached_to: Optional[int] = None  # 父积木下标；None 表示根积木
    children: List[int] = field(default_factory=list)  # 直接子积木下标，按挂载先后排列

    @property
    def label(self) -> str:
        return self.display_label if self.display_label else self.id

    @property
    def resolved_child_offset(self) -> Tuple[float, float]:
        if self.child_offset is None:
            return (0.0, 0.0)
        return self.child_offset

    def child_anchor(self, block_height: float) -> Tuple[float, float]:
        """第一个子积木的挂载点：父积木位置 + 子偏移，Y 方向再下移一个积木高度。"""
        offset_x, offset_y = self.resolved_child_offset
        return (self.pos[0] + offset_x, self.pos[1] + block_height + offset_y)

    def spawn_copy(self, pos: Tuple[float, float]) -> "BlockRecord":
        """复制静态字段生成一个新的根积木。

        位置、父子关系与输入值均不继承：新积木位于 pos，无父无子，输入值全部为空串。
        """
        return replace(
            self,
            pos=pos,
            input_slots=[InputSlot(name=slot.name) for slot in self.input_slots],
            input_values=empty_input_values(self.input_slots),
            attached_to=None,
            children=[],
        )


def empty_input_values(input_slots: List[InputSlot]) -> Dict[str, str]:
    return {slot.name: "" for slot in input_slots}
