"""全局设置模块 - 控制积木编辑器的几何参数、启动行为和调试选项

这个模块提供了一个集中的配置系统，所有设置项都是 `Settings` 的大写类属性。
支持从配置文件加载和保存设置（仅保存设置本身，编辑中的积木树不落盘）。

使用方法：
    from block_engine.configs.settings import settings
    from block_engine.utils.logging.logger import log_info

    if settings.BLOCK_TREE_VERBOSE:
        log_info("调试信息")

    # 保存设置
    settings.save()

    # 加载设置
    settings.load()
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from block_engine.utils.logging.logger import log_info, log_warn

DEFAULT_USER_SETTINGS_RELATIVE_PATH = Path("runtime/cache/user_settings.json")


class Settings:
    """全局设置类

    所有设置项都是类属性，可以直接访问和修改。
    """

    # ========== 积木几何 ==========

    # 积木外框尺寸（所有积木统一），子积木紧贴父积木下沿排列
    BLOCK_WIDTH: float = 140.0
    BLOCK_HEIGHT: float = 90.0

    # 吸附容差（像素）：拖拽释放时，积木左上角与候选父积木挂载点在 X/Y 两个方向上
    # 的距离都小于该值才会吸附
    SNAP_TOLERANCE: float = 12.0

    # ========== 画布布局 ==========

    # 左侧积木区（调色板）与右侧代码区的分界线 X 坐标；
    # 积木 X 坐标小于该值即视为调色板模板
    PALETTE_BOUNDARY_X: float = 300.0

    # 调色板模板的列 X 坐标
    PALETTE_ORIGIN_X: float = 20.0

    # 从调色板生成的代码区积木的列 X 坐标
    CANVAS_ORIGIN_X: float = 320.0

    # 纵向堆叠的起始 Y 坐标与步长（调色板加载与代码区生成共用）
    STACK_ORIGIN_Y: float = 60.0
    STACK_SPACING_Y: float = 80.0

    # ========== 启动选项 ==========

    # 积木定义 JSON 所在目录（相对于 workspace，或绝对路径）
    BLOCK_DEFINITIONS_DIR: str = "Json_files"

    # ========== 调试选项 ==========

    # 信息日志：控制 `block_engine.utils.logging.logger.log_info` 是否输出
    # 默认 False（关闭），仅保留 warn/error
    LOG_VERBOSE: bool = False

    # 积木树操作（吸附/级联移动/级联删除）详细日志
    BLOCK_TREE_VERBOSE: bool = False

    # 每次修改积木树后执行一次完整的不变量校验，失败时直接抛出 TreeInvariantError
    # 仅用于开发调试，默认关闭
    BLOCK_TREE_VALIDATE_AFTER_EDIT: bool = False

    # 配置文件路径（相对于workspace）
    _config_file: Optional[Path] = None
    # 工作区根目录（由 set_config_path(workspace_root) 显式注入）
    _workspace_root: Optional[Path] = None

    def __repr__(self) -> str:
        items = ", ".join(f"{key}={value!r}" for key, value in self._get_all_settings().items())
        return f"Settings({items})"

    @classmethod
    def set_config_path(cls, workspace_path: Path) -> None:
        """绑定 workspace：用户设置文件与相对的积木定义目录都以它为根。"""
        cls._workspace_root = workspace_path.resolve()
        cls._config_file = cls._workspace_root / DEFAULT_USER_SETTINGS_RELATIVE_PATH
        log_info("[BOOT][Settings] workspace={}，用户设置文件={}", cls._workspace_root, cls._config_file)

    def resolve_definitions_dir(self) -> Path:
        """解析积木定义目录：绝对路径原样返回，相对路径基于 workspace 根目录。"""
        definitions_dir = Path(self.BLOCK_DEFINITIONS_DIR)
        if definitions_dir.is_absolute():
            return definitions_dir
        workspace_root = self.__class__._workspace_root
        if workspace_root is None:
            return definitions_dir
        return workspace_root / definitions_dir

    def _get_all_settings(self) -> Dict[str, Any]:
        # 从实例取值：load() 写入的实例属性会覆盖类默认值
        return {
            key: getattr(self, key)
            for key in dir(self.__class__)
            if not key.startswith('_') and key.isupper()
        }

    def save(self) -> bool:
        """把当前设置写入 workspace 下的用户设置文件；未调用 set_config_path 时返回 False。"""
        config_file = self.__class__._config_file
        if config_file is None:
            log_warn("[Settings] 配置文件路径未设置，无法保存设置")
            return False

        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(
            json.dumps(self._get_all_settings(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        log_info("[Settings] 设置已保存到 {}", config_file)
        return True

    def load(self) -> bool:
        """从用户设置文件加载设置。

        文件缺失、不是合法 JSON 或顶层不是对象时保留默认值并返回 False，
        不会中断启动；未知键与小写键被忽略。
        """
        config_file = self.__class__._config_file
        if config_file is None or not config_file.exists():
            log_info("[BOOT][Settings] 没有用户设置文件（{}），使用默认值", config_file)
            return False

        try:
            settings_dict = json.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log_warn("[BOOT][Settings] 用户设置文件 {} 读取失败，使用默认值: {}", config_file, exc)
            return False
        if not isinstance(settings_dict, dict):
            log_warn("[BOOT][Settings] 用户设置文件 {} 顶层不是对象，使用默认值", config_file)
            return False

        known_keys = self._get_all_settings()
        applied = [key for key in settings_dict if key in known_keys]
        for key in applied:
            setattr(self, key, settings_dict[key])

        log_info("[BOOT][Settings] 已从 {} 应用 {} 个设置项", config_file, len(applied))
        return True

    @classmethod
    def reset_to_defaults(cls):
        """重置所有设置为默认值"""
        cls.BLOCK_WIDTH = 140.0
        cls.BLOCK_HEIGHT = 90.0
        cls.SNAP_TOLERANCE = 12.0
        cls.PALETTE_BOUNDARY_X = 300.0
        cls.PALETTE_ORIGIN_X = 20.0
        cls.CANVAS_ORIGIN_X = 320.0
        cls.STACK_ORIGIN_Y = 60.0
        cls.STACK_SPACING_Y = 80.0
        cls.BLOCK_DEFINITIONS_DIR = "Json_files"
        cls.LOG_VERBOSE = False
        cls.BLOCK_TREE_VERBOSE = False
        cls.BLOCK_TREE_VALIDATE_AFTER_EDIT = False
        log_info("✅ 已重置所有设置为默认值")

    @classmethod
    def enable_debug_mode(cls):
        """启用所有调试选项（用于开发调试）"""
        cls.LOG_VERBOSE = True
        cls.BLOCK_TREE_VERBOSE = True
        cls.BLOCK_TREE_VALIDATE_AFTER_EDIT = True
        log_info("🔧 已启用调试模式：所有详细日志与不变量校验已打开")

    @classmethod
    def disable_debug_mode(cls):
        """禁用所有调试选项（恢复默认）"""
        cls.LOG_VERBOSE = False
        cls.BLOCK_TREE_VERBOSE = False
        cls.BLOCK_TREE_VALIDATE_AFTER_EDIT = False
        log_info("✅ 已禁用调试模式：恢复默认设置")


# 全局设置实例
settings = Settings()
