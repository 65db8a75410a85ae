"""NBT 配置对象."""

from dataclasses import dataclass

from .const import DEFAULT_MAX_DEPTH
from .options import NbtOption


@dataclass(frozen=True)
class NbtConfig:
    """NBT 编解码配置 (不可变).

    在 API 入口层创建, 然后传递给 Encoder/Decoder 内核.

    Attributes:
        flags: NBT 选项标志 (IntFlag).
        max_depth: 容器 (List/Compound) 的最大嵌套深度.
    """

    flags: NbtOption = NbtOption.NONE
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def from_params(
        cls,
        option: NbtOption | int = NbtOption.NONE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> "NbtConfig":
        """从参数构建配置对象.

        Args:
            option: NbtOption 枚举.
            max_depth: 最大嵌套深度.

        Returns:
            NbtConfig: 配置对象.
        """
        return cls(flags=NbtOption(option), max_depth=max_depth)

    @property
    def encoding(self) -> str:
        """名称和字符串使用的字符编码."""
        if self.flags & NbtOption.UTF8_STRINGS:
            return "utf-8"
        return "latin-1"
