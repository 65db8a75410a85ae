"""Schematic 导入.

Schematic 是一种特定形状的根 Compound: 三个 `TAG_Short` 尺寸字段
(`Width`, `Height`, `Length`) 和两个等长的 `TAG_Byte_Array`
(`Blocks`, `Data`). 本模块只负责从解码后的标签树中提取这些字段,
放置方块的操作由调用方通过回调提供.
"""

from collections.abc import Callable, Iterator
from typing import IO, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from typing_extensions import Self

from .api import load, loads
from .exceptions import (
    MissingFieldError,
    NotASchematicError,
    SchematicError,
    WrongFieldTypeError,
)
from .log import logger
from .types import Tag, TagByteArray, TagCompound, TagShort
from .walk import find_child

SCHEMATIC_NAME = "Schematic"

Position = tuple[float, float, float]
BlockPlacer = Callable[[Position, int, int], Any]


def _require(root: TagCompound, name: str, tag_cls: type[Tag]) -> Any:
    """按名称取出必需字段的负载.

    Raises:
        MissingFieldError: 字段不存在.
        WrongFieldTypeError: 字段类型不符.
    """
    child = find_child(root, name)
    if child is None:
        raise MissingFieldError(f"Missing required field '{name}'")
    if not isinstance(child, tag_cls):
        raise WrongFieldTypeError(
            f"Field '{name}' must be {tag_cls.type_name}, got {child.type_name}"
        )
    return child.value  # type: ignore[attr-defined]


class Schematic(BaseModel):
    """Schematic 数据视图.

    坐标范围为 (0, 0, 0) 到 (width-1, height-1, length-1),
    方块在数组中按 高度 -> 长度 -> 宽度 排列.

    Examples:
        >>> s = Schematic(width=2, height=1, length=3, blocks=bytes(6), data=bytes(6))
        >>> s.index(1, 0, 2)
        5
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0, le=0x7FFF)
    height: int = Field(ge=0, le=0x7FFF)
    length: int = Field(ge=0, le=0x7FFF)
    blocks: bytes
    data: bytes

    @model_validator(mode="after")
    def check_volume(self) -> Self:
        volume = self.volume
        if len(self.blocks) != volume:
            raise ValueError(
                f"Blocks has {len(self.blocks)} entries, expected {volume}"
            )
        if len(self.data) != volume:
            raise ValueError(f"Data has {len(self.data)} entries, expected {volume}")
        return self

    @property
    def volume(self) -> int:
        """方块总数 (width * height * length)."""
        return self.width * self.height * self.length

    @classmethod
    def from_tag(cls, root: Tag) -> "Schematic":
        """从解码后的根标签提取 Schematic.

        Raises:
            NotASchematicError: 根标签不是名为 "Schematic" 的 Compound.
            MissingFieldError: 缺少必需字段.
            WrongFieldTypeError: 字段类型不符.
            SchematicError: 尺寸为负或数组长度与尺寸不符.
        """
        if not isinstance(root, TagCompound) or root.name != SCHEMATIC_NAME:
            raise NotASchematicError(
                f"Root tag must be a TAG_Compound named '{SCHEMATIC_NAME}', "
                f"got {root.type_name} '{root.name}'"
            )

        try:
            return cls(
                width=_require(root, "Width", TagShort),
                height=_require(root, "Height", TagShort),
                length=_require(root, "Length", TagShort),
                blocks=_require(root, "Blocks", TagByteArray),
                data=_require(root, "Data", TagByteArray),
            )
        except ValidationError as e:
            raise SchematicError(f"Invalid schematic: {e}") from e

    def to_tag(self) -> TagCompound:
        """构建对应的根 Compound."""
        return TagCompound(
            (
                TagShort(self.width, "Width"),
                TagShort(self.height, "Height"),
                TagShort(self.length, "Length"),
                TagByteArray(self.blocks, "Blocks"),
                TagByteArray(self.data, "Data"),
            ),
            SCHEMATIC_NAME,
        )

    def index(self, x: int, y: int, z: int) -> int:
        """坐标对应的扁平数组下标: (y * length + z) * width + x."""
        if not (
            0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.length
        ):
            raise IndexError(f"Coordinate ({x}, {y}, {z}) out of bounds")
        return (y * self.length + z) * self.width + x

    def block_at(self, x: int, y: int, z: int) -> tuple[int, int]:
        """返回坐标处的 (方块 ID, 方块数据)."""
        i = self.index(x, y, z)
        return self.blocks[i], self.data[i]

    def iter_blocks(self) -> Iterator[tuple[tuple[int, int, int], int, int]]:
        """按 Y -> X -> Z 顺序产出 ((x, y, z), 方块 ID, 方块数据)."""
        for y in range(self.height):
            for x in range(self.width):
                for z in range(self.length):
                    i = (y * self.length + z) * self.width + x
                    yield (x, y, z), self.blocks[i], self.data[i]


def import_schematic(
    source: Tag | bytes | bytearray | memoryview | IO[bytes],
    place_block: BlockPlacer,
    origin: Position | Callable[[], Position] = (0, 0, 0),
) -> Schematic:
    """把 Schematic 中的每个方块交给 `place_block` 放置.

    Args:
        source: 已解码的根标签, 或 (已解压的) NBT 字节 / 二进制文件对象.
        place_block: 回调 `place_block(position, block_id, block_data)`.
        origin: 放置原点, 或返回当前位置的无参可调用对象.

    Returns:
        Schematic: 提取出的 Schematic.
    """
    if isinstance(source, Tag):
        root = source
    elif isinstance(source, bytes | bytearray | memoryview):
        root = loads(source)
    else:
        root = load(source)

    schematic = Schematic.from_tag(root)
    ox, oy, oz = origin() if callable(origin) else origin

    logger.debug(
        "[Schematic] 导入 %dx%dx%d 个方块, 原点 (%s, %s, %s)",
        schematic.width,
        schematic.height,
        schematic.length,
        ox,
        oy,
        oz,
    )
    for (x, y, z), block_id, block_data in schematic.iter_blocks():
        place_block((ox + x, oy + y, oz + z), block_id, block_data)
    return schematic
