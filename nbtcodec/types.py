"""NBT数据类型模块.

本模块定义了NBT格式的13种标签类型 (Tag Model), 以及类型ID与标签类之间
唯一的双向映射表.

所有标签都是不可变的 (frozen dataclass). 序列类负载在构造时被规范化为
`tuple` / `bytes`, 因此解码得到的树与手工构建的树可以直接用 `==` 比较.
"""

import abc
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from .const import (
    TAG_BYTE,
    TAG_BYTE_ARRAY,
    TAG_COMPOUND,
    TAG_DOUBLE,
    TAG_END,
    TAG_FLOAT,
    TAG_INT,
    TAG_INT_ARRAY,
    TAG_LIST,
    TAG_LONG,
    TAG_LONG_ARRAY,
    TAG_SHORT,
    TAG_STRING,
)
from .exceptions import NbtUnknownTagTypeError


class Tag(abc.ABC):
    """NBT 标签的基类.

    具体的标签类型是封闭的 13 种 (`TagEnd` ... `TagLongArray`),
    消费方应通过 `type_id` 分派, 而不是继承此类扩展新类型。
    """

    type_id: ClassVar[int]
    type_name: ClassVar[str]
    name: str


@dataclass(frozen=True)
class TagEnd(Tag):
    """结束标记 (Type ID 0).

    只作为 Compound 的终止符和空列表的元素类型出现, 没有名称和负载。
    """

    type_id: ClassVar[int] = TAG_END
    type_name: ClassVar[str] = "TAG_End"
    name: ClassVar[str] = ""


@dataclass(frozen=True)
class TagByte(Tag):
    """有符号 1 字节整数 (Type ID 1). 范围: -128 到 127."""

    type_id: ClassVar[int] = TAG_BYTE
    type_name: ClassVar[str] = "TAG_Byte"

    value: int
    name: str = ""


@dataclass(frozen=True)
class TagShort(Tag):
    """有符号 2 字节整数 (Type ID 2). 范围: -32768 到 32767."""

    type_id: ClassVar[int] = TAG_SHORT
    type_name: ClassVar[str] = "TAG_Short"

    value: int
    name: str = ""


@dataclass(frozen=True)
class TagInt(Tag):
    """有符号 4 字节整数 (Type ID 3)."""

    type_id: ClassVar[int] = TAG_INT
    type_name: ClassVar[str] = "TAG_Int"

    value: int
    name: str = ""


@dataclass(frozen=True)
class TagLong(Tag):
    """有符号 8 字节整数 (Type ID 4)."""

    type_id: ClassVar[int] = TAG_LONG
    type_name: ClassVar[str] = "TAG_Long"

    value: int
    name: str = ""


@dataclass(frozen=True)
class TagFloat(Tag):
    """单精度浮点数 (Type ID 5).

    在 Python 中以 `float` 保存, 编码时按 4 字节 IEEE 754 写出,
    因此只有单精度可表示的值才能无损往返。
    """

    type_id: ClassVar[int] = TAG_FLOAT
    type_name: ClassVar[str] = "TAG_Float"

    value: float
    name: str = ""


@dataclass(frozen=True)
class TagDouble(Tag):
    """双精度浮点数 (Type ID 6)."""

    type_id: ClassVar[int] = TAG_DOUBLE
    type_name: ClassVar[str] = "TAG_Double"

    value: float
    name: str = ""


@dataclass(frozen=True)
class TagByteArray(Tag):
    """字节数组 (Type ID 7).

    元素为无符号字节, 负载以 `bytes` 保存。
    """

    type_id: ClassVar[int] = TAG_BYTE_ARRAY
    type_name: ClassVar[str] = "TAG_Byte_Array"

    value: bytes = b""
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes):
            object.__setattr__(self, "value", bytes(self.value))

    def __len__(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class TagString(Tag):
    """字符串 (Type ID 8).

    线上格式为 u16 长度前缀 + 每个字符一个字节 (Latin-1)。
    """

    type_id: ClassVar[int] = TAG_STRING
    type_name: ClassVar[str] = "TAG_String"

    value: str = ""
    name: str = ""


@dataclass(frozen=True)
class TagList(Tag):
    """同质列表 (Type ID 9).

    `element_type` 即使在空列表中也会保留, 所有元素都必须是该类型 (在编码时检查)。
    元素没有名称。
    """

    type_id: ClassVar[int] = TAG_LIST
    type_name: ClassVar[str] = "TAG_List"

    element_type: int
    items: tuple[Tag, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        # 校验元素类型 ID
        tag_class(self.element_type)
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Tag:
        return self.items[index]


@dataclass(frozen=True)
class TagCompound(Tag):
    """异构有序复合标签 (Type ID 10).

    子标签各自带有名称. 线上以 `TagEnd` 结束, 终止符不保存在 `items` 中。
    """

    type_id: ClassVar[int] = TAG_COMPOUND
    type_name: ClassVar[str] = "TAG_Compound"

    items: tuple[Tag, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.items)

    def __getitem__(self, name: str) -> Tag:
        child = self.get(name)
        if child is None:
            raise KeyError(name)
        return child

    def __contains__(self, name: object) -> bool:
        return self.get(name) is not None  # type: ignore[arg-type]

    def get(self, name: str, default: Tag | None = None) -> Tag | None:
        """按名称线性查找第一个直接子标签."""
        for child in self.items:
            if child.name == name:
                return child
        return default

    def keys(self) -> list[str]:
        """返回所有直接子标签的名称 (保持读取顺序)."""
        return [child.name for child in self.items]


@dataclass(frozen=True)
class TagIntArray(Tag):
    """4 字节有符号整数数组 (Type ID 11)."""

    type_id: ClassVar[int] = TAG_INT_ARRAY
    type_name: ClassVar[str] = "TAG_Int_Array"

    value: tuple[int, ...] = field(default=())
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, tuple):
            object.__setattr__(self, "value", tuple(self.value))

    def __len__(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class TagLongArray(Tag):
    """8 字节有符号整数数组 (Type ID 12)."""

    type_id: ClassVar[int] = TAG_LONG_ARRAY
    type_name: ClassVar[str] = "TAG_Long_Array"

    value: tuple[int, ...] = field(default=())
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, tuple):
            object.__setattr__(self, "value", tuple(self.value))

    def __len__(self) -> int:
        return len(self.value)


# 类型ID <-> 标签类 的唯一映射表 (只读)
TAG_CLASSES: Mapping[int, type[Tag]] = MappingProxyType(
    {
        cls.type_id: cls
        for cls in (
            TagEnd,
            TagByte,
            TagShort,
            TagInt,
            TagLong,
            TagFloat,
            TagDouble,
            TagByteArray,
            TagString,
            TagList,
            TagCompound,
            TagIntArray,
            TagLongArray,
        )
    }
)
TAG_IDS: Mapping[type[Tag], int] = MappingProxyType(
    {cls: type_id for type_id, cls in TAG_CLASSES.items()}
)


def tag_class(type_id: int) -> type[Tag]:
    """根据类型 ID 获取标签类.

    Raises:
        NbtUnknownTagTypeError: 类型 ID 不在 0..12 范围内.
    """
    try:
        return TAG_CLASSES[type_id]
    except (KeyError, TypeError):
        raise NbtUnknownTagTypeError(type_id) from None


def tag_type_name(type_id: int) -> str:
    """根据类型 ID 获取类型名称 (如 'TAG_Byte')."""
    return tag_class(type_id).type_name


def tag_type_id(tag: Any) -> int:
    """获取标签实例或标签类的类型 ID."""
    cls = tag if isinstance(tag, type) else type(tag)
    try:
        return TAG_IDS[cls]
    except KeyError:
        raise TypeError(f"Not an NBT tag: {cls.__name__}") from None
