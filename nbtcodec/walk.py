"""NBT标签树遍历.

提供通用的先序遍历 (`visit` / `iter_tags`), 按名称查找直接子节点,
以及把标签树渲染为文本的纯函数 `format_tag`.
"""

from collections.abc import Callable, Iterator
from typing import Any

from .types import (
    Tag,
    TagByteArray,
    TagCompound,
    TagEnd,
    TagIntArray,
    TagList,
    TagLongArray,
    tag_type_name,
)


def iter_tags(tag: Tag, depth: int = 0) -> Iterator[tuple[int, Tag]]:
    """先序遍历标签树, 产出 (深度, 标签).

    使用显式栈实现, 不受 Python 递归深度限制.
    """
    stack: list[tuple[int, Tag]] = [(depth, tag)]
    while stack:
        current_depth, current = stack.pop()
        yield current_depth, current
        if isinstance(current, TagList | TagCompound):
            # 逆序压栈以保持子节点的读取顺序
            stack.extend((current_depth + 1, child) for child in reversed(current.items))


def visit(tag: Tag, callback: Callable[[Tag, int], Any], depth: int = 0) -> None:
    """对树中每个标签按先序调用 `callback(tag, depth)`."""
    for current_depth, current in iter_tags(tag, depth):
        callback(current, current_depth)


def find_child(compound: TagCompound, name: str) -> Tag | None:
    """线性扫描 Compound 的直接子节点, 返回第一个名称匹配的标签."""
    return compound.get(name)


def _format_line(tag: Tag) -> str:
    if isinstance(tag, TagEnd):
        return tag.type_name
    if isinstance(tag, TagList):
        return (
            f'{tag.type_name} : {tag_type_name(tag.element_type)} : "{tag.name}"'
            f" ({len(tag.items)} entries)"
        )
    if isinstance(tag, TagCompound):
        return f'{tag.type_name} : "{tag.name}" ({len(tag.items)} entries)'
    if isinstance(tag, TagByteArray | TagIntArray | TagLongArray):
        return f'{tag.type_name} : "{tag.name}" = {list(tag.value)}'
    return f'{tag.type_name} : "{tag.name}" = {tag.value}'  # type: ignore[attr-defined]


def format_tag(tag: Tag, indent: str = "\t") -> str:
    r"""把标签树渲染为多行文本.

    每个标签一行, 缩进为 `indent * depth`; List/Compound 附带子节点数量.

    Examples:
        >>> print(format_tag(TagCompound((TagShort(3, "Width"),), "Schematic")))
        TAG_Compound : "Schematic" (1 entries)
        \tTAG_Short : "Width" = 3
    """
    return "\n".join(
        f"{indent * depth}{_format_line(current)}" for depth, current in iter_tags(tag)
    )


def tag_to_python(tag: Tag) -> Any:
    """把标签树转换为普通 Python 对象 (可直接 JSON 序列化).

    - Compound -> dict (同名子节点后者覆盖前者)
    - List -> list
    - 数组 -> list[int]
    - 标量/字符串 -> 原值
    - End -> None

    使用显式栈实现, 与 `iter_tags` 一样不受 Python 递归深度限制.
    """
    result: list[Any] = []
    # 栈元素: (标签, 父容器, 在父容器中的键); 根标签的键为 None
    stack: list[tuple[Tag, Any, Any]] = [(tag, result, None)]
    while stack:
        current, parent, key = stack.pop()
        value: Any
        if isinstance(current, TagCompound):
            value = {}
            stack.extend((child, value, child.name) for child in reversed(current.items))
        elif isinstance(current, TagList):
            value = [None] * len(current.items)
            stack.extend(
                (current.items[i], value, i) for i in reversed(range(len(current.items)))
            )
        elif isinstance(current, TagByteArray | TagIntArray | TagLongArray):
            value = list(current.value)
        elif isinstance(current, TagEnd):
            value = None
        else:
            value = current.value  # type: ignore[attr-defined]

        if key is None:
            parent.append(value)
        else:
            parent[key] = value
    return result[0]
