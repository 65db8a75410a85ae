from typing import Any


class StackFrame:
    """解析器栈帧, 用于替代递归调用栈."""

    __slots__ = (
        "element_type",
        "items",
        "key",
        "name",
        "remaining",
        "type_id",
    )

    def __init__(
        self,
        type_id: int,
        name: str = "",
        key: Any = None,
    ):
        self.type_id = type_id  # TAG_LIST 或 TAG_COMPOUND
        self.name = name
        self.key = key  # 在父容器中的位置: Compound 子节点为名称, List 元素为索引
        self.items: list[Any] = []  # 已解码的子标签

        # 仅 List 使用: 元素类型和剩余未读元素数量
        self.element_type: int | None = None
        self.remaining = 0
