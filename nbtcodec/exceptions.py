"""NBT特定的异常类.

该模块为NBT库定义了异常层次结构.
"""


class NbtError(Exception):
    """所有 NBT 异常的基类."""

    pass


class NbtDecodeError(NbtError):
    """反序列化失败时抛出.

    Case:
        - 输入数据被截断.
        - 类型 ID 超出 0..12.
        - 长度字段非法 (如负数数组长度).
    """

    def __init__(
        self,
        msg: str,
        loc: list[str | int] | None = None,
    ) -> None:
        """初始化解码错误.

        Args:
            msg: 错误描述信息.
            loc: 错误发生的位置路径 (标签名称或列表索引).
        """
        super().__init__(msg)
        self.loc = loc or []

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.loc:
            # 格式化为 dotted path
            loc_str = ".".join(str(x) for x in self.loc)
            return f"{base_msg} (at {loc_str})"
        return base_msg


class NbtUnexpectedEofError(NbtDecodeError):
    """输入数据在结构中途耗尽时抛出."""

    pass


class NbtUnknownTagTypeError(NbtDecodeError, ValueError):
    """类型 ID 不在 0..12 范围内时抛出 (标签本身或列表的元素类型)."""

    def __init__(self, type_id: int, loc: list[str | int] | None = None) -> None:
        super().__init__(f"Unknown tag type: {type_id}", loc)
        self.type_id = type_id


class NbtDepthExceededError(NbtDecodeError):
    """容器嵌套深度超过配置的上限时抛出."""

    pass


class NbtEncodeError(NbtError):
    """序列化失败时抛出.

    Case:
        - 列表元素类型与声明的元素类型不一致.
        - 值超出对应 NBT 类型的范围 (如 `TagByte` 存了 300).
        - Compound 中出现 `TagEnd` 子节点.
    """

    pass


class NbtElementTypeMismatchError(NbtEncodeError, TypeError):
    """列表元素的类型与列表头声明的元素类型不一致时抛出."""

    pass


class NbtValueError(NbtEncodeError, ValueError):
    """值无效时抛出 (如超出范围, 长度超过长度字段上限)."""

    pass


class SchematicError(NbtError):
    """Schematic 结构检查失败时抛出."""

    pass


class NotASchematicError(SchematicError):
    """根标签不是名为 "Schematic" 的 Compound 时抛出."""

    pass


class MissingFieldError(SchematicError, KeyError):
    """缺少必需字段时抛出."""

    def __str__(self) -> str:
        # KeyError 默认会给消息加引号
        return str(self.args[0]) if self.args else ""


class WrongFieldTypeError(SchematicError, TypeError):
    """字段存在但类型不符合要求时抛出."""

    pass
