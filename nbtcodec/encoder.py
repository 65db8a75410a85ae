"""NBT编码器实现.

该模块提供用于高效缓冲管理的`DataWriter`和
用于将标签树序列化为NBT字节的`TagEncoder`.
"""

import struct
from collections.abc import Iterator
from typing import IO, Any

from .config import NbtConfig
from .const import (
    MAX_ARRAY_LENGTH,
    MAX_LIST_LENGTH,
    MAX_NAME_LENGTH,
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
from .exceptions import (
    NbtElementTypeMismatchError,
    NbtEncodeError,
    NbtValueError,
)
from .log import logger
from .options import NbtOption
from .types import Tag, tag_type_name

# 预编译的结构体打包器 (NBT 固定为大端字节序)
_STRUCT_B = struct.Struct(">B")
_STRUCT_b = struct.Struct(">b")
_STRUCT_h = struct.Struct(">h")
_STRUCT_H = struct.Struct(">H")
_STRUCT_i = struct.Struct(">i")
_STRUCT_I = struct.Struct(">I")
_STRUCT_q = struct.Struct(">q")
_STRUCT_f = struct.Struct(">f")
_STRUCT_d = struct.Struct(">d")

# 子节点迭代结束标记
_DONE = object()


class DataWriter:
    """NBT二进制数据的高效写入器."""

    __slots__ = ("_buffer",)

    _buffer: bytearray

    def __init__(self) -> None:
        self._buffer = bytearray()

    def get_bytes(self) -> bytes:
        """返回累积的字节."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def _pack(self, st: struct.Struct, value: Any) -> None:
        try:
            self._buffer.extend(st.pack(value))
        except (struct.error, OverflowError) as e:
            raise NbtValueError(
                f"Value {value!r} cannot be packed as '{st.format}': {e}"
            ) from e

    def write_u8(self, value: int) -> None:
        """写入无符号8位整数 (类型 ID)."""
        self._pack(_STRUCT_B, value)

    def write_i8(self, value: int) -> None:
        """写入有符号1字节整数."""
        self._pack(_STRUCT_b, value)

    def write_i16(self, value: int) -> None:
        """写入有符号2字节整数."""
        self._pack(_STRUCT_h, value)

    def write_u16(self, value: int) -> None:
        """写入无符号2字节整数."""
        self._pack(_STRUCT_H, value)

    def write_i32(self, value: int) -> None:
        """写入有符号4字节整数."""
        self._pack(_STRUCT_i, value)

    def write_u32(self, value: int) -> None:
        """写入无符号4字节整数."""
        self._pack(_STRUCT_I, value)

    def write_i64(self, value: int) -> None:
        """写入有符号8字节整数."""
        self._pack(_STRUCT_q, value)

    def write_f32(self, value: float) -> None:
        """写入浮点数."""
        self._pack(_STRUCT_f, value)

    def write_f64(self, value: float) -> None:
        """写入双精度浮点数."""
        self._pack(_STRUCT_d, value)

    def write_bytes(self, value: bytes | bytearray | memoryview) -> None:
        """直接写入原始字节."""
        self._buffer.extend(value)

    def write_array(self, code: str, values: tuple[int, ...]) -> None:
        """写入 i32 长度前缀的同宽度元素数组."""
        if len(values) > MAX_ARRAY_LENGTH:
            raise NbtValueError(f"Array too long: {len(values)}")
        self.write_i32(len(values))
        self._pack_many(code, values)

    def _pack_many(self, code: str, values: tuple[int, ...]) -> None:
        try:
            self._buffer.extend(struct.pack(f">{len(values)}{code}", *values))
        except struct.error as e:
            raise NbtValueError(f"Array element out of range for '{code}': {e}") from e

    def write_string(self, value: str, encoding: str) -> None:
        """写入 u16 长度前缀的字符串."""
        try:
            data = value.encode(encoding)
        except UnicodeEncodeError as e:
            raise NbtValueError(f"String not encodable as {encoding}: {e}") from e
        except AttributeError as e:
            raise NbtValueError(f"Expected str, got {type(value).__name__}") from e
        if len(data) > MAX_NAME_LENGTH:
            raise NbtValueError(f"String too long: {len(data)}")
        self.write_u16(len(data))
        self._buffer.extend(data)


class TagEncoder:
    """NBT标签编码器.

    与 `TagDecoder` 对称, 使用显式栈迭代写出容器.
    """

    __slots__ = (
        "_encoding",
        "_writer",
    )

    _writer: DataWriter
    _encoding: str

    def __init__(self, config: NbtConfig | None = None):
        config = config or NbtConfig()
        self._encoding = config.encoding
        self._writer = DataWriter()

    def encode(self, tag: Tag, named: bool = True) -> bytes:
        """编码入口.

        Args:
            tag: 要编码的标签.
            named: 是否写出类型字节和名称.

        Returns:
            bytes: 编码结果.

        Raises:
            NbtElementTypeMismatchError: 列表元素类型与声明不一致.
            NbtValueError: 值超出范围.
            NbtEncodeError: 其他结构错误.
        """
        self._writer = DataWriter()
        try:
            self._encode(tag, named)
            return self._writer.get_bytes()
        except Exception as e:
            logger.error("Encoding failed: %s", e)
            raise

    def _encode(self, tag: Tag, named: bool) -> None:
        # 栈帧: (子节点迭代器, 列表元素类型; Compound 为 None)
        stack: list[tuple[Iterator[Tag], int | None]] = []
        self._write_tag(self._check_tag(tag), named, stack)

        while stack:
            items, element_type = stack[-1]
            child = next(items, _DONE)

            if child is _DONE:
                stack.pop()
                if element_type is None:
                    # Compound 终止符
                    self._writer.write_u8(TAG_END)
                continue

            child = self._check_tag(child)
            if element_type is None:
                if child.type_id == TAG_END:
                    raise NbtEncodeError("TAG_End cannot be a compound child")
                self._write_tag(child, True, stack)
            else:
                if child.type_id != element_type:
                    raise NbtElementTypeMismatchError(
                        f"List declared as {tag_type_name(element_type)} "
                        f"contains {child.type_name}"
                    )
                self._write_tag(child, False, stack)

    @staticmethod
    def _check_tag(value: Any) -> Tag:
        if not isinstance(value, Tag):
            raise NbtEncodeError(f"Cannot encode type: {type(value)}")
        return value

    def _write_tag(
        self,
        tag: Tag,
        named: bool,
        stack: list[tuple[Iterator[Tag], int | None]],
    ) -> None:
        """写出标签头部和负载; 容器的子节点压栈稍后写出."""
        writer = self._writer
        type_id = tag.type_id

        if named:
            writer.write_u8(type_id)
            if type_id != TAG_END:
                writer.write_string(tag.name, self._encoding)

        if type_id == TAG_END:
            return

        if type_id == TAG_LIST:
            element_type: int = tag.element_type  # type: ignore[attr-defined]
            items: tuple[Tag, ...] = tag.items  # type: ignore[attr-defined]
            if element_type == TAG_END and len(items) > 0:
                raise NbtElementTypeMismatchError(
                    "A list with element type TAG_End must be empty"
                )
            if len(items) > MAX_LIST_LENGTH:
                raise NbtValueError(f"List too long: {len(items)}")
            writer.write_u8(element_type)
            writer.write_u32(len(items))
            stack.append((iter(items), element_type))
        elif type_id == TAG_COMPOUND:
            stack.append((iter(tag.items), None))  # type: ignore[attr-defined]
        else:
            self._write_payload(type_id, tag.value)  # type: ignore[attr-defined]

    def _write_payload(self, type_id: int, value: Any) -> None:
        """写出非容器类型的负载."""
        writer = self._writer
        if type_id == TAG_BYTE:
            writer.write_i8(value)
        elif type_id == TAG_SHORT:
            writer.write_i16(value)
        elif type_id == TAG_INT:
            writer.write_i32(value)
        elif type_id == TAG_LONG:
            writer.write_i64(value)
        elif type_id == TAG_FLOAT:
            writer.write_f32(value)
        elif type_id == TAG_DOUBLE:
            writer.write_f64(value)
        elif type_id == TAG_BYTE_ARRAY:
            if len(value) > MAX_ARRAY_LENGTH:
                raise NbtValueError(f"Array too long: {len(value)}")
            writer.write_i32(len(value))
            writer.write_bytes(value)
        elif type_id == TAG_STRING:
            writer.write_string(value, self._encoding)
        elif type_id == TAG_INT_ARRAY:
            writer.write_array("i", value)
        elif type_id == TAG_LONG_ARRAY:
            writer.write_array("q", value)
        else:
            raise NbtEncodeError(f"Unexpected type id in _write_payload: {type_id}")


def encode_tag(
    tag: Tag,
    sink: DataWriter | IO[bytes],
    named: bool = True,
    *,
    option: NbtOption = NbtOption.NONE,
) -> None:
    """把标签编码后写入 `DataWriter` 或二进制文件对象.

    只有整棵树编码成功后才写入 sink, 失败时 sink 保持不变.

    Args:
        tag: 要编码的标签.
        sink: 目标写入器或文件对象 (必须实现 `write(bytes)`).
        named: 是否写出类型字节和名称.
        option: 编码选项.
    """
    data = TagEncoder(NbtConfig.from_params(option)).encode(tag, named)
    if isinstance(sink, DataWriter):
        sink.write_bytes(data)
    else:
        sink.write(data)
