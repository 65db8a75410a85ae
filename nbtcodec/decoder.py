"""NBT解码器实现.

该模块提供用于零复制读取的`DataReader`, 读取文件对象的`StreamReader`,
以及把字节流解析为标签树的`TagDecoder`.
"""

import struct
from typing import IO, Any, cast

from .config import NbtConfig
from .const import (
    CONTAINER_TYPES,
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
from .decoder_stack import StackFrame
from .exceptions import (
    NbtDecodeError,
    NbtDepthExceededError,
    NbtUnexpectedEofError,
)
from .log import get_hexdump, logger
from .options import NbtOption
from .types import Tag, TagCompound, TagEnd, TagList, tag_class

# 预编译的结构体解包器 (NBT 固定为大端字节序)
_STRUCT_b = struct.Struct(">b")
_STRUCT_h = struct.Struct(">h")
_STRUCT_H = struct.Struct(">H")
_STRUCT_i = struct.Struct(">i")
_STRUCT_I = struct.Struct(">I")
_STRUCT_q = struct.Struct(">q")
_STRUCT_f = struct.Struct(">f")
_STRUCT_d = struct.Struct(">d")

# StreamReader 单次 read 的上限, 长度字段不可信时避免一次性分配
READ_CHUNK_SIZE = 64 * 1024


class DataReader:
    """NBT二进制数据的零复制读取器.

    包装memoryview以提供流式读取功能, 并记录当前读取位置.
    """

    __slots__ = ("_pos", "_view", "length")

    _view: memoryview
    _pos: int
    length: int

    def __init__(self, data: bytes | bytearray | memoryview):
        """初始化DataReader.

        Args:
            data: 要读取的二进制数据.
        """
        self._view = memoryview(data)
        self._pos = 0
        self.length = len(self._view)

    @property
    def position(self) -> int:
        """已消耗的字节数."""
        return self._pos

    @property
    def eof(self) -> bool:
        """检查是否到达流末尾."""
        return self._pos >= self.length

    def _unpack(self, st: struct.Struct) -> Any:
        end = self._pos + st.size
        if end > self.length:
            raise NbtUnexpectedEofError(
                f"Not enough data to read {st.size} bytes at offset {self._pos}"
            )
        val = st.unpack_from(self._view, self._pos)[0]
        self._pos = end
        return val

    def read_bytes(self, length: int) -> bytes:
        """读取字节序列.

        Raises:
            NbtUnexpectedEofError: 如果没有足够的数据可用.
        """
        if length < 0:
            raise NbtDecodeError(f"Cannot read negative bytes: {length}")

        if self._pos + length > self.length:
            raise NbtUnexpectedEofError(
                f"Not enough data to read {length} bytes at offset {self._pos}"
            )

        start = self._pos
        self._pos += length
        return self._view[start : self._pos].tobytes()

    def read_array(self, code: str, count: int) -> tuple[Any, ...]:
        """读取 `count` 个同宽度元素 (code 为 struct 格式字符).

        先按元素宽度检查剩余数据, 数据足够时才构建 `count` 个元素的解包器.
        """
        end = self._pos + count * struct.calcsize(f">{code}")
        if end > self.length:
            raise NbtUnexpectedEofError(
                f"Not enough data to read {count} array elements at offset {self._pos}"
            )
        values = struct.unpack_from(f">{count}{code}", self._view, self._pos)
        self._pos = end
        return values

    def read_u8(self) -> int:
        """读取无符号8位整数."""
        if self._pos >= self.length:
            raise NbtUnexpectedEofError(
                f"Not enough data to read u8 at offset {self._pos}"
            )
        val = self._view[self._pos]
        self._pos += 1
        return val

    def read_i8(self) -> int:
        """读取有符号1字节整数."""
        return cast(int, self._unpack(_STRUCT_b))

    def read_i16(self) -> int:
        """读取有符号2字节整数."""
        return cast(int, self._unpack(_STRUCT_h))

    def read_u16(self) -> int:
        """读取无符号2字节整数 (名称和字符串长度)."""
        return cast(int, self._unpack(_STRUCT_H))

    def read_i32(self) -> int:
        """读取有符号4字节整数."""
        return cast(int, self._unpack(_STRUCT_i))

    def read_u32(self) -> int:
        """读取无符号4字节整数 (列表长度)."""
        return cast(int, self._unpack(_STRUCT_I))

    def read_i64(self) -> int:
        """读取有符号8字节整数."""
        return cast(int, self._unpack(_STRUCT_q))

    def read_f32(self) -> float:
        """读取4字节浮点数."""
        return cast(float, self._unpack(_STRUCT_f))

    def read_f64(self) -> float:
        """读取8字节双精度浮点数."""
        return cast(float, self._unpack(_STRUCT_d))

    def hexdump(self, loc: list[str | int] | None = None) -> str | None:
        """当前位置周围数据的十六进制转储 (用于错误日志)."""
        return get_hexdump(self._view, self._pos, loc=loc)


class StreamReader(DataReader):
    """从二进制文件对象按需读取的读取器.

    只读取当前标签所需的字节, 不会越过标签末尾预读,
    因此同一个文件对象可以连续解码多个标签.
    """

    __slots__ = ("_fp", "_pending")

    def __init__(self, fp: IO[bytes]):
        """初始化StreamReader.

        Args:
            fp: 打开的二进制文件对象, 必须实现 `read(n)`.
        """
        super().__init__(b"")
        self._fp = fp
        self._pending = b""  # eof 检查时预取的字节
        self.length = -1

    @property
    def eof(self) -> bool:
        """检查文件对象是否已读尽."""
        if not self._pending:
            self._pending = self._fp.read(1) or b""
        return not self._pending

    def _read_exact(self, length: int) -> bytes:
        chunks = [self._pending]
        got = len(self._pending)
        self._pending = b""
        while got < length:
            chunk = self._fp.read(min(length - got, READ_CHUNK_SIZE))
            if not chunk:
                raise NbtUnexpectedEofError(
                    f"Not enough data to read {length} bytes at offset {self._pos}"
                )
            chunks.append(chunk)
            got += len(chunk)
        data = b"".join(chunks)
        if got > length:
            # 只有预取字节多于请求时才会发生 (length == 0)
            self._pending = data[length:]
            data = data[:length]
        self._pos += length
        return data

    def _unpack(self, st: struct.Struct) -> Any:
        return st.unpack(self._read_exact(st.size))[0]

    def read_bytes(self, length: int) -> bytes:
        """读取字节序列."""
        if length < 0:
            raise NbtDecodeError(f"Cannot read negative bytes: {length}")
        return self._read_exact(length)

    def read_array(self, code: str, count: int) -> tuple[Any, ...]:
        """读取 `count` 个同宽度元素."""
        data = self._read_exact(count * struct.calcsize(f">{code}"))
        return struct.unpack(f">{count}{code}", data)

    def read_u8(self) -> int:
        """读取无符号8位整数."""
        return self._read_exact(1)[0]

    def hexdump(self, loc: list[str | int] | None = None) -> str | None:
        """文件对象不保留已读数据, 无法提供转储."""
        return None


def as_reader(source: Any) -> DataReader:
    """把字节数据或二进制文件对象包装为读取器."""
    if isinstance(source, DataReader):
        return source
    if isinstance(source, bytes | bytearray | memoryview):
        return DataReader(source)
    if hasattr(source, "read"):
        return StreamReader(cast(IO[bytes], source))
    raise TypeError(f"Cannot read NBT data from {type(source).__name__}")


class TagDecoder:
    """NBT标签解码器.

    容器 (List / Compound) 使用显式栈迭代解析, 嵌套深度只受
    `NbtConfig.max_depth` 限制, 而不受 Python 递归深度限制.
    """

    __slots__ = (
        "_encoding",
        "_max_depth",
        "_reader",
    )

    _reader: DataReader
    _encoding: str
    _max_depth: int

    def __init__(self, reader: DataReader, config: NbtConfig | None = None):
        config = config or NbtConfig()
        self._reader = reader
        self._encoding = config.encoding
        self._max_depth = config.max_depth

    def decode(
        self, expected_type_id: int | None = None, suppress_log: bool = False
    ) -> Tag:
        """解码一个标签.

        Args:
            expected_type_id: 为 None 时读取类型字节和名称 (命名标签);
                否则按给定类型读取无名负载 (列表元素).
            suppress_log: 是否抑制开始/完成的调试日志 (错误日志总是记录).

        Returns:
            Tag: 解码得到的标签 (可能是 `TagEnd`).

        Raises:
            NbtUnexpectedEofError: 数据被截断.
            NbtUnknownTagTypeError: 类型 ID 超出 0..12.
            NbtDepthExceededError: 嵌套过深.
        """
        if not suppress_log:
            logger.debug("[TagDecoder] 开始解码 (位置 %d)", self._reader.position)

        try:
            tag = self._decode(expected_type_id)
        except NbtDecodeError as e:
            logger.error("[TagDecoder] 解码错误: %s", e)
            dump = self._reader.hexdump(e.loc)
            if dump is not None:
                logger.debug(dump)
            raise

        if not suppress_log:
            logger.debug(
                "[TagDecoder] 成功解码 %s (位置 %d)",
                tag.type_name,
                self._reader.position,
            )
        return tag

    def _decode(self, expected_type_id: int | None) -> Tag:
        if expected_type_id is None:
            type_id = self._reader.read_u8()
        else:
            type_id = expected_type_id
        cls = tag_class(type_id)

        # END 只消耗类型字节, 没有名称和负载
        if type_id == TAG_END:
            return TagEnd()

        name = self._read_string() if expected_type_id is None else ""

        if type_id in CONTAINER_TYPES:
            return self._decode_container(type_id, name)
        return cls(self._read_payload(type_id), name)  # type: ignore[call-arg]

    def _decode_container(self, type_id: int, name: str) -> Tag:
        """迭代读取容器标签."""
        reader = self._reader
        root = StackFrame(type_id, name, name or None)
        stack = [root]
        pending_key: Any = None

        try:
            self._open_frame(root)

            while True:
                frame = stack[-1]

                # --- 确定下一个子节点 ---
                if frame.type_id == TAG_COMPOUND:
                    child_type = reader.read_u8()
                    cls = tag_class(child_type)
                    finished = child_type == TAG_END
                    if not finished:
                        child_name = self._read_string()
                        pending_key = child_name
                else:
                    child_type = cast(int, frame.element_type)
                    cls = tag_class(child_type)
                    finished = frame.remaining == 0
                    if not finished:
                        child_name = ""
                        pending_key = len(frame.items)
                        frame.remaining -= 1

                # --- 容器结束: 出栈并挂到父容器 ---
                if finished:
                    stack.pop()
                    tag = self._build(frame)
                    if not stack:
                        return tag
                    stack[-1].items.append(tag)
                    continue

                # --- 子节点是容器: 压栈 ---
                if child_type in CONTAINER_TYPES:
                    if len(stack) >= self._max_depth:
                        raise NbtDepthExceededError(
                            f"Nesting depth exceeds limit {self._max_depth}"
                        )
                    child_frame = StackFrame(child_type, child_name, pending_key)
                    stack.append(child_frame)
                    pending_key = None
                    self._open_frame(child_frame)
                else:
                    frame.items.append(
                        cls(self._read_payload(child_type), child_name)  # type: ignore[call-arg]
                    )
                    pending_key = None

        except NbtDecodeError as e:
            if not e.loc:
                e.loc = [f.key for f in stack if f.key is not None]
                if pending_key is not None:
                    e.loc.append(pending_key)
            raise

    def _open_frame(self, frame: StackFrame) -> None:
        """读取容器头部 (仅 List 有头部)."""
        if frame.type_id != TAG_LIST:
            return
        element_type = self._reader.read_u8()
        tag_class(element_type)
        count = self._reader.read_u32()
        if element_type == TAG_END and count > 0:
            raise NbtDecodeError(
                f"List of TAG_End must be empty, got {count} elements"
            )
        frame.element_type = element_type
        frame.remaining = count

    def _build(self, frame: StackFrame) -> Tag:
        if frame.type_id == TAG_LIST:
            return TagList(cast(int, frame.element_type), tuple(frame.items), frame.name)
        return TagCompound(tuple(frame.items), frame.name)

    def _read_payload(self, type_id: int) -> Any:
        """读取非容器类型的负载."""
        reader = self._reader
        if type_id == TAG_BYTE:
            return reader.read_i8()
        if type_id == TAG_SHORT:
            return reader.read_i16()
        if type_id == TAG_INT:
            return reader.read_i32()
        if type_id == TAG_LONG:
            return reader.read_i64()
        if type_id == TAG_FLOAT:
            return reader.read_f32()
        if type_id == TAG_DOUBLE:
            return reader.read_f64()
        if type_id == TAG_BYTE_ARRAY:
            return reader.read_bytes(self._read_array_length())
        if type_id == TAG_STRING:
            return self._read_string()
        if type_id == TAG_INT_ARRAY:
            return reader.read_array("i", self._read_array_length())
        if type_id == TAG_LONG_ARRAY:
            return reader.read_array("q", self._read_array_length())

        raise NbtDecodeError(f"Unexpected type id in _read_payload: {type_id}")

    def _read_array_length(self) -> int:
        length = self._reader.read_i32()
        if length < 0:
            raise NbtDecodeError(f"Array length cannot be negative: {length}")
        return length

    def _read_string(self) -> str:
        """读取 u16 长度前缀的字符串 (名称和 TAG_String 负载)."""
        data = self._reader.read_bytes(self._reader.read_u16())
        try:
            return data.decode(self._encoding)
        except UnicodeDecodeError as e:
            raise NbtDecodeError(f"Invalid {self._encoding} string: {e}") from e


def decode_tag(
    source: Any,
    expected_type_id: int | None = None,
    *,
    option: NbtOption = NbtOption.NONE,
    max_depth: int | None = None,
) -> Tag:
    """从字节数据、文件对象或读取器解码一个标签.

    Args:
        source: `bytes` / `bytearray` / `memoryview`, 二进制文件对象或 `DataReader`.
        expected_type_id: 为 None 时按命名标签读取 (类型字节 + 名称);
            否则按给定类型读取无名负载.
        option: 解码选项.
        max_depth: 最大嵌套深度, 默认 512.

    Returns:
        Tag: 解码得到的标签.
    """
    if max_depth is None:
        config = NbtConfig.from_params(option)
    else:
        config = NbtConfig.from_params(option, max_depth)
    return TagDecoder(as_reader(source), config).decode(expected_type_id)
