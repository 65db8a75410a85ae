"""NBT API模块.

提供用于 NBT 序列化和反序列化的高级接口 `dumps`, `loads`, `dump`, `load`,
以及连续读取多个顶层标签的 `loads_all`, `load_all`.
"""

from typing import IO

from .config import NbtConfig
from .decoder import DataReader, StreamReader, TagDecoder
from .encoder import TagEncoder
from .log import logger
from .options import NbtOption
from .types import Tag


def dumps(
    tag: Tag,
    named: bool = True,
    option: NbtOption = NbtOption.NONE,
) -> bytes:
    """序列化标签为 NBT 字节数据.

    Args:
        tag: 要序列化的标签 (通常是根 `TagCompound`).
        named: 是否写出类型字节和名称. 列表元素形式的无名负载使用 False.
        option: 序列化选项 (如 `NbtOption.UTF8_STRINGS`).

    Returns:
        bytes: 序列化后的二进制数据.

    Examples:
        >>> from nbtcodec import TagShort, dumps
        >>> dumps(TagShort(1), named=False).hex()
        '0001'
    """
    config = NbtConfig.from_params(option=option)
    return TagEncoder(config).encode(tag, named)


def dump(
    tag: Tag,
    fp: IO[bytes],
    named: bool = True,
    option: NbtOption = NbtOption.NONE,
) -> None:
    """序列化标签并写入文件.

    Args:
        tag: 要序列化的标签.
        fp: 文件类对象, 必须实现 `write(bytes)` 方法.
        named: 是否写出类型字节和名称.
        option: 序列化选项.
    """
    fp.write(dumps(tag, named=named, option=option))


def loads(
    data: bytes | bytearray | memoryview,
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> Tag:
    """反序列化一个命名的顶层标签.

    只读取第一个标签, 之后的数据被忽略; 需要读取全部标签时使用 `loads_all`.

    Args:
        data: 输入的二进制数据 (已解压).
        option: 反序列化选项.
        max_depth: 最大嵌套深度 (默认 512).

    Returns:
        Tag: 解码得到的根标签.

    Raises:
        NbtUnexpectedEofError: 数据被截断.
        NbtUnknownTagTypeError: 出现未知类型 ID.
        NbtDepthExceededError: 嵌套过深.
    """
    config = _config(option, max_depth)
    return TagDecoder(DataReader(data), config).decode()


def load(
    fp: IO[bytes],
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> Tag:
    """从文件读取并反序列化一个顶层标签.

    只消耗该标签本身的字节, 文件位置停在标签末尾.

    Args:
        fp: 打开的二进制文件对象.
        option: 反序列化选项.
        max_depth: 最大嵌套深度.

    Returns:
        Tag: 解码得到的根标签.
    """
    config = _config(option, max_depth)
    return TagDecoder(StreamReader(fp), config).decode()


def loads_all(
    data: bytes | bytearray | memoryview,
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> list[Tag]:
    """连续解码数据中的所有顶层标签, 直到数据耗尽."""
    return _decode_all(DataReader(data), _config(option, max_depth))


def load_all(
    fp: IO[bytes],
    option: NbtOption = NbtOption.NONE,
    *,
    max_depth: int | None = None,
) -> list[Tag]:
    """连续解码文件中的所有顶层标签, 直到文件读尽."""
    return _decode_all(StreamReader(fp), _config(option, max_depth))


def _decode_all(reader: DataReader, config: NbtConfig) -> list[Tag]:
    decoder = TagDecoder(reader, config)
    tags: list[Tag] = []
    while not reader.eof:
        tags.append(decoder.decode(suppress_log=True))
    logger.debug("[TagDecoder] 成功解码 %d 个顶层标签", len(tags))
    return tags


def _config(option: NbtOption, max_depth: int | None) -> NbtConfig:
    if max_depth is None:
        return NbtConfig.from_params(option=option)
    return NbtConfig.from_params(option=option, max_depth=max_depth)
