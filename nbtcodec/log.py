"""NBT日志记录器."""

import logging

logger = logging.getLogger("nbtcodec")


def get_hexdump(
    data: bytes | bytearray | memoryview,
    pos: int,
    window: int = 16,
    loc: list[str | int] | None = None,
) -> str:
    """获取指定位置周围数据的十六进制转储.

    出错位置的字节用方括号标出; 位置超出数据末尾时不标记.

    Args:
        data: 完整的输入数据.
        pos: 出错时的读取位置.
        window: 位置前后各显示的字节数.
        loc: 出错标签在树中的路径 (标签名称或列表索引).

    Returns:
        str: 多行文本, 第一行为标签路径和显示范围.
    """
    start = max(0, min(pos, len(data)) - window)
    end = min(len(data), pos + window)
    chunk = bytes(data[start:end])

    hex_str = " ".join(
        f"[{b:02x}]" if start + i == pos else f"{b:02x}" for i, b in enumerate(chunk)
    )
    path = ".".join(str(x) for x in loc) if loc else "<root>"

    return f"标签 {path} 位置 {pos} 的上下文 (显示 {start}-{end}):\n{hex_str}"
