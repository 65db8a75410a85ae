"""测试 NBT 日志模块."""

import logging

import pytest

from nbtcodec import TagByte, TagCompound, TagInt, TagList, dumps, loads, loads_all
from nbtcodec.exceptions import NbtUnexpectedEofError
from nbtcodec.log import get_hexdump, logger


def test_logger_config() -> None:
    """验证 Logger 默认配置不包含 Handler 且名称正确."""
    assert logger.name == "nbtcodec"
    assert not logger.handlers
    assert logger.level == logging.NOTSET


def test_get_hexdump_basic() -> None:
    """get_hexdump() 应正确格式化十六进制数据."""
    data = b"\x0a\x00\x01"
    dump = get_hexdump(data, pos=1, window=1)

    assert "0a [00]" in dump.lower()


def test_get_hexdump_boundaries() -> None:
    """get_hexdump() 应正确处理数据起始和结束边界."""
    data = b"\xaa\xbb\xcc"

    dump_start = get_hexdump(data, pos=0, window=1)
    assert "aa" in dump_start.lower()

    dump_end = get_hexdump(data, pos=2, window=1)
    assert "bb [cc]" in dump_end.lower()


def test_get_hexdump_empty() -> None:
    """get_hexdump() 应能处理空字节输入而不报错."""
    dump = get_hexdump(b"", pos=0)
    assert "位置" in dump


def test_get_hexdump_out_of_bounds_pos() -> None:
    """位置超出数据末尾时应仍然显示末尾的数据."""
    dump = get_hexdump(b"\x01\x02", pos=10, window=4)

    assert "01 02" in dump


def test_decode_error_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """解码失败时应记录错误日志和十六进制转储."""
    data = dumps(TagCompound((TagByte(1, "a"),), "root"))[:-2]

    with caplog.at_level(logging.DEBUG, logger="nbtcodec"):
        with pytest.raises(NbtUnexpectedEofError):
            loads(data)

    messages = [r.getMessage() for r in caplog.records]
    assert any("解码错误" in m for m in messages)
    assert any("位置" in m for m in messages)


def test_encode_error_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """编码失败时应记录错误日志."""
    with caplog.at_level(logging.ERROR, logger="nbtcodec"):
        with pytest.raises(ValueError):
            dumps(TagByte(300, "b"))

    assert any("Encoding failed" in r.getMessage() for r in caplog.records)


def test_get_hexdump_tag_path() -> None:
    """get_hexdump() 应显示出错标签的路径, 未提供路径时显示根."""
    dump = get_hexdump(b"\x01\x02", pos=1, loc=["root", "items", 0])

    assert dump.startswith("标签 root.items.0 位置 1")
    assert get_hexdump(b"\x01", pos=0).startswith("标签 <root>")


def test_decode_error_hexdump_has_path(caplog: pytest.LogCaptureFixture) -> None:
    """解码错误的十六进制转储应包含出错标签的路径."""
    data = dumps(TagCompound((TagList(3, (TagInt(1), TagInt(2)), "items"),), "root"))

    with caplog.at_level(logging.DEBUG, logger="nbtcodec"):
        with pytest.raises(NbtUnexpectedEofError):
            loads(data[:-3])

    assert any("标签 root.items.1" in r.getMessage() for r in caplog.records)


def test_loads_all_error_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """loads_all() 失败时同样应记录错误日志和十六进制转储."""
    data = dumps(TagByte(1, "a")) + dumps(TagByte(2, "b"))[:-1]

    with caplog.at_level(logging.DEBUG, logger="nbtcodec"):
        with pytest.raises(NbtUnexpectedEofError):
            loads_all(data)

    messages = [r.getMessage() for r in caplog.records]
    assert any("解码错误" in m for m in messages)
    assert any("位置" in m for m in messages)
    assert not any("开始解码" in m for m in messages)
