"""测试 NBT 命令行工具."""

import json
import re
from pathlib import Path

import pytest
from click.testing import CliRunner

from nbtcodec import (
    TAG_BYTE,
    TagByte,
    TagByteArray,
    TagCompound,
    TagList,
    TagShort,
    TagString,
    dumps,
)

try:
    from nbtcodec.__main__ import cli
except ImportError:
    pytest.skip("click not installed", allow_module_level=True)


def sample_hex() -> str:
    """CLI 测试用的标签树 (十六进制)."""
    tree = TagCompound(
        (
            TagShort(3, "Width"),
            TagList(TAG_BYTE, (TagByte(1), TagByte(2)), "bytes"),
            TagString("hi", "greeting"),
        ),
        "root",
    )
    return dumps(tree).hex()


@pytest.fixture
def runner() -> CliRunner:
    """提供 Click CLI 测试运行器.

    Returns:
        CliRunner 实例.
    """
    return CliRunner()


def strip_ansi(text: str) -> str:
    """去除 ANSI 转义序列."""
    ansi_escape = re.compile(r"\x1B(?:[@-Z\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


# --- 基础 CLI 功能测试 ---


def test_cli_help(runner: CliRunner) -> None:
    """--help 选项应显示帮助信息和子命令."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "dump" in result.output
    assert "schematic" in result.output


def test_cli_missing_input(runner: CliRunner) -> None:
    """未提供输入参数时应报错并提示用法."""
    result = runner.invoke(cli, ["dump"])

    assert result.exit_code != 0
    assert "必须指定" in result.output


def test_cli_mutual_exclusion(runner: CliRunner) -> None:
    """同时提供参数和文件时应报错."""
    with runner.isolated_filesystem():
        Path("test.txt").write_text("00", encoding="utf-8")

        result = runner.invoke(cli, ["dump", "00", "-f", "test.txt"])

        assert result.exit_code != 0
        assert "不能同时指定" in result.output


def test_cli_dump_text(runner: CliRunner) -> None:
    """默认以文本格式输出标签树."""
    result = runner.invoke(cli, ["dump", sample_hex()])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == 'TAG_Compound : "root" (3 entries)'
    assert '\tTAG_Short : "Width" = 3' in lines
    assert '\tTAG_List : TAG_Byte : "bytes" (2 entries)' in lines
    assert '\t\tTAG_Byte : "" = 2' in lines


def test_cli_dump_hex_file(runner: CliRunner) -> None:
    """应能从十六进制文本文件读取数据."""
    with runner.isolated_filesystem():
        Path("data.txt").write_text(sample_hex(), encoding="utf-8")

        result = runner.invoke(cli, ["dump", "-f", "data.txt"])

        assert result.exit_code == 0
        assert '"Width" = 3' in result.output


def test_cli_dump_binary_file(runner: CliRunner) -> None:
    """非十六进制内容的文件应按二进制读取."""
    with runner.isolated_filesystem():
        Path("data.nbt").write_bytes(bytes.fromhex(sample_hex()))

        result = runner.invoke(cli, ["dump", "-f", "data.nbt"])

        assert result.exit_code == 0
        assert '"greeting" = hi' in result.output


def test_cli_dump_multiple_tags(runner: CliRunner) -> None:
    """数据中连续的多个顶层标签都应被输出."""
    data = (dumps(TagByte(1, "a")) + dumps(TagByte(2, "b"))).hex()

    result = runner.invoke(cli, ["dump", data])

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        'TAG_Byte : "a" = 1',
        'TAG_Byte : "b" = 2',
    ]


def test_cli_output_file(runner: CliRunner) -> None:
    """应能将输出保存到指定文件."""
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["dump", sample_hex(), "-o", "out.txt"])

        assert result.exit_code == 0
        content = Path("out.txt").read_text(encoding="utf-8")
        assert '"Width" = 3' in content


def test_cli_format_json(runner: CliRunner) -> None:
    """--format json 选项应输出合法的 JSON 数据."""
    result = runner.invoke(cli, ["dump", sample_hex(), "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(strip_ansi(result.output))
    assert data == {"Width": 3, "bytes": [1, 2], "greeting": "hi"}


def test_cli_format_tree(runner: CliRunner) -> None:
    """--format tree 选项应使用 Rich 树显示标签."""
    result = runner.invoke(cli, ["dump", sample_hex(), "--format", "tree"])

    assert result.exit_code == 0
    clean_output = strip_ansi(result.output)
    assert "NBT Root" in clean_output
    assert 'TAG_Compound "root" (3 entries)' in clean_output
    assert 'TAG_Short "Width" 3' in clean_output
    assert "TAG_String \"greeting\" 'hi'" in clean_output


def test_cli_utf8_option(runner: CliRunner) -> None:
    """--utf8 选项下字符串按 UTF-8 解码."""
    data = "0800016e0002c3a9"

    default = runner.invoke(cli, ["dump", data])
    utf8 = runner.invoke(cli, ["dump", data, "--utf8"])

    assert '"n" = Ã©' in default.output
    assert '"n" = é' in utf8.output


def test_cli_invalid_hex(runner: CliRunner) -> None:
    """提供无效的十六进制字符串时应报错."""
    result = runner.invoke(cli, ["dump", "zz"])

    assert result.exit_code != 0
    assert "无效的十六进制格式" in result.output


def test_cli_decode_error(runner: CliRunner) -> None:
    """解码失败时应优雅退出并显示错误信息."""
    result = runner.invoke(cli, ["dump", "0a0000"])

    assert result.exit_code != 0
    assert "解码失败" in result.output


def test_cli_unknown_type(runner: CliRunner) -> None:
    """未知的类型 ID 应在错误信息中显示."""
    result = runner.invoke(cli, ["dump", "0d"])

    assert result.exit_code != 0
    assert "Unknown tag type: 13" in result.output


def test_cli_verbose_output(runner: CliRunner) -> None:
    """-v 选项应在出错时显示详细堆栈信息."""
    result = runner.invoke(cli, ["dump", "0a0000", "-v"])

    assert result.exit_code != 0
    assert "Traceback" in result.output


# --- schematic 子命令 ---


def test_cli_schematic(runner: CliRunner) -> None:
    """schematic 子命令应输出每个方块的放置位置."""
    tree = TagCompound(
        (
            TagShort(2, "Width"),
            TagShort(1, "Height"),
            TagShort(1, "Length"),
            TagByteArray(b"\x01\x02", "Blocks"),
            TagByteArray(b"\x00\x05", "Data"),
        ),
        "Schematic",
    )
    with runner.isolated_filesystem():
        Path("house.schematic").write_bytes(dumps(tree))

        result = runner.invoke(
            cli, ["schematic", "house.schematic", "--origin", "10", "64", "3"]
        )

        assert result.exit_code == 0
        assert result.output.splitlines() == ["10 64 3 1 0", "11 64 3 2 5"]


def test_cli_schematic_not_a_schematic(runner: CliRunner) -> None:
    """根标签不是 Schematic 时应报错."""
    with runner.isolated_filesystem():
        Path("other.nbt").write_bytes(dumps(TagCompound((), "Level")))

        result = runner.invoke(cli, ["schematic", "other.nbt"])

        assert result.exit_code != 0
        assert "解码失败" in result.output
