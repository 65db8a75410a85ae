"""NBT命令行工具."""

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import NbtError, NbtOption, Tag, loads_all
from .schematic import import_schematic
from .types import TagByteArray, TagCompound, TagIntArray, TagList, TagLongArray
from .walk import format_tag, iter_tags, tag_to_python

if TYPE_CHECKING:
    import click as click_module
    from rich.console import Console
    from rich.text import Text
    from rich.tree import Tree
else:
    try:
        import click as click_module
        from rich.console import Console
        from rich.text import Text
        from rich.tree import Tree
    except ImportError:
        click_module = None
        Console = None
        Text = None
        Tree = None

click = click_module

# 流式读取配置
FILE_SIZE_THRESHOLD = 10 * 1024 * 1024  # 10MB
CHUNK_SIZE = 8 * 1024 * 1024  # 8MB


if not click:

    def main() -> None:
        """入口函数 (缺少 click)."""
        print("错误: 未检测到 'click' 模块,无法运行 CLI 工具。", file=sys.stderr)
        print(
            "\n该功能属于可选组件,请通过以下命令安装依赖:\n"
            "  pip install 'nbtcodec[cli]'",
            file=sys.stderr,
        )
        sys.exit(1)

else:

    def _read_binary_file(file_path: Path, verbose: bool) -> bytes:
        """读取二进制文件,大文件使用分块以控制内存.

        Args:
            file_path: 文件路径.
            verbose: 是否显示详细信息.

        Returns:
            文件内容的bytes.
        """
        file_size = file_path.stat().st_size

        if file_size > FILE_SIZE_THRESHOLD:
            if verbose:
                click.echo(f"[DEBUG] 文件大小 {file_size} 字节,使用分块读取", err=True)

            chunks = []
            with open(file_path, "rb") as f:
                while chunk := f.read(CHUNK_SIZE):
                    chunks.append(chunk)
            return b"".join(chunks)
        return file_path.read_bytes()

    def _read_hex_file(file_path: Path) -> bytes:
        """读取并解析十六进制文本文件.

        Raises:
            ValueError: 如果文件内容不是有效的十六进制字符串.
        """
        hex_data = file_path.read_text(encoding="utf-8").strip()

        # 验证并清理
        cleaned = "".join(hex_data.split())
        if not cleaned or not all(c in "0123456789abcdefABCDEF" for c in cleaned):
            raise ValueError("不是有效的十六进制字符串")

        return bytes.fromhex(cleaned)

    def _read_input(encoded: str | None, file_path: Path | None, verbose: bool) -> bytes:
        """从命令行参数或文件获取二进制数据."""
        if encoded and file_path:
            raise click.UsageError("不能同时指定 ENCODED 数据和 --file 参数")
        if not encoded and not file_path:
            raise click.UsageError("必须指定 ENCODED 数据或 --file 参数")

        if file_path:
            try:
                # 尝试hex文本模式
                data = _read_hex_file(file_path)
                if verbose:
                    click.echo("[DEBUG] 从文件读取十六进制数据 (文本模式)", err=True)
            except (UnicodeDecodeError, ValueError):
                # 降级到二进制模式
                data = _read_binary_file(file_path, verbose)
                if verbose:
                    click.echo("[DEBUG] 从文件读取二进制数据 (二进制模式)", err=True)
            return data

        assert encoded is not None
        try:
            return bytes.fromhex(encoded)
        except ValueError as e:
            raise click.BadParameter(f"无效的十六进制格式 - {e}") from e

    def _tree_label(tag: Tag) -> "Text":
        """构建单个节点的 Rich 标签."""
        label = Text()
        label.append(f"{tag.type_name} ", style="cyan")
        if tag.name:
            label.append(f'"{tag.name}" ', style="bold blue")

        if isinstance(tag, TagList | TagCompound):
            label.append(f"({len(tag.items)} entries)", style="dim")
        elif isinstance(tag, TagByteArray):
            label.append(tag.value.hex(" ").upper(), style="green")
        elif isinstance(tag, TagIntArray | TagLongArray):
            label.append(str(list(tag.value)), style="magenta")
        elif hasattr(tag, "value"):
            val = tag.value
            label.append(repr(val) if isinstance(val, str) else str(val),
                         style="green" if isinstance(val, str) else "magenta")
        return label

    def _print_tag_tree(tags: list[Tag], file: Any = None) -> None:
        """打印NBT标签树 (使用 Rich).

        Args:
            tags: 顶层标签列表.
            file: 输出文件对象,默认为stdout.
        """
        console = Console(file=file, force_terminal=file is None)
        root = Tree("NBT Root", style="bold white")

        for tag in tags:
            # parents[d] 是深度 d 的节点应挂载的分支
            parents = [root]
            for depth, current in iter_tags(tag):
                node = parents[depth].add(_tree_label(current))
                del parents[depth + 1 :]
                parents.append(node)

        console.print(root)

    def _json_default(obj: object) -> object:
        if isinstance(obj, bytes | bytearray | memoryview):
            return bytes(obj).hex()
        return str(obj)

    @click.group(help="NBT 编解码命令行工具")
    def cli() -> None:
        """NBT 编解码命令行工具."""

    @cli.command("dump", help="解码并打印 NBT 数据")
    @click.argument("encoded", required=False)
    @click.option(
        "-f",
        "--file",
        "file_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="从文件读取数据 (十六进制文本或已解压的二进制)",
    )
    @click.option(
        "--format",
        "output_format",
        type=click.Choice(["text", "tree", "json"]),
        default="text",
        show_default=True,
        help="输出格式",
    )
    @click.option(
        "-o",
        "--output",
        "output_file",
        type=click.Path(dir_okay=False, writable=True),
        help="将输出保存到文件 (如不指定则输出到控制台)",
    )
    @click.option("--utf8", is_flag=True, help="按 UTF-8 解码名称和字符串")
    @click.option("-v", "--verbose", is_flag=True, help="显示详细的解码过程信息")
    def dump_command(
        encoded: str | None,
        file_path: Path | None,
        output_format: str,
        output_file: str | None,
        utf8: bool,
        verbose: bool,
    ) -> None:
        """解码并打印 NBT 数据.

        Examples:
          # 直接解码十六进制数据
          nbtcodec dump "0200015700 03"

          # 从文件读取
          nbtcodec dump -f level.dat.raw --format tree
        """
        data = _read_input(encoded, file_path, verbose)
        if verbose:
            click.echo(f"[DEBUG] 数据大小: {len(data)} 字节", err=True)

        option = NbtOption.UTF8_STRINGS if utf8 else NbtOption.NONE
        try:
            tags = loads_all(data, option)
        except NbtError as e:
            if verbose:
                import traceback

                traceback.print_exc(file=sys.stderr)
            raise click.ClickException(f"解码失败: {e}") from e

        if output_format == "tree":
            if output_file:
                with open(output_file, "w", encoding="utf-8") as f:
                    _print_tag_tree(tags, file=f)
                click.echo(f"结果已保存到: {output_file}", err=True)
            else:
                _print_tag_tree(tags)
            return

        if output_format == "json":
            values = [tag_to_python(tag) for tag in tags]
            output_text = json.dumps(
                values[0] if len(values) == 1 else values,
                indent=2,
                ensure_ascii=False,
                default=_json_default,
            )
        else:
            output_text = "\n".join(format_tag(tag) for tag in tags)

        if output_file:
            Path(output_file).write_text(output_text, encoding="utf-8")
            click.echo(f"结果已保存到: {output_file}", err=True)
        else:
            click.echo(output_text)

    @cli.command("schematic", help="列出 Schematic 中每个方块的放置位置")
    @click.argument(
        "file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )
    @click.option(
        "--origin",
        type=(int, int, int),
        default=(0, 0, 0),
        show_default=True,
        help="放置原点 X Y Z",
    )
    @click.option("-v", "--verbose", is_flag=True, help="显示详细信息")
    def schematic_command(
        file_path: Path, origin: tuple[int, int, int], verbose: bool
    ) -> None:
        """列出 Schematic 中每个方块的放置位置.

        每行输出: X Y Z 方块ID 方块数据
        """
        data = _read_binary_file(file_path, verbose)

        def place_block(position: Any, block_id: int, block_data: int) -> None:
            x, y, z = position
            click.echo(f"{x} {y} {z} {block_id} {block_data}")

        try:
            schematic = import_schematic(data, place_block, origin)
        except NbtError as e:
            if verbose:
                import traceback

                traceback.print_exc(file=sys.stderr)
            raise click.ClickException(f"解码失败: {e}") from e

        if verbose:
            click.echo(
                f"[DEBUG] 共 {schematic.volume} 个方块 "
                f"({schematic.width}x{schematic.height}x{schematic.length})",
                err=True,
            )

    def main() -> None:
        """入口函数."""
        cli()


if __name__ == "__main__":
    main()
