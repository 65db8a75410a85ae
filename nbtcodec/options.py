"""NBT序列化和反序列化的配置选项.

该模块定义了用于控制 `dumps` 和 `loads` 函数行为的选项标志.
"""

from enum import IntFlag


class NbtOption(IntFlag):
    """NBT 配置选项标志.

    可以使用位运算组合多个选项.
    """

    # 默认行为:
    # 1. 大端字节序 (格式固定, 不可配置)
    # 2. 名称和字符串按单字节字符 (Latin-1) 编解码
    NONE = 0x0000

    # 名称和字符串使用严格的 UTF-8 编解码 (多字节字符)
    UTF8_STRINGS = 0x0001
