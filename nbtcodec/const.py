"""NBT协议常量.

该模块定义了NBT格式中使用的类型ID和格式限制.
"""

# NBT数据类型
TAG_END = 0
TAG_BYTE = 1
TAG_SHORT = 2
TAG_INT = 3
TAG_LONG = 4
TAG_FLOAT = 5
TAG_DOUBLE = 6
TAG_BYTE_ARRAY = 7
TAG_STRING = 8
TAG_LIST = 9
TAG_COMPOUND = 10
TAG_INT_ARRAY = 11
TAG_LONG_ARRAY = 12

# 类型分组
SCALAR_TYPES = frozenset(
    {TAG_BYTE, TAG_SHORT, TAG_INT, TAG_LONG, TAG_FLOAT, TAG_DOUBLE}
)
ARRAY_TYPES = frozenset({TAG_BYTE_ARRAY, TAG_INT_ARRAY, TAG_LONG_ARRAY})
CONTAINER_TYPES = frozenset({TAG_LIST, TAG_COMPOUND})

# 格式限制
MAX_NAME_LENGTH = 0xFFFF  # 名称/字符串长度为 u16
MAX_ARRAY_LENGTH = 0x7FFFFFFF  # 数组长度为 i32
MAX_LIST_LENGTH = 0xFFFFFFFF  # 列表长度为 u32
DEFAULT_MAX_DEPTH = 512
