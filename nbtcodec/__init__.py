"""NBT 标签树编解码库.

提供了13种标签类型、序列化(dumps)和反序列化(loads)功能,
标签树遍历工具, 以及 Schematic 导入.
"""

from .api import dump, dumps, load, load_all, loads, loads_all
from .config import NbtConfig
from .const import (
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
from .decoder import DataReader, StreamReader, TagDecoder, decode_tag
from .encoder import DataWriter, TagEncoder, encode_tag
from .exceptions import (
    MissingFieldError,
    NbtDecodeError,
    NbtDepthExceededError,
    NbtElementTypeMismatchError,
    NbtEncodeError,
    NbtError,
    NbtUnexpectedEofError,
    NbtUnknownTagTypeError,
    NbtValueError,
    NotASchematicError,
    SchematicError,
    WrongFieldTypeError,
)
from .options import NbtOption
from .schematic import Schematic, import_schematic
from .types import (
    TAG_CLASSES,
    Tag,
    TagByte,
    TagByteArray,
    TagCompound,
    TagDouble,
    TagEnd,
    TagFloat,
    TagInt,
    TagIntArray,
    TagList,
    TagLong,
    TagLongArray,
    TagShort,
    TagString,
    tag_class,
    tag_type_id,
    tag_type_name,
)
from .walk import find_child, format_tag, iter_tags, tag_to_python, visit

__version__ = "0.1.0"

__all__ = [
    "TAG_BYTE",
    "TAG_BYTE_ARRAY",
    "TAG_CLASSES",
    "TAG_COMPOUND",
    "TAG_DOUBLE",
    "TAG_END",
    "TAG_FLOAT",
    "TAG_INT",
    "TAG_INT_ARRAY",
    "TAG_LIST",
    "TAG_LONG",
    "TAG_LONG_ARRAY",
    "TAG_SHORT",
    "TAG_STRING",
    "DataReader",
    "DataWriter",
    "MissingFieldError",
    "NbtConfig",
    "NbtDecodeError",
    "NbtDepthExceededError",
    "NbtElementTypeMismatchError",
    "NbtEncodeError",
    "NbtError",
    "NbtOption",
    "NbtUnexpectedEofError",
    "NbtUnknownTagTypeError",
    "NbtValueError",
    "NotASchematicError",
    "Schematic",
    "SchematicError",
    "StreamReader",
    "Tag",
    "TagByte",
    "TagByteArray",
    "TagCompound",
    "TagDecoder",
    "TagDouble",
    "TagEncoder",
    "TagEnd",
    "TagFloat",
    "TagInt",
    "TagIntArray",
    "TagList",
    "TagLong",
    "TagLongArray",
    "TagShort",
    "TagString",
    "WrongFieldTypeError",
    "decode_tag",
    "dump",
    "dumps",
    "encode_tag",
    "find_child",
    "format_tag",
    "import_schematic",
    "iter_tags",
    "load",
    "load_all",
    "loads",
    "loads_all",
    "tag_class",
    "tag_to_python",
    "tag_type_id",
    "tag_type_name",
    "visit",
]
