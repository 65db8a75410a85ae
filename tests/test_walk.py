"""测试标签树遍历和文本渲染."""

from nbtcodec import (
    TAG_BYTE,
    TAG_END,
    TAG_SHORT,
    Tag,
    TagByte,
    TagByteArray,
    TagCompound,
    TagDouble,
    TagEnd,
    TagIntArray,
    TagList,
    TagShort,
    TagString,
    find_child,
    format_tag,
    iter_tags,
    tag_to_python,
    visit,
)


def sample_tree() -> TagCompound:
    """构建遍历测试用的标签树."""
    return TagCompound(
        (
            TagShort(3, "Width"),
            TagList(TAG_BYTE, (TagByte(1), TagByte(2)), "bytes"),
            TagCompound((TagString("hi", "greeting"),), "nested"),
        ),
        "Schematic",
    )


def test_iter_tags_preorder() -> None:
    """iter_tags() 应按先序产出 (深度, 标签)."""
    result = [
        (depth, tag.type_name, tag.name) for depth, tag in iter_tags(sample_tree())
    ]

    assert result == [
        (0, "TAG_Compound", "Schematic"),
        (1, "TAG_Short", "Width"),
        (1, "TAG_List", "bytes"),
        (2, "TAG_Byte", ""),
        (2, "TAG_Byte", ""),
        (1, "TAG_Compound", "nested"),
        (2, "TAG_String", "greeting"),
    ]


def test_visit_calls_callback() -> None:
    """visit() 应对每个标签调用回调, 并传入深度."""
    seen: list[tuple[str, int]] = []

    def callback(tag: Tag, depth: int) -> None:
        seen.append((tag.name, depth))

    visit(sample_tree(), callback, depth=1)

    assert seen[0] == ("Schematic", 1)
    assert seen[-1] == ("greeting", 3)
    assert len(seen) == 7


def test_find_child() -> None:
    """find_child() 只查找直接子节点."""
    root = sample_tree()

    assert find_child(root, "Width") == TagShort(3, "Width")
    assert find_child(root, "greeting") is None


def test_format_tag() -> None:
    """format_tag() 应按深度缩进, 容器显示子节点数量."""
    text = format_tag(sample_tree())

    assert text.splitlines() == [
        'TAG_Compound : "Schematic" (3 entries)',
        '\tTAG_Short : "Width" = 3',
        '\tTAG_List : TAG_Byte : "bytes" (2 entries)',
        '\t\tTAG_Byte : "" = 1',
        '\t\tTAG_Byte : "" = 2',
        '\tTAG_Compound : "nested" (1 entries)',
        '\t\tTAG_String : "greeting" = hi',
    ]


def test_format_tag_custom_indent() -> None:
    """format_tag() 应支持自定义缩进字符串."""
    tree = TagCompound((TagByteArray(b"\x01\x02", "Blocks"),), "r")

    assert format_tag(tree, indent="  ") == (
        'TAG_Compound : "r" (1 entries)\n  TAG_Byte_Array : "Blocks" = [1, 2]'
    )


def test_format_tag_edge_cases() -> None:
    """END 和空列表也应能被渲染."""
    assert format_tag(TagEnd()) == "TAG_End"
    assert format_tag(TagList(TAG_END, (), "empty")) == (
        'TAG_List : TAG_End : "empty" (0 entries)'
    )
    assert format_tag(TagDouble(1.5, "d")) == 'TAG_Double : "d" = 1.5'


def test_tag_to_python() -> None:
    """tag_to_python() 应转换为普通 Python 对象."""
    tree = TagCompound(
        (
            TagShort(3, "Width"),
            TagList(TAG_SHORT, (TagShort(1), TagShort(2)), "list"),
            TagIntArray((4, 5), "ints"),
            TagByteArray(b"\x07", "Blocks"),
        )
    )

    assert tag_to_python(tree) == {
        "Width": 3,
        "list": [1, 2],
        "ints": [4, 5],
        "Blocks": [7],
    }
    assert tag_to_python(TagEnd()) is None


def test_tag_to_python_duplicate_names() -> None:
    """同名子节点时后者覆盖前者."""
    tree = TagCompound((TagByte(1, "a"), TagByte(2, "a")))

    assert tag_to_python(tree) == {"a": 2}


def test_tag_to_python_deep_nesting() -> None:
    """深层嵌套的转换不受 Python 递归深度限制."""
    depth = 3000
    tree = TagCompound()
    for _ in range(depth):
        tree = TagCompound((tree,), "c")

    value = tag_to_python(tree)

    level = 0
    while value:
        value = value["c"]
        level += 1
    assert level == depth
