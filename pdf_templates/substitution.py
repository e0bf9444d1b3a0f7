"""
Fill a parsed layout with document data.

Plain text nodes get generic ``{{path}}`` substitution. Nodes tagged with a
named placeholder (``dataField``) go through that placeholder's routine. The
items-table placeholder is taken out of the tree and replaced by an
``ItemsTableSlot`` at the same position, so the renderer can draw the real
table there.
"""
from dataclasses import replace
from pdf_templates.nodes import GroupNode, ItemsTableSlot, TextNode
from pdf_templates.placeholders import (
    NAMED_ROUTINES,
    PlaceholderKind,
    has_tokens,
    is_items_table_token,
    scoped_context,
    substitute_tokens,
)


def _contains_items_table_token(node):
    if isinstance(node, TextNode):
        return is_items_table_token(node.text)
    if isinstance(node, GroupNode):
        return any(_contains_items_table_token(child) for child in node.children)
    return False


def _text_nodes(node):
    if isinstance(node, TextNode):
        yield node
    elif isinstance(node, GroupNode):
        for child in node.children:
            yield from _text_nodes(child)


def _fill_text(node, context):
    if isinstance(node, TextNode):
        return replace(node, text=substitute_tokens(node.text, context))
    if isinstance(node, GroupNode):
        return replace(node, children=[_fill_text(child, context) for child in node.children])
    return node


def _fill_named(node, kind, context):
    """
    Tokens inside the placeholder resolve against its scoped context. When
    the placeholder carries no tokens at all, its main text (the last text
    node) is replaced by the routine's standard block.
    """
    scoped = scoped_context(kind, context)
    texts = list(_text_nodes(node))
    if any(has_tokens(text.text) for text in texts):
        return _fill_text(node, scoped)

    block = NAMED_ROUTINES[kind](scoped)
    if isinstance(node, TextNode):
        return replace(node, text=block)
    if isinstance(node, GroupNode) and texts:
        target = texts[-1]
        return _replace_child(node, target, replace(target, text=block))
    return node


def _replace_child(group, target, new_node):
    children = []
    for child in group.children:
        if child is target:
            children.append(new_node)
        elif isinstance(child, GroupNode):
            children.append(_replace_child(child, target, new_node))
        else:
            children.append(child)
    return replace(group, children=children)


def _slot_for(node, dx, dy):
    return ItemsTableSlot(left=node.left + dx, top=node.top + dy, width=node.width, height=node.height)


def substitute_node(node, context, dx=0, dy=0):
    """
    Returns the list of nodes that replace ``node``: usually one, an
    ItemsTableSlot for the items-table placeholder. Group children stay
    relative to their group; (dx, dy) is the group's absolute offset.
    """
    kind = PlaceholderKind.from_field(getattr(node, "data_field", None))

    if kind == PlaceholderKind.ITEMS_TABLE or (kind is None and isinstance(node, GroupNode)
                                               and _contains_items_table_token(node)):
        return [_slot_for(node, dx, dy)]
    if isinstance(node, TextNode) and is_items_table_token(node.text):
        return [_slot_for(node, dx, dy)]

    if kind is not None:
        return [_fill_named(node, kind, context)]

    if isinstance(node, GroupNode):
        children, slots = [], []
        for child in node.children:
            for result in substitute_node(child, context, dx + node.left, dy + node.top):
                (slots if isinstance(result, ItemsTableSlot) else children).append(result)
        # slots carry absolute positions, so they move out of the group
        return [replace(node, children=children)] + slots

    return [_fill_text(node, context)]


def substitute(nodes, context):
    result = []
    for node in nodes:
        result.extend(substitute_node(node, context))
    return result


def items_table_slots(nodes):
    return [node for node in nodes if isinstance(node, ItemsTableSlot)]
