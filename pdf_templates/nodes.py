"""
Node tree for designer-authored layouts.

A layout is stored as ``{"objects": [...]}``. Coordinates are canvas pixels
on a 794 x 1123 page (A4 at 96 DPI), measured from the top-left corner.
Children of a group are positioned relative to the group's top-left corner.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Union

CANVAS_WIDTH = 794
CANVAS_HEIGHT = 1123

TEXT_TYPES = ("text", "i-text", "textbox")
SHAPE_TYPES = ("rect", "line", "circle")


@dataclass
class TextNode:
    left: float
    top: float
    text: str
    width: float = 0
    height: float = 0
    font_size: float = 12
    font_family: str = "Helvetica"
    bold: bool = False
    italic: bool = False
    fill: str = "#000000"
    align: str = "left"
    data_field: Optional[str] = None
    kind: str = "text"


@dataclass
class ShapeNode:
    shape: str
    left: float
    top: float
    width: float = 0
    height: float = 0
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 1
    radius: float = 0
    points: Optional[List[float]] = None
    data_field: Optional[str] = None
    kind: str = "shape"


@dataclass
class ImageNode:
    left: float
    top: float
    width: float
    height: float
    src: str
    data_field: Optional[str] = None
    kind: str = "image"


@dataclass
class GroupNode:
    left: float
    top: float
    width: float = 0
    height: float = 0
    children: List["Node"] = field(default_factory=list)
    data_field: Optional[str] = None
    kind: str = "group"


@dataclass
class ItemsTableSlot:
    """Where the line-items table goes once its placeholder is removed."""
    left: float
    top: float
    width: float
    height: float = 0
    kind: str = "items_table"


Node = Union[TextNode, ShapeNode, ImageNode, GroupNode, ItemsTableSlot]


def _num(obj, key, default=0.0):
    value = obj.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def _origin_shift(obj, width):
    origin = obj.get("originX", "left")
    if origin == "center":
        return width / 2
    if origin == "right":
        return width
    return 0


def parse_node(obj):
    """Turn one layout object into a node, or None for unsupported types."""
    if not isinstance(obj, dict):
        return None
    node_type = str(obj.get("type", "")).lower()
    left, top = _num(obj, "left"), _num(obj, "top")
    width, height = _num(obj, "width"), _num(obj, "height")
    data_field = obj.get("dataField")

    if node_type in TEXT_TYPES:
        weight = str(obj.get("fontWeight", "normal")).lower()
        # left becomes the anchor x: start, centre or end of the line depending on align
        if obj.get("originX") in ("center", "right"):
            align = obj["originX"]
        else:
            align = obj.get("textAlign") or "left"
            left += {"center": width / 2, "right": width}.get(align, 0)
        return TextNode(
            left=left,
            top=top,
            text=str(obj.get("text", "")),
            width=width,
            height=height,
            font_size=_num(obj, "fontSize", 12),
            font_family=obj.get("fontFamily", "Helvetica"),
            bold=weight in ("bold", "700", "800", "900"),
            italic=obj.get("fontStyle") == "italic",
            fill=obj.get("fill") or "#000000",
            align=align,
            data_field=data_field,
        )

    if node_type in SHAPE_TYPES:
        points = None
        if node_type == "line":
            points = [_num(obj, "x1"), _num(obj, "y1"), _num(obj, "x2"), _num(obj, "y2")]
        return ShapeNode(
            shape=node_type,
            left=left - _origin_shift(obj, width),
            top=top,
            width=width,
            height=height,
            fill=obj.get("fill"),
            stroke=obj.get("stroke"),
            stroke_width=_num(obj, "strokeWidth", 1),
            radius=_num(obj, "radius", _num(obj, "rx")),
            points=points,
            data_field=data_field,
        )

    if node_type == "image":
        return ImageNode(left=left, top=top, width=width, height=height,
                         src=str(obj.get("src", "")), data_field=data_field)

    if node_type == "group":
        children = [child for child in (parse_node(o) for o in obj.get("objects") or []) if child is not None]
        return GroupNode(left=left, top=top, width=width, height=height,
                         children=children, data_field=data_field)

    return None


def parse_layout(layout_data):
    if isinstance(layout_data, dict):
        objects = layout_data.get("objects") or []
    elif isinstance(layout_data, list):
        objects = layout_data
    else:
        objects = []
    return [node for node in (parse_node(obj) for obj in objects) if node is not None]
