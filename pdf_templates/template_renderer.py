import base64
import logging
import os
from io import BytesIO
import requests
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from exports import pdf_layout as layout
from exports.document_renderer import NumberedCanvas, build_items_table
from pdf_templates.nodes import CANVAS_WIDTH, GroupNode, ImageNode, ItemsTableSlot, ShapeNode, TextNode, parse_layout
from pdf_templates.placeholders import build_context
from pdf_templates.substitution import substitute

logger = logging.getLogger("TemplateRenderer")

SCALE = layout.PAGE_WIDTH / CANVAS_WIDTH
LINE_HEIGHT = 1.16

FONT_FAMILIES = {
    "helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "arial": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "times new roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "courier new": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}


def _font_name(node):
    regular, bold, italic, bold_italic = FONT_FAMILIES.get(str(node.font_family).lower(), FONT_FAMILIES["helvetica"])
    if node.bold and node.italic:
        return bold_italic
    if node.bold:
        return bold
    if node.italic:
        return italic
    return regular


def _color(value):
    if not value or value in ("transparent", "none"):
        return None
    try:
        return colors.toColor(value)
    except (ValueError, TypeError):
        return None


def _pdf_y(top):
    return layout.PAGE_HEIGHT - top * SCALE


def load_image(src, timeout=10):
    """Decode an image from a data URL, an http(s) URL or a local path."""
    if src.startswith("data:"):
        payload = src.split(",", 1)[1]
        reader = ImageReader(BytesIO(base64.b64decode(payload)))
    elif src.startswith(("http://", "https://")):
        response = requests.get(src, timeout=timeout)
        response.raise_for_status()
        reader = ImageReader(BytesIO(response.content))
    elif os.path.exists(src):
        reader = ImageReader(src)
    else:
        raise FileNotFoundError(src)
    reader.getSize()
    return reader


def _image_nodes(nodes):
    for node in nodes:
        if isinstance(node, ImageNode):
            yield node
        elif isinstance(node, GroupNode):
            yield from _image_nodes(node.children)


def preload_images(nodes):
    """
    Decode every image up front so nothing is composited before all of the
    content is available. Images that fail to load are left out.
    """
    images = {}
    for node in _image_nodes(nodes):
        try:
            images[id(node)] = load_image(node.src)
        except Exception as e:
            logger.warning("Template image could not be loaded (%s): %s", node.src[:60], str(e))
    return images


class TemplateRenderer:
    def __init__(self, company=None, currency=None, footer_text=None):
        self.company = company
        self.currency = currency if currency is not None else layout.setting("CURRENCY_CODE")
        self.footer_text = footer_text if footer_text is not None else layout.setting("THANK_YOU_TEXT")
        self.last_page_count = 0

    def prepare(self, template, document):
        """Parsed and substituted nodes for ``document``."""
        context = build_context(document, self.company, self.currency)
        return substitute(parse_layout(template.layout_data), context)

    # -- drawing ------------------------------------------------------------ #

    def _draw_text(self, pdf, node, dx, dy):
        color = _color(node.fill) or colors.black
        size = node.font_size * SCALE
        x = (node.left + dx) * SCALE
        y = _pdf_y(node.top + dy) - size
        pdf.setFont(_font_name(node), size)
        pdf.setFillColor(color)
        for line in node.text.split("\n"):
            if node.align == "center":
                pdf.drawCentredString(x, y, line)
            elif node.align == "right":
                pdf.drawRightString(x, y, line)
            else:
                pdf.drawString(x, y, line)
            y -= size * LINE_HEIGHT

    def _draw_shape(self, pdf, node, dx, dy):
        fill, stroke = _color(node.fill), _color(node.stroke)
        pdf.setLineWidth(node.stroke_width * SCALE)
        if fill:
            pdf.setFillColor(fill)
        if stroke:
            pdf.setStrokeColor(stroke)

        left, top = node.left + dx, node.top + dy
        if node.shape == "line":
            # line points are in the parent's coordinates
            if node.points:
                x1, y1, x2, y2 = node.points
                x1, y1, x2, y2 = x1 + dx, y1 + dy, x2 + dx, y2 + dy
            else:
                x1, y1, x2, y2 = left, top, left + node.width, top + node.height
            pdf.setStrokeColor(stroke or colors.black)
            pdf.line(x1 * SCALE, _pdf_y(y1), x2 * SCALE, _pdf_y(y2))
        elif node.shape == "circle":
            radius = node.radius or node.width / 2
            pdf.circle((left + radius) * SCALE, _pdf_y(top + radius), radius * SCALE,
                       stroke=int(bool(stroke)), fill=int(bool(fill)))
        else:
            x, y = left * SCALE, _pdf_y(top + node.height)
            w, h = node.width * SCALE, node.height * SCALE
            if node.radius:
                pdf.roundRect(x, y, w, h, node.radius * SCALE, stroke=int(bool(stroke)), fill=int(bool(fill)))
            else:
                pdf.rect(x, y, w, h, stroke=int(bool(stroke)), fill=int(bool(fill)))

    def _draw_image(self, pdf, node, dx, dy, images):
        reader = images.get(id(node))
        if reader is None:
            return
        pdf.drawImage(reader, (node.left + dx) * SCALE, _pdf_y(node.top + dy + node.height),
                      width=node.width * SCALE, height=node.height * SCALE, mask="auto")

    def _flow_table(self, pdf, table, x, y_top, width):
        """Draw as much of ``table`` as fits below y_top; return what is left, or None."""
        available = y_top - layout.MARGIN_BOTTOM
        _, height = table.wrapOn(pdf, width, available)
        if height <= available:
            table.drawOn(pdf, x, y_top - height)
            return None
        parts = table.split(width, available)
        if len(parts) < 2:
            return table
        head, rest = parts[0], parts[1]
        _, head_height = head.wrapOn(pdf, width, available)
        head.drawOn(pdf, x, y_top - head_height)
        return rest

    def _draw_table(self, pdf, slot, document):
        width = slot.width * SCALE if slot.width else layout.CONTENT_WIDTH
        table = build_items_table(document, width, self.currency)
        x = slot.left * SCALE
        return self._flow_table(pdf, table, x, _pdf_y(slot.top), width), x, width

    def _draw_node(self, pdf, node, images, dx=0, dy=0):
        pdf.saveState()
        if isinstance(node, TextNode):
            self._draw_text(pdf, node, dx, dy)
        elif isinstance(node, ShapeNode):
            self._draw_shape(pdf, node, dx, dy)
        elif isinstance(node, ImageNode):
            self._draw_image(pdf, node, dx, dy, images)
        elif isinstance(node, GroupNode):
            for child in node.children:
                self._draw_node(pdf, child, images, dx + node.left, dy + node.top)
        pdf.restoreState()

    def render(self, template, document):
        nodes = self.prepare(template, document)
        images = preload_images(nodes)

        buffer = BytesIO()
        pdf = NumberedCanvas(buffer, pagesize=(layout.PAGE_WIDTH, layout.PAGE_HEIGHT),
                             footer_text=self.footer_text, on_page_count=self._set_page_count)
        pdf.setTitle(f"{template.name} {document.get('number') or ''}")

        overflow = []
        for node in nodes:
            if isinstance(node, ItemsTableSlot):
                rest, x, width = self._draw_table(pdf, node, document)
                if rest is not None:
                    overflow.append((rest, x, width))
            else:
                self._draw_node(pdf, node, images)

        # table rows that didn't fit continue on plain pages
        for rest, x, width in overflow:
            while rest is not None:
                pdf.showPage()
                remaining = self._flow_table(pdf, rest, x, layout.PAGE_HEIGHT - layout.MARGIN_TOP, width)
                if remaining is rest:
                    logger.warning("Items table row taller than a page, output truncated")
                    break
                rest = remaining

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _set_page_count(self, total):
        self.last_page_count = total
