"""
Document renderer: lays a hydrated proforma, final invoice or delivery note
out on A4 pages with ReportLab Platypus.

The story is a list of bands (header, client details, transport, items,
totals, amount in words, notes, payments, signatures). Optional bands that
have nothing to show are not emitted at all. The footer (thank-you line and
"Page n of m") is drawn by ``NumberedCanvas`` on every page once the total
page count is known.
"""
import logging
import os
from functools import partial
from io import BytesIO
from xml.sax.saxutils import escape
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from invoices.document_base import DocumentKind
from invoices.totals import stamp_tax_applies
from exports.amount_words import amount_in_words
from exports import pdf_layout as layout

logger = logging.getLogger("DocumentRenderer")

_styles = getSampleStyleSheet()
STYLES = {
    "normal": ParagraphStyle("DocNormal", parent=_styles["Normal"], fontSize=9, leading=12),
    "small": ParagraphStyle("DocSmall", parent=_styles["Normal"], fontSize=8, leading=10, textColor=layout.TEXT_MUTED),
    "company": ParagraphStyle("DocCompany", parent=_styles["Heading1"], fontSize=15, leading=18, spaceAfter=2),
    "section": ParagraphStyle("DocSection", parent=_styles["Normal"], fontName="Helvetica-Bold", fontSize=9,
                              leading=12, textColor=layout.TABLE_HEADER),
    "cell": ParagraphStyle("DocCell", parent=_styles["Normal"], fontSize=8, leading=10),
    "cell_head": ParagraphStyle("DocCellHead", parent=_styles["Normal"], fontName="Helvetica-Bold", fontSize=8,
                                leading=10, textColor=colors.white, alignment=TA_CENTER),
    "badge": ParagraphStyle("DocBadge", parent=_styles["Normal"], fontName="Helvetica-Bold", fontSize=10,
                            leading=13, textColor=colors.white, alignment=TA_CENTER),
    "number": ParagraphStyle("DocNumber", parent=_styles["Normal"], fontName="Helvetica-Bold", fontSize=11,
                             leading=14, alignment=TA_RIGHT),
    "right": ParagraphStyle("DocRight", parent=_styles["Normal"], fontSize=9, leading=12, alignment=TA_RIGHT),
    "words": ParagraphStyle("DocWords", parent=_styles["Normal"], fontName="Helvetica-Oblique", fontSize=9,
                            leading=12, textColor=colors.HexColor("#047857")),
}


def paragraph(text, style="normal"):
    return Paragraph(escape(str(text if text is not None else "")), STYLES[style])


class NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so every footer can read "Page n of m"."""

    def __init__(self, *args, footer_text="", on_page_count=None, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self._footer_text = footer_text
        self._on_page_count = on_page_count

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_footer(total)
            canvas.Canvas.showPage(self)
        if self._on_page_count:
            self._on_page_count(total)
        canvas.Canvas.save(self)

    def draw_footer(self, total):
        self.saveState()
        self.setStrokeColor(layout.GRID)
        self.line(layout.MARGIN_LEFT, 14 * mm, layout.PAGE_WIDTH - layout.MARGIN_RIGHT, 14 * mm)
        self.setFont("Helvetica-Oblique", 8)
        self.setFillColor(layout.TEXT_MUTED)
        if self._footer_text:
            self.drawCentredString(layout.PAGE_WIDTH / 2, 9 * mm, self._footer_text)
        self.setFont("Helvetica", 8)
        self.drawRightString(layout.PAGE_WIDTH - layout.MARGIN_RIGHT, 9 * mm,
                             f"Page {self._pageNumber} of {total}")
        self.restoreState()


# --------------------------------------------------------------------------- #
# Items table, shared with the template renderer
# --------------------------------------------------------------------------- #

ITEM_COLUMNS = {
    DocumentKind.PROFORMA: [
        ("#", 0.04), ("Produit", 0.22), ("Qté", 0.06), ("Unité", 0.07), ("Prix U. HT", 0.11),
        ("TVA %", 0.07), ("Remise %", 0.08), ("Total HT", 0.12), ("TVA", 0.10), ("Total TTC", 0.13),
    ],
    DocumentKind.INVOICE: [
        ("#", 0.04), ("Produit", 0.27), ("Qté", 0.06), ("Unité", 0.07), ("Prix U. HT", 0.12),
        ("TVA %", 0.07), ("Total HT", 0.13), ("TVA", 0.11), ("Total TTC", 0.13),
    ],
    DocumentKind.DELIVERY_NOTE: [
        ("#", 0.05), ("Produit", 0.33), ("Description", 0.40), ("Qté", 0.10), ("Unité", 0.12),
    ],
}


def _product_cell(item):
    name = escape(item.get("product_name") or "")
    code = escape(item.get("product_code") or "")
    text = f"{name}<br/><font size=7 color='#6B7280'>{code}</font>" if code else name
    return Paragraph(text, STYLES["cell"])


def _item_row(kind, index, item, currency):
    money = partial(layout.format_money, currency=currency)
    if kind == DocumentKind.DELIVERY_NOTE:
        return [str(index), _product_cell(item), paragraph(item.get("description"), "cell"),
                str(item.get("quantity", "")), item.get("unit") or ""]

    row = [
        str(index), _product_cell(item), str(item.get("quantity", "")), item.get("unit") or "",
        money(item.get("unit_price")), layout.format_percent(item.get("tax_rate")),
    ]
    if kind == DocumentKind.PROFORMA:
        row.append(layout.format_percent(item.get("discount")))
    row += [money(item.get("total_excl")), money(item.get("total_tax")), money(item.get("total"))]
    return row


def build_items_table(document, width=layout.CONTENT_WIDTH, currency=None):
    """
    One row per line item, header repeated on every page. Column set depends
    on the document kind; delivery notes carry no monetary columns.
    """
    kind = DocumentKind(document["kind"])
    currency = currency if currency is not None else layout.setting("CURRENCY_CODE")
    columns = ITEM_COLUMNS[kind]

    data = [[Paragraph(escape(title), STYLES["cell_head"]) for title, _ in columns]]
    for index, item in enumerate(document.get("items") or [], start=1):
        data.append(_item_row(kind, index, item, currency))

    table = Table(data, colWidths=[width * ratio for _, ratio in columns], repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), layout.TABLE_HEADER),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.4, layout.GRID),
        ("ALIGN", (0, 1), (0, -1), "CENTER"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    if kind == DocumentKind.DELIVERY_NOTE:
        style.append(("ALIGN", (3, 1), (4, -1), "CENTER"))
    else:
        style.append(("ALIGN", (2, 1), (3, -1), "CENTER"))
        style.append(("ALIGN", (4, 1), (-1, -1), "RIGHT"))
    for row in range(2, len(data), 2):
        style.append(("BACKGROUND", (0, row), (-1, row), layout.ROW_ALT))
    table.setStyle(TableStyle(style))
    return table


# --------------------------------------------------------------------------- #
# Renderer
# --------------------------------------------------------------------------- #

class DocumentRenderer:
    def __init__(self, company=None, brand_color=None, logo_path=None, currency=None, footer_text=None):
        self.company = company
        self.brand_color = colors.HexColor(brand_color or layout.setting("BRAND_COLOR"))
        self.logo_path = logo_path or (company or {}).get("logo_path") or layout.setting("LOGO_PATH")
        self.currency = currency if currency is not None else layout.setting("CURRENCY_CODE")
        self.footer_text = footer_text if footer_text is not None else layout.setting("THANK_YOU_TEXT")
        self.last_page_count = 0

    def money(self, value):
        return layout.format_money(value, self.currency)

    # -- bands -------------------------------------------------------------- #

    def _logo(self):
        if not self.logo_path or not os.path.exists(self.logo_path):
            return None
        try:
            logo = Image(self.logo_path)
            ratio = min(30 * mm / logo.imageWidth, 20 * mm / logo.imageHeight)
            logo.drawWidth = logo.imageWidth * ratio
            logo.drawHeight = logo.imageHeight * ratio
            return logo
        except Exception as e:
            logger.warning("Logo could not be loaded from %s: %s", self.logo_path, str(e))
            return None

    def _badge(self, text, background, width):
        badge = Table([[Paragraph(escape(text), STYLES["badge"])]], colWidths=[width])
        badge.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), background),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]))
        return badge

    def header_band(self, document):
        kind = DocumentKind(document["kind"])
        name, address, registration, contact = layout.company_lines(self.company)
        company_block = [
            Paragraph(escape(name), STYLES["company"]),
            paragraph(address, "small"),
            paragraph(registration, "small"),
            paragraph(contact, "small"),
        ]
        company_block += [paragraph(line, "small") for line in layout.company_extra_lines(self.company)]
        logo = self._logo()
        if logo is not None:
            company_block.insert(0, logo)

        right_width = 62 * mm
        badge_block = [
            self._badge(layout.DOCUMENT_TITLES[kind], self.brand_color, right_width),
            Spacer(1, 3),
            Paragraph(f"N° {escape(str(document.get('number') or ''))}", STYLES["number"]),
            Spacer(1, 3),
            self._badge(layout.status_label(document.get("status")),
                        layout.status_color(document.get("status")), right_width),
        ]
        table = Table([[company_block, badge_block]],
                      colWidths=[layout.CONTENT_WIDTH - right_width, right_width])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return [table]

    def client_details_band(self, document):
        kind = DocumentKind(document["kind"])
        client = document.get("client") or {}
        city = ", ".join(part for part in (client.get("city"), client.get("country")) if part)
        contact = " | ".join(part for part in (client.get("phone"), client.get("email")) if part)

        left = [paragraph("CLIENT", "section"), Paragraph(f"<b>{escape(client.get('name') or 'N/A')}</b>", STYLES["normal"])]
        left.append(paragraph(f"NIF: {client.get('taxid') or 'N/A'}"))
        for line in (client.get("address"), city, contact):
            if line:
                left.append(paragraph(line))

        details = [("Date d'émission", layout.format_date(document.get("issue_date")))]
        if document.get("due_date"):
            details.append(("Date d'échéance", layout.format_date(document["due_date"])))
        if kind != DocumentKind.DELIVERY_NOTE and document.get("payment_type"):
            details.append(("Mode de paiement", layout.payment_method_label(document["payment_type"])))
        if document.get("delivery_date"):
            details.append(("Date de livraison", layout.format_date(document["delivery_date"])))
        if document.get("bc"):
            details.append(("Bon de commande", document["bc"]))

        right = [paragraph("DÉTAILS", "section")]
        right.append(Table([[paragraph(label, "small"), paragraph(value, "right")] for label, value in details],
                           colWidths=[35 * mm, 40 * mm],
                           style=[("LEFTPADDING", (0, 0), (-1, -1), 0), ("TOPPADDING", (0, 0), (-1, -1), 1),
                                  ("BOTTOMPADDING", (0, 0), (-1, -1), 1)]))

        table = Table([[left, right]], colWidths=[layout.CONTENT_WIDTH - 80 * mm, 80 * mm])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("BOX", (0, 0), (0, 0), 0.5, layout.GRID),
            ("BOX", (1, 0), (1, 0), 0.5, layout.GRID),
            ("BACKGROUND", (0, 0), (-1, -1), layout.ROW_ALT),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ]))
        return [table]

    def transport_band(self, document):
        if DocumentKind(document["kind"]) != DocumentKind.DELIVERY_NOTE:
            return []
        transport = document.get("transport") or {}
        rows = [
            ("Chauffeur", transport.get("driver_name")),
            ("Véhicule", transport.get("truck_id")),
            ("Transporteur", transport.get("delivery_company")),
        ]
        if transport.get("driver_phone"):
            rows.append(("Tél. chauffeur", transport["driver_phone"]))
        if transport.get("driver_license"):
            rows.append(("Permis", transport["driver_license"]))

        data = [[paragraph("TRANSPORT", "section"), ""]]
        data += [[paragraph(label, "small"), paragraph(value or "Non spécifié")] for label, value in rows]
        table = Table(data, colWidths=[40 * mm, layout.CONTENT_WIDTH - 40 * mm])
        table.setStyle(TableStyle([
            ("SPAN", (0, 0), (-1, 0)),
            ("BOX", (0, 0), (-1, -1), 0.5, layout.GRID),
            ("TOPPADDING", (0, 0), (-1, -1), 2),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
        ]))
        return [table]

    def items_band(self, document):
        return [build_items_table(document, layout.CONTENT_WIDTH, self.currency)]

    def totals_band(self, document):
        if DocumentKind(document["kind"]) == DocumentKind.DELIVERY_NOTE:
            return []
        rows = [
            ["Total HT", self.money(document.get("subtotal"))],
            ["TVA", self.money(document.get("tax_total"))],
        ]
        if stamp_tax_applies(document.get("payment_type"), document.get("stamp_tax")):
            rows.append(["Droit de timbre", self.money(document.get("stamp_tax"))])
        grand_total = document.get("amount_payable", document.get("total"))
        rows.append(["Total TTC", self.money(grand_total)])

        table = Table(rows, colWidths=[40 * mm, 45 * mm], hAlign="RIGHT")
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("LINEBELOW", (0, 0), (-1, -2), 0.4, layout.GRID),
            ("BACKGROUND", (0, -1), (-1, -1), layout.TABLE_FOOTER),
            ("TEXTCOLOR", (0, -1), (-1, -1), colors.white),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, -1), (-1, -1), 11),
        ]))
        return [table]

    def amount_in_words_band(self, document):
        kind = DocumentKind(document["kind"])
        if kind == DocumentKind.DELIVERY_NOTE:
            return []
        words = amount_in_words(document.get("amount_payable", document.get("total")))
        if not words:
            return []
        label = "facture proforma" if kind == DocumentKind.PROFORMA else "facture"
        return [Paragraph(f"Arrêtée la présente {label} à la somme de : <b>{escape(words)}</b>", STYLES["words"])]

    def notes_band(self, document):
        notes = (document.get("notes") or "").strip()
        if not notes:
            return []
        return [paragraph("NOTES", "section"),
                Paragraph(escape(notes).replace("\n", "<br/>"), STYLES["normal"])]

    def payment_history_band(self, document):
        if DocumentKind(document["kind"]) != DocumentKind.INVOICE:
            return []
        payments = document.get("payments") or []
        if not payments:
            return []

        data = [[Paragraph(title, STYLES["cell_head"]) for title in ("Date", "Mode", "Référence", "Montant")]]
        for payment in payments:
            data.append([
                layout.format_date(payment.get("payment_date")),
                layout.payment_method_label(payment.get("payment_method")),
                payment.get("reference") or "",
                self.money(payment.get("amount")),
            ])
        data.append(["", "", "Montant payé", self.money(document.get("amount_paid"))])
        data.append(["", "", "Reste à payer", self.money(document.get("client_debt"))])

        widths = [0.2, 0.25, 0.3, 0.25]
        table = Table(data, colWidths=[layout.CONTENT_WIDTH * w for w in widths], repeatRows=1)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), layout.TABLE_HEADER),
            ("FONTSIZE", (0, 1), (-1, -1), 8),
            ("GRID", (0, 0), (-1, -3), 0.4, layout.GRID),
            ("ALIGN", (3, 1), (3, -1), "RIGHT"),
            ("FONTNAME", (2, -2), (-1, -1), "Helvetica-Bold"),
        ]))
        return [paragraph("HISTORIQUE DES PAIEMENTS", "section"), Spacer(1, 3), table]

    def signatures_band(self, document):
        if DocumentKind(document["kind"]) != DocumentKind.DELIVERY_NOTE:
            return []
        half = layout.CONTENT_WIDTH / 2
        table = Table([["", ""], ["Signature du livreur", "Signature et cachet du client"]],
                      colWidths=[half, half], rowHeights=[22 * mm, None])
        table.setStyle(TableStyle([
            ("LINEABOVE", (0, 1), (0, 1), 0.6, colors.black),
            ("LINEABOVE", (1, 1), (1, 1), 0.6, colors.black),
            ("ALIGN", (0, 1), (-1, 1), "CENTER"),
            ("FONTSIZE", (0, 1), (-1, 1), 9),
            ("LEFTPADDING", (0, 0), (-1, -1), 12),
            ("RIGHTPADDING", (0, 0), (-1, -1), 12),
        ]))
        return [table]

    def bands(self, document):
        return [
            ("header", self.header_band(document)),
            ("client_details", self.client_details_band(document)),
            ("transport", self.transport_band(document)),
            ("items", self.items_band(document)),
            ("totals", self.totals_band(document)),
            ("amount_in_words", self.amount_in_words_band(document)),
            ("notes", self.notes_band(document)),
            ("payment_history", self.payment_history_band(document)),
            ("signatures", self.signatures_band(document)),
        ]

    def band_names(self, document):
        return [name for name, flowables in self.bands(document) if flowables]

    def build_story(self, document):
        story = []
        for _, flowables in self.bands(document):
            if not flowables:
                continue
            if story:
                story.append(Spacer(1, 6 * mm))
            story.extend(flowables)
        return story

    # -- output ------------------------------------------------------------- #

    def _draw_banner(self, pdf, doc):
        pdf.saveState()
        pdf.setFillColor(self.brand_color)
        pdf.rect(0, layout.PAGE_HEIGHT - layout.BANNER_HEIGHT, layout.PAGE_WIDTH, layout.BANNER_HEIGHT,
                 fill=1, stroke=0)
        pdf.restoreState()

    def _set_page_count(self, total):
        self.last_page_count = total

    def render(self, document):
        """Build the whole PDF in memory and return its bytes."""
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=(layout.PAGE_WIDTH, layout.PAGE_HEIGHT),
            leftMargin=layout.MARGIN_LEFT,
            rightMargin=layout.MARGIN_RIGHT,
            topMargin=layout.MARGIN_TOP + layout.BANNER_HEIGHT,
            bottomMargin=layout.MARGIN_BOTTOM,
            title=f"{layout.DOCUMENT_TITLES[DocumentKind(document['kind'])]} {document.get('number') or ''}",
        )
        doc.build(
            self.build_story(document),
            onFirstPage=self._draw_banner,
            onLaterPages=self._draw_banner,
            canvasmaker=partial(NumberedCanvas, footer_text=self.footer_text, on_page_count=self._set_page_count),
        )
        return buffer.getvalue()
