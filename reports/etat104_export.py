"""
État 104 exports: a one-page style PDF (company header, client table with
a totals row, declaration summary) and an Excel workbook with the same
figures on a data sheet and a summary sheet.
"""
import logging
from io import BytesIO
import pandas as pd
from reportlab.lib import colors
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from exports import pdf_layout as layout
from exports.document_renderer import STYLES, paragraph
from exports.export_service import PDF_MIMETYPE, ExportResult

logger = logging.getLogger("Etat104Export")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

TITLE = "État 104 Report - {period}"
SUBTITLE = "Résumé mensuel de la déclaration de TVA"
SUMMARY_TITLE = "Résumé pour la déclaration de l'État 104"
COLUMNS = ["Client", "NIF", "Montant (Excl.)", "TVA", "Total"]


def report_filename(report, extension):
    return f"Etat104_{report.month:02d}_{report.year}.{extension}"


def summary_lines(report):
    """(label, amount) pairs shown under the client table."""
    return [
        ("Ventes totales (hors taxes)", report.total_excl),
        ("Total TVA perçue", report.total_tax),
        ("Franchise TVA totale (simulée)", report.vat_franchise),
        ("TVA Due", report.vat_due),
    ]


def _client_table(report, currency):
    data = [COLUMNS]
    for s in report.summaries:
        data.append([paragraph(s.client_name, "cell"), s.taxid or "",
                     layout.format_money(s.subtotal, currency),
                     layout.format_money(s.tax_total, currency),
                     layout.format_money(s.total, currency)])
    data.append(["TOTALS:", "",
                 layout.format_money(report.total_excl, currency),
                 layout.format_money(report.total_tax, currency),
                 layout.format_money(report.grand_total, currency)])

    width = layout.CONTENT_WIDTH
    table = Table(data, colWidths=[width * 0.32, width * 0.17, width * 0.17, width * 0.17, width * 0.17],
                  repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), layout.TABLE_HEADER),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BACKGROUND", (0, -1), (-1, -1), layout.TABLE_FOOTER),
        ("TEXTCOLOR", (0, -1), (-1, -1), colors.white),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.4, layout.GRID),
    ]))
    return table


def build_pdf(report, currency=None):
    currency = currency if currency is not None else layout.setting("CURRENCY_CODE")
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=(layout.PAGE_WIDTH, layout.PAGE_HEIGHT),
                            leftMargin=layout.MARGIN_LEFT, rightMargin=layout.MARGIN_RIGHT,
                            topMargin=layout.MARGIN_TOP, bottomMargin=layout.MARGIN_BOTTOM,
                            title=TITLE.format(period=report.period_label))

    name, *details = layout.company_lines(report.company) + layout.company_extra_lines(report.company)
    story = [paragraph(name, "company")]
    story += [paragraph(line, "small") for line in details]
    story += [
        Spacer(1, 10),
        Paragraph(TITLE.format(period=report.period_label), STYLES["section"]),
        paragraph(SUBTITLE),
        Spacer(1, 8),
        _client_table(report, currency),
        Spacer(1, 12),
        Paragraph(SUMMARY_TITLE, STYLES["section"]),
    ]
    story += [paragraph(f"{label}: {layout.format_money(amount, currency)}") for label, amount in summary_lines(report)]

    doc.build(story)
    return buffer.getvalue()


def build_excel(report):
    rows = [
        {
            "Client": s.client_name,
            "NIF": s.taxid,
            "Montant (Excl.)": float(s.subtotal),
            "TVA": float(s.tax_total),
            "Total": float(s.total),
        }
        for s in report.summaries
    ]
    rows.append({
        "Client": "TOTALS:",
        "NIF": "",
        "Montant (Excl.)": float(report.total_excl),
        "TVA": float(report.total_tax),
        "Total": float(report.grand_total),
    })
    summary = [{"Rubrique": "Période", "Montant": report.period_label}]
    summary += [{"Rubrique": label, "Montant": float(amount)} for label, amount in summary_lines(report)]

    output = BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        pd.DataFrame(rows, columns=COLUMNS).to_excel(writer, sheet_name='État 104', index=False)
        pd.DataFrame(summary).to_excel(writer, sheet_name='Résumé', index=False)
    return output.getvalue()


def export_etat104_pdf(report):
    try:
        return ExportResult(report_filename(report, "pdf"), build_pdf(report), PDF_MIMETYPE)
    except Exception:
        logger.exception("État 104 PDF export failed for %s", report.period_label)
        return None


def export_etat104_excel(report):
    try:
        return ExportResult(report_filename(report, "xlsx"), build_excel(report), XLSX_MIMETYPE)
    except Exception:
        logger.exception("État 104 Excel export failed for %s", report.period_label)
        return None
