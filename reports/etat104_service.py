import calendar
import logging
from collections import namedtuple
from datetime import date
from decimal import Decimal
from invoices.final_invoice import FinalInvoice
from invoices.totals import round_money
from settings.company_settings import get_company_info

logger = logging.getLogger("Etat104Service")

# Share of the collected VAT treated as franchise on the declaration
FRANCHISE_RATE = Decimal("0.3")
DUE_RATE = Decimal("0.7")

ClientSummary = namedtuple("ClientSummary", ["client_id", "client_name", "taxid", "subtotal", "tax_total", "total"])


class Etat104Report:
    """One month of sales, summed per client, as declared on the État 104 form."""

    def __init__(self, year, month, summaries, company=None):
        self.year = year
        self.month = month
        self.summaries = summaries
        self.company = company

    @property
    def period_label(self):
        return f"{self.month:02d}/{self.year}"

    @property
    def total_excl(self):
        return sum((s.subtotal for s in self.summaries), Decimal("0.00"))

    @property
    def total_tax(self):
        return sum((s.tax_total for s in self.summaries), Decimal("0.00"))

    @property
    def grand_total(self):
        return sum((s.total for s in self.summaries), Decimal("0.00"))

    @property
    def vat_franchise(self):
        return round_money(self.total_tax * FRANCHISE_RATE)

    @property
    def vat_due(self):
        return round_money(self.total_tax * DUE_RATE)

    def to_dict(self):
        return {
            "year": self.year,
            "month": self.month,
            "clients": [s._asdict() for s in self.summaries],
            "total_excl": self.total_excl,
            "total_tax": self.total_tax,
            "grand_total": self.grand_total,
            "vat_franchise": self.vat_franchise,
            "vat_due": self.vat_due,
        }


class Etat104Service:
    @staticmethod
    def period_bounds(year, month):
        if not 1 <= int(month) <= 12:
            raise ValueError(f"Invalid month: {month}")
        last_day = calendar.monthrange(int(year), int(month))[1]
        return date(int(year), int(month), 1), date(int(year), int(month), last_day)

    @staticmethod
    def summarise_by_client(year, month):
        """
        Final invoices issued during the month, cancelled ones excluded,
        grouped per client and sorted by client name.
        """
        start, end = Etat104Service.period_bounds(year, month)
        invoices = (FinalInvoice.query
                    .filter(FinalInvoice.issue_date >= start, FinalInvoice.issue_date <= end)
                    .filter(FinalInvoice.status != "cancelled")
                    .all())

        grouped = {}
        for invoice in invoices:
            row = grouped.setdefault(invoice.client_id, {
                "client_name": invoice.client.name if invoice.client else "",
                "taxid": (invoice.client.taxid if invoice.client else None) or "",
                "subtotal": Decimal("0.00"),
                "tax_total": Decimal("0.00"),
                "total": Decimal("0.00"),
            })
            row["subtotal"] += Decimal(invoice.subtotal or 0)
            row["tax_total"] += Decimal(invoice.tax_total or 0)
            row["total"] += Decimal(invoice.total or 0)

        summaries = [
            ClientSummary(client_id, row["client_name"], row["taxid"],
                          round_money(row["subtotal"]), round_money(row["tax_total"]), round_money(row["total"]))
            for client_id, row in grouped.items()
        ]
        summaries.sort(key=lambda s: s.client_name.lower())
        logger.info("État 104 %02d/%s: %d invoices, %d clients", int(month), year, len(invoices), len(summaries))
        return summaries

    @staticmethod
    def build_report(year, month):
        year, month = int(year), int(month)
        return Etat104Report(year, month, Etat104Service.summarise_by_client(year, month), get_company_info())
