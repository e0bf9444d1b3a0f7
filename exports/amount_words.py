import logging
from decimal import Decimal
from num2words import num2words
from invoices.totals import parse_amount, round_money
from exports.pdf_layout import setting

logger = logging.getLogger("AmountWords")


def amount_in_words(amount, lang=None):
    """
    Spell out a monetary amount, e.g. 1250.50 ->
    "Mille deux cent cinquante dinars algériens et cinquante centimes".

    Display helper only: if the conversion fails the result is "".
    """
    lang = lang or setting("AMOUNT_WORDS_LANG")
    try:
        value = round_money(parse_amount(amount))
        if value == 0:
            return setting("AMOUNT_WORDS_ZERO")

        # sign kept apart, int(-0.5) would drop it
        negative = value < 0
        value = abs(value)
        units = int(value)
        cents = int((value - Decimal(units)) * 100)

        phrase = f"{num2words(units, lang=lang)} {setting('CURRENCY_UNIT')}"
        if cents:
            phrase += (
                f" {setting('AMOUNT_WORDS_CONJUNCTION')} "
                f"{num2words(cents, lang=lang)} {setting('CURRENCY_CENTS_UNIT')}"
            )
        if negative:
            phrase = f"{setting('AMOUNT_WORDS_MINUS')} {phrase}"
        return phrase[:1].upper() + phrase[1:]
    except Exception as e:
        logger.warning("Amount in words failed for %r (%s): %s", amount, lang, str(e))
        return ""
