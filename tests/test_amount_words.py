from decimal import Decimal
from exports.amount_words import amount_in_words


def test_zero_uses_fixed_phrase():
    assert amount_in_words(0) == "Zéro dinar algérien"
    assert amount_in_words("0.00") == "Zéro dinar algérien"


def test_whole_amount_has_no_cents_clause():
    words = amount_in_words(Decimal("100.00"))
    assert words == "Cent dinars algériens"
    assert "centimes" not in words


def test_amount_with_cents():
    words = amount_in_words(Decimal("1250.50"))
    assert words.startswith("Mille deux cent cinquante dinars algériens")
    assert words.endswith("et cinquante centimes")


def test_first_letter_is_capitalised():
    assert amount_in_words(21)[0].isupper()


def test_failure_returns_empty_string():
    assert amount_in_words(10, lang="xx-not-a-language") == ""


def test_config_overrides_currency(app):
    app.config["CURRENCY_UNIT"] = "euros"
    app.config["CURRENCY_CENTS_UNIT"] = "cents"
    assert amount_in_words(Decimal("2.05")) == "Deux euros et cinq cents"


def test_negative_amounts_keep_their_sign():
    assert amount_in_words(Decimal("-100")) == "Moins cent dinars algériens"
    words = amount_in_words(Decimal("-0.50"))
    assert words.startswith("Moins zéro dinars algériens")
    assert words.endswith("et cinquante centimes")
