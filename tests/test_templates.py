from decimal import Decimal
from conftest import hydrated
from pdf_templates.field_path import NOT_FOUND, FieldPath, Found
from pdf_templates.nodes import GroupNode, ItemsTableSlot, TextNode, parse_layout
from pdf_templates.placeholders import PlaceholderKind, build_context, substitute_tokens
from pdf_templates.substitution import items_table_slots, substitute


# -- field paths ------------------------------------------------------------ #

def test_field_path_resolves_nested_values():
    data = {"client": {"name": "Atlas"}, "items": [{"total": 5}]}
    assert FieldPath("client.name").resolve(data) == Found("Atlas")
    assert FieldPath("items.0.total").resolve(data) == Found(5)


def test_field_path_missing_values():
    data = {"client": {"name": None}, "items": []}
    assert FieldPath("client.name").resolve(data) is NOT_FOUND
    assert FieldPath("client.city").resolve(data) is NOT_FOUND
    assert FieldPath("items.3").resolve(data) is NOT_FOUND
    assert FieldPath("client..name").resolve(data) is NOT_FOUND
    assert FieldPath("").resolve(data) is NOT_FOUND


def test_falsy_values_are_still_found():
    assert FieldPath("count").resolve({"count": 0}) == Found(0)


# -- token substitution ----------------------------------------------------- #

def test_tokens_are_replaced_and_unknown_tokens_kept():
    context = build_context(hydrated(), currency="DZD")
    text = substitute_tokens("Facture {{number}} pour {{ client.name }} - {{unknown.path}}", context)
    assert text == "Facture FAC-2024-0001 pour Sarl Atlas - {{unknown.path}}"


def test_money_values_are_formatted():
    context = build_context(hydrated(), currency="DZD")
    assert substitute_tokens("{{total}}", context) == "321,30 DZD"


def test_rates_are_formatted_as_percentages():
    context = build_context(hydrated(), currency="DZD")
    text = substitute_tokens("TVA {{items.0.tax_rate}} remise {{items.0.discount}}", context)
    assert text == "TVA 19 % remise 10 %"
    assert substitute_tokens("{{items.0.unit_price}}", context) == "100,00 DZD"


def test_company_fallbacks_in_context():
    context = build_context(hydrated(), company=None)
    assert substitute_tokens("{{company.business_name}}", context) == "YOUR COMPANY NAME"


def test_placeholder_kind_from_field():
    assert PlaceholderKind.from_field("items_table") == PlaceholderKind.ITEMS_TABLE
    assert PlaceholderKind.from_field("client-info") == PlaceholderKind.CLIENT_INFO
    assert PlaceholderKind.from_field("logo") is None
    assert PlaceholderKind.from_field(None) is None


# -- layout parsing and substitution ----------------------------------------- #

LAYOUT = {
    "objects": [
        {"type": "textbox", "left": 40, "top": 30, "width": 300, "text": "N° {{number}}", "fontSize": 18,
         "fontWeight": "bold"},
        {"type": "group", "left": 40, "top": 120, "width": 300, "height": 80, "dataField": "client-info",
         "objects": [
             {"type": "text", "left": 0, "top": 0, "text": "CLIENT"},
             {"type": "text", "left": 0, "top": 20, "text": "{{name}} ({{taxid}})"},
         ]},
        {"type": "group", "left": 40, "top": 300, "width": 714, "height": 200,
         "objects": [
             {"type": "rect", "left": 0, "top": 0, "width": 714, "height": 30, "fill": "#2980B9"},
             {"type": "text", "left": 10, "top": 5, "text": "{{items_table}}"},
         ]},
        {"type": "text", "left": 500, "top": 900, "width": 200, "text": "", "dataField": "totals-section"},
        {"type": "triangle", "left": 0, "top": 0},
    ]
}


def test_parse_layout_skips_unknown_types():
    nodes = parse_layout(LAYOUT)
    assert [type(n).__name__ for n in nodes] == ["TextNode", "GroupNode", "GroupNode", "TextNode"]
    assert nodes[0].bold is True
    assert parse_layout(None) == []


def test_text_align_moves_anchor():
    node = parse_layout([{"type": "text", "left": 100, "top": 0, "width": 200, "text": "x", "textAlign": "center"}])[0]
    assert node.align == "center"
    assert node.left == 200


def test_substitute_fills_text_and_named_placeholders():
    context = build_context(hydrated(), currency="DZD")
    nodes = substitute(parse_layout(LAYOUT), context)

    assert nodes[0].text == "N° FAC-2024-0001"
    client_group = nodes[1]
    assert client_group.children[1].text == "Sarl Atlas (000016001234567)"
    totals = [n for n in nodes if isinstance(n, TextNode) and n.data_field == "totals-section"][0]
    assert "Total TTC: 321,30 DZD" in totals.text


def test_items_table_token_becomes_absolute_slot():
    context = build_context(hydrated(), currency="DZD")
    nodes = substitute(parse_layout(LAYOUT), context)
    slots = items_table_slots(nodes)
    # the whole group carrying the token is the table area
    assert slots == [ItemsTableSlot(left=40, top=300, width=714, height=200)]
    assert not any(isinstance(n, GroupNode) and n.top == 300 for n in nodes)


def test_items_table_data_field_inside_group_is_lifted_out():
    layout_data = {"objects": [
        {"type": "group", "left": 20, "top": 400, "width": 700, "height": 300, "objects": [
            {"type": "text", "left": 0, "top": 0, "text": "Articles"},
            {"type": "rect", "left": 0, "top": 40, "width": 700, "height": 200, "dataField": "items_table"},
        ]},
    ]}
    nodes = substitute(parse_layout(layout_data), build_context(hydrated()))
    group, slot = nodes
    assert len(group.children) == 1
    assert slot == ItemsTableSlot(left=20, top=440, width=700, height=200)


def test_client_info_without_tokens_gets_standard_block():
    layout_data = [{"type": "textbox", "left": 0, "top": 0, "text": "", "dataField": "client-info"}]
    node = substitute(parse_layout(layout_data), build_context(hydrated()))[0]
    assert node.text.splitlines()[0] == "Sarl Atlas"
    assert "NIF: 000016001234567" in node.text


def test_stamp_tax_line_only_when_applicable():
    document = hydrated(payment_type="cash", stamp_tax=Decimal("3.21"), amount_payable=Decimal("324.51"))
    layout_data = [{"type": "text", "left": 0, "top": 0, "text": "", "dataField": "totals-section"}]
    node = substitute(parse_layout(layout_data), build_context(document))[0]
    assert "Droit de timbre: 3,21 DZD" in node.text
    assert node.text.endswith("Total TTC: 324,51 DZD")
