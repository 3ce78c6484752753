from datetime import date, datetime
from decimal import Decimal
from xml.dom.minidom import parseString

import pytest

from tests.models import Address, Color, Measurement, Pair, Person, Point, Priority, TreeNode
from xmlmarshal import Unmarshaller

ENVELOPE_XML = """
<envelope xmlns:t="urn:test">
    <header>ignored</header>
    <body>
        <t:pair>
            <first>a</first>
            <second>b</second>
        </t:pair>
    </body>
</envelope>
"""


def test_unmarshal_text():
    xml = '<?xml version="1.0" encoding="UTF-8"?>\n<point>\n    <x>1</x>\n    <y>2</y>\n</point>'
    assert Unmarshaller().unmarshal(xml, Point) == Point(1, 2)


def test_unmarshal_bytes():
    assert Unmarshaller().unmarshal(b"<point><x>-5</x><y>7</y></point>", Point) == Point(-5, 7)


def test_unmarshal_namespaced_root():
    xml = '<p:person xmlns:p="urn:people"><name>Ada</name><age>36</age></p:person>'
    assert Unmarshaller().unmarshal(xml, Person) == Person("Ada", 36)


def test_default_namespace_children_match_by_local_name():
    xml = '<person xmlns="urn:people"><name>Ada</name><age>36</age><favorite>green</favorite></person>'
    assert Unmarshaller().unmarshal(xml, Person) == Person("Ada", 36, favorite=Color.GREEN)


def test_missing_elements_take_defaults():
    person = Unmarshaller().unmarshal(
        '<ns0:person xmlns:ns0="urn:people"><name>Ada</name><age>36</age></ns0:person>', Person
    )
    assert person.email is None
    assert person.addresses == []
    assert person.tags == []
    assert person.favorite is Color.RED


def test_single_and_repeated_list_items():
    xml = """
    <ns0:person xmlns:ns0="urn:people">
        <name>Ada</name>
        <age>36</age>
        <addresses><street>1 Main St</street><city>London</city><zip>N1</zip></addresses>
        <tags>math</tags>
    </ns0:person>
    """
    person = Unmarshaller().unmarshal(xml, Person)
    assert person.addresses == [Address("1 Main St", "London", "N1")]
    assert person.tags == ["math"]


def test_scalar_conversions():
    xml = """
    <measurement>
        <label>probe</label>
        <value>0.25</value>
        <exact>1.10</exact>
        <valid>1</valid>
        <taken_on>2024-05-01</taken_on>
        <recorded_at>2024-05-01T12:30:00</recorded_at>
        <priority>2</priority>
        <note></note>
    </measurement>
    """
    assert Unmarshaller().unmarshal(xml, Measurement) == Measurement(
        label="probe",
        value=0.25,
        exact=Decimal("1.10"),
        valid=True,
        taken_on=date(2024, 5, 1),
        recorded_at=datetime(2024, 5, 1, 12, 30),
        priority=Priority.HIGH,
        note=None,
    )


def test_text_is_not_stripped():
    pair = Unmarshaller().unmarshal_from_document(
        parseString("<pair><first>  a  </first><second/></pair>"), Pair
    )
    assert pair == Pair("  a  ", "")


def test_unknown_elements_and_attributes_are_ignored():
    xml = '<point version="2"><x unit="m">1</x><y>2</y><z>3</z></point>'
    assert Unmarshaller().unmarshal(xml, Point) == Point(1, 2)


def test_unmarshal_from_element_inside_larger_document():
    document = parseString(ENVELOPE_XML)
    (element,) = document.getElementsByTagNameNS("urn:test", "pair")
    assert Unmarshaller().unmarshal_from_document(element, Pair) == Pair("a", "b")


def test_unmarshal_from_document_ignores_element_name():
    document = parseString("<whatever><x>1</x><y>2</y></whatever>")
    assert Unmarshaller().unmarshal_from_document(document, Point) == Point(1, 2)


def test_unmarshal_recursive_type_from_document():
    document = parseString(
        "<node><name>root</name><children><name>a</name></children>"
        "<children><name>b</name><children><name>c</name></children></children></node>"
    )
    assert Unmarshaller().unmarshal_from_document(document.documentElement, TreeNode) == TreeNode(
        "root", [TreeNode("a"), TreeNode("b", [TreeNode("c")])]
    )


@pytest.mark.parametrize("text", ["true", "TRUE", " 1 "])
def test_boolean_true_spellings(text):
    xml = (
        "<measurement><label>l</label><value>1</value><exact>1</exact>"
        f"<valid>{text}</valid><taken_on>2024-01-01</taken_on>"
        "<recorded_at>2024-01-01T00:00:00</recorded_at><priority>1</priority></measurement>"
    )
    assert Unmarshaller().unmarshal(xml, Measurement).valid is True
