"""Tests for JSON and XML body conversion."""

import json

import pytest
import xmltodict

from hikvision_isapi.codec import decode_body, encode_body, encode_xml, parse_xml
from hikvision_isapi.const import XML_NAMESPACE, Format


def test_encode_xml_single_root():
    xml = encode_xml({"HttpHostNotification": {"id": 1, "enabled": True, "url": "/x"}})

    assert xml.startswith('<?xml version="1.0" encoding="utf-8"?>')
    document = xmltodict.parse(xml)
    root = document["HttpHostNotification"]
    assert root["@version"] == "2.0"
    assert root["@xmlns"] == XML_NAMESPACE
    assert root["id"] == "1"
    assert root["enabled"] == "true"
    assert root["url"] == "/x"


def test_encode_xml_repeated_elements():
    xml = encode_xml({"HttpHostNotification": {"eventList": {"eventType": ["AccessControllerEvent", "VMD"]}}})

    assert "<eventType>AccessControllerEvent</eventType><eventType>VMD</eventType>" in xml


def test_encode_xml_escapes_text():
    xml = encode_xml({"UserInfo": {"name": "Tom & <Jerry>"}})

    assert "Tom &amp; &lt;Jerry&gt;" in xml
    assert xmltodict.parse(xml)["UserInfo"]["name"] == "Tom & <Jerry>"


def test_encode_xml_fallback_root(caplog):
    xml = encode_xml({"employeeNo": "1", "name": "John"})

    root = xmltodict.parse(xml)["UserInfo"]
    assert root["employeeNo"] == "1"
    assert root["name"] == "John"
    assert "no single root key" in caplog.text


def test_encode_xml_scalar_root():
    root = xmltodict.parse(encode_xml({"enabled": False}))["enabled"]

    assert root["#text"] == "false"


def test_encode_body():
    payload = {"UserInfoSearchCond": {"maxResults": 30}}

    assert encode_body(None, Format.JSON) is None
    assert encode_body("<raw/>", Format.JSON) == "<raw/>"
    assert encode_body(b"\x00", Format.XML) == b"\x00"
    assert json.loads(encode_body(payload, Format.JSON)) == payload
    assert xmltodict.parse(encode_body(payload, Format.XML))["UserInfoSearchCond"]["maxResults"] == "30"


def test_parse_xml_drops_envelope_attributes():
    xml = encode_xml({"HttpHostNotification": {"id": 1, "url": "/"}})

    assert parse_xml(xml) == {"HttpHostNotification": {"id": "1", "url": "/"}}


def test_parse_xml_text_root():
    xml = '<?xml version="1.0"?><statusString version="2.0" xmlns="x">OK</statusString>'

    assert parse_xml(xml) == {"statusString": "OK"}


@pytest.mark.parametrize(
    "body, content_type, expected",
    [
        ('{"statusCode": 1}', "application/json", {"statusCode": 1}),
        ('{"statusCode": 1}', "application/json; charset=UTF-8", {"statusCode": 1}),
        ("<ResponseStatus><statusCode>1</statusCode></ResponseStatus>", "application/xml", {"ResponseStatus": {"statusCode": "1"}}),
        ("<ResponseStatus><statusCode>1</statusCode></ResponseStatus>", 'text/xml; charset="UTF-8"', {"ResponseStatus": {"statusCode": "1"}}),
        ("OK", "text/plain", {"raw": "OK"}),
        ("OK", None, {"raw": "OK"}),
        ("", "application/json", {}),
        ("  ", "application/xml", {}),
        ("{not json", "application/json", {"raw": "{not json"}),
        ("<unclosed>", "application/xml", {"raw": "<unclosed>"}),
    ],
)
def test_decode_body(body, content_type, expected):
    assert decode_body(body, content_type) == expected


def test_xml_round_trip():
    payload = {
        "HttpHostNotification": {
            "id": "1",
            "url": "/api/events",
            "portNo": "8123",
            "enabled": "true",
            "eventList": {"eventType": ["VMD", "linedetection"]},
        }
    }

    assert decode_body(encode_xml(payload), "application/xml") == payload
