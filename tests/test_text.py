import json
import xml.etree.ElementTree as ET

from ordserve.text import feed_xml, stats_json, status_text, transfers_text

INSCRIPTION = "0000000000000000000000000000000000000000000000000000000000000000i0"


def test_status_ok():
    assert status_text(False) == "OK"


def test_status_reorg():
    assert status_text(True).startswith("reorg detected")
    assert status_text(True) == "reorg detected, please rebuild the database."


def test_stats_json_exact_format():
    assert stats_json(5, 0, 7) == (
        "{\n"
        '  "highest_block_indexed": 5,\n'
        '  "lowest_inscription_number": 0,\n'
        '  "highest_inscription_number": 7\n'
        "}"
    )


def test_stats_json_nulls():
    parsed = json.loads(stats_json(None, None, None))
    assert parsed == {
        "highest_block_indexed": None,
        "lowest_inscription_number": None,
        "highest_inscription_number": None,
    }


def test_stats_json_key_order():
    assert list(json.loads(stats_json(1, -3, 2))) == [
        "highest_block_indexed",
        "lowest_inscription_number",
        "highest_inscription_number",
    ]


def test_feed_contains_inscription_title():
    xml = feed_xml("regtest", [(0, INSCRIPTION)])
    assert "<title>Inscription 0</title>" in xml


def test_feed_mainnet_title_and_generator():
    root = ET.fromstring(feed_xml("mainnet", []).split("?>", 1)[1])
    channel = root.find("channel")
    assert channel.findtext("title") == "Inscriptions"
    assert channel.findtext("generator") == "ord"
    assert channel.findall("item") == []


def test_feed_other_chain_title():
    root = ET.fromstring(feed_xml("regtest", []).split("?>", 1)[1])
    assert root.find("channel").findtext("title") == "Inscriptions – Regtest"


def test_feed_items_in_order_with_links():
    root = ET.fromstring(
        feed_xml("signet", [(2, "bbi0"), (1, "aai0")]).split("?>", 1)[1]
    )
    items = root.find("channel").findall("item")
    assert [item.findtext("title") for item in items] == ["Inscription 2", "Inscription 1"]
    assert [item.findtext("link") for item in items] == [
        "/inscription/bbi0",
        "/inscription/aai0",
    ]
    assert [item.findtext("guid") for item in items] == [
        "/inscription/bbi0",
        "/inscription/aai0",
    ]


def test_feed_escapes_text():
    xml = feed_xml("mainnet", [(0, "<x>&")])
    assert "<x>&" not in xml
    assert "/inscription/&lt;x&gt;&amp;" in xml


def test_transfers_text_lines():
    assert transfers_text([("ai0", "bc1qexample"), ("bi0", "unbound")]) == (
        "ai0 bc1qexample\nbi0 unbound\n"
    )


def test_transfers_text_unknown_address():
    assert transfers_text([("ci0", None)]) == "ci0 error\n"


def test_transfers_text_empty():
    assert transfers_text([]) == ""