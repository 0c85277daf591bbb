from http import HTTPStatus

import pytest

from ordserve.errors import BadRequest
from ordserve.routing import (
    MAX_JSON_INSCRIPTIONS,
    BlockQuery,
    check_json_range,
    check_sat_range,
    parse_block_query,
    redirect_target,
    search_location,
)

GENESIS = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
ZEROS = "0" * 64


def _no_blocks(_query):
    return False


def _known(*hashes):
    return lambda query: query in hashes


def test_block_query_height():
    query = parse_block_query("0")
    assert query.height == 0
    assert query.block_hash is None
    assert not query.is_hash


def test_block_query_hash():
    query = parse_block_query(GENESIS)
    assert query.block_hash == GENESIS
    assert query.height is None
    assert query.is_hash
    assert str(query) == GENESIS


def test_block_query_hash_is_lowercased():
    assert parse_block_query(GENESIS.upper()).block_hash == GENESIS


def test_block_query_invalid_height():
    with pytest.raises(BadRequest) as info:
        parse_block_query("=")
    assert info.value.body() == "Invalid URL: invalid digit found in string"
    assert info.value.status == HTTPStatus.BAD_REQUEST


def test_block_query_empty_height():
    with pytest.raises(BadRequest, match="empty string"):
        parse_block_query("")


def test_block_query_height_too_large():
    with pytest.raises(BadRequest, match="too large"):
        parse_block_query(str(2**64))


def test_block_query_max_height():
    assert parse_block_query(str(2**64 - 1)).height == 2**64 - 1


def test_block_query_invalid_hash():
    with pytest.raises(BadRequest, match="Invalid URL"):
        parse_block_query("g" * 64)


def test_block_query_needs_exactly_one_field():
    with pytest.raises(ValueError):
        BlockQuery()
    with pytest.raises(ValueError):
        BlockQuery(height=1, block_hash=GENESIS)


def test_search_returns_sat():
    assert search_location("0", _no_blocks) == "/sat/0"


def test_search_returns_inscription():
    assert (
        search_location(f"{ZEROS}i0", _no_blocks) == f"/inscription/{ZEROS}i0"
    )


def test_search_is_whitespace_insensitive():
    assert search_location(" 0 ", _no_blocks) == "/sat/0"


def test_search_for_blockhash_returns_block():
    assert search_location(GENESIS, _known(GENESIS)) == f"/block/{GENESIS}"


def test_search_for_txid_returns_transaction():
    assert search_location(ZEROS, _known(GENESIS)) == f"/tx/{ZEROS}"


def test_search_for_outpoint_returns_output():
    assert search_location(f"{ZEROS}:0", _no_blocks) == f"/output/{ZEROS}:0"


def test_search_hash_with_trailing_newline_is_trimmed():
    assert search_location(f"{GENESIS}\n", _known(GENESIS)) == f"/block/{GENESIS}"


def test_search_short_hex_is_a_sat():
    assert search_location("abc", _no_blocks) == "/sat/abc"


def test_range_end_before_start():
    with pytest.raises(BadRequest) as info:
        check_sat_range(1, 0)
    assert info.value.body() == "range start greater than range end"


def test_empty_range():
    with pytest.raises(BadRequest) as info:
        check_sat_range(0, 0)
    assert info.value.body() == "empty range"


def test_range_value():
    sats = check_sat_range(0, 1)
    assert len(sats) == 1
    assert sats[0] == 0


def test_json_range_empty():
    with pytest.raises(BadRequest) as info:
        check_json_range(5, 5)
    assert info.value.body() == "range length == 0"


def test_json_range_negative():
    with pytest.raises(BadRequest) as info:
        check_json_range(6, 5)
    assert info.value.body() == "range length < 0"


def test_json_range_too_long():
    with pytest.raises(BadRequest) as info:
        check_json_range(0, MAX_JSON_INSCRIPTIONS + 1)
    assert info.value.body() == "range length > 1000"


def test_json_range_at_limit():
    numbers = check_json_range(-1, 999)
    assert len(numbers) == 1000
    assert list(numbers)[:2] == [-1, 0]


def test_redirect_with_path():
    assert redirect_target("https://example.com", "/sat/0") == "https://example.com/sat/0"


def test_redirect_with_root():
    assert redirect_target("https://example.com", "/") == "https://example.com/"


def test_redirect_with_query_and_port():
    assert (
        redirect_target("https://example.com:8443", "/search?query=0")
        == "https://example.com:8443/search?query=0"
    )


def test_redirect_without_path():
    assert redirect_target("https://example.com", None) == "https://example.com"