# ordserve

`ordserve` is a small HTTP explorer for an ordinals chain index. It answers
questions about blocks (count, height, hash, time). It serves the raw content
of inscriptions and redirects searches to the page a query names. It also
publishes status, stats and an RSS feed of recent inscriptions. A separate
module maintains a log of inscription transfers kept by block height.

## Installation

```
pip install .
```

To run the tests, install the test extra and call pytest:

```
pip install ".[test]"
pytest
```

## Running the server

```
ordserve --address 127.0.0.1 --http-port 8080 --index-file index.json
```

The command serves plain HTTP until it is interrupted. It accepts these options:

- `--address ADDRESS`: address to listen on. The default is `0.0.0.0`.
- `--http-port PORT`: HTTP port. The default is 80.
- `--http`: serve HTTP. This is already the default.
- `--index-file PATH`: a JSON file holding the index. Without it the index is
  empty.
- `--chain NAME`: chain name, used in the feed title. The default is `mainnet`.
- `--https`, `--https-port`, `--acme-domain`, `--acme-contact`,
  `--acme-cache`, `--redirect-http-to-https`: these are parsed. Asking for
  HTTPS in any way makes the command exit with an error, though, because it
  cannot obtain certificates. As a result, HTTP-to-HTTPS redirection is not
  available from the command.

The index file is a JSON object like this:

```json
{
  "blocks": [["<block hash>", 1231006505]],
  "inscriptions": [
    {"id": "<txid>i0", "content_type": "text/plain;charset=utf-8", "body": "hello"}
  ],
  "reorged": false
}
```

`blocks` lists `[hash, unix timestamp]` pairs in height order. `inscriptions`
lists entries in number order. An inscription's `body` is stored as UTF-8 text
and may be `null`.

### Endpoints

- `/status`: `OK`, or a warning if the index is marked as reorged.
- `/blockcount`, `/blockheight`, `/blockhash`, `/blockhash/{height}`,
  `/blocktime`: plain-text block facts. An unknown block gives 404.
- `/stats`: JSON with the highest block indexed and the lowest and highest
  inscription numbers.
- `/content/{inscription_id}`: the inscription's body, with its content type,
  two content-security-policy headers and a cache-control header. An unknown
  inscription, or one with no body, gives 404.
- `/feed.xml`: an RSS feed of the newest 300 inscriptions.
- `/search?query=...` and `/search/{query}`: a 303 redirect to `/block/`,
  `/tx/`, `/output/`, `/inscription/` or `/sat/`, depending on the query.
- `/ordinal/{sat}`, `/install.sh`, `/faq`, `/bounties`: 303 redirects.

Every response gets a default `content-security-policy` header and a
`strict-transport-security` header. CORS allows GET from any origin.
Responses are gzip-compressed when the client accepts gzip.

## Using it as a library

`ordserve.app.create_app(index, chain_name="mainnet", redirect_destination=None)`
builds a Starlette application over a `ordserve.app.ChainIndex`, or over any
object with the same methods. If `redirect_destination` is given, the
application instead answers every request with a 303 redirect to that base
URL followed by the request's path and query.

These modules provide the pieces:

- `ordserve.routing`: `parse_block_query` and `BlockQuery`, which read a block
  path segment. `search_location` works out a search redirect.
  `check_sat_range` and `check_json_range` check ranges (a JSON range holds at
  most 1000 items). `redirect_target` builds a redirect URL.
- `ordserve.content`: `content_response` gives the headers and body for an
  inscription's content. `favicon_asset` picks the PNG favicon for Safari and
  the SVG favicon for other browsers.
- `ordserve.text`: `status_text`, `stats_json`, `feed_xml` and
  `transfers_text`.
- `ordserve.settings`: `ServerSettings`, `build_parser`, `parse_server_args`
  and `acme_cache`. These cover option parsing, port selection, ACME domains
  (the host name by default) and the HTTPS redirect base.
- `ordserve.errors`: `ServerError` and its subclasses `BadRequest`, `NotFound`
  and `InternalError`, each carrying an HTTP status. There is also
  `ok_or_not_found`.
- `ordserve.transfer`: `TransferLog` holds `(height, record)` rows.
  `run_transfer(log, delete=False, trim=None)` deletes the log, or trims the
  records below a height. It prints and returns what it did and how many rows
  remain. Passing both `delete` and `trim` raises `ValueError`.

## What it does not do

- It does not read or follow a node. The index is fixed when the server starts.
- It does not render HTML pages for blocks, transactions, outputs, sats,
  ranges, inscriptions or previews. Search redirects may therefore point at
  paths that this server answers with 404.
- It does not serve static assets.
- It does not serve HTTPS or obtain TLS certificates.
- It has no command for the transfer log. That module is a library only.