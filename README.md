# ringsnode

Client-side tooling for a node of a Chord-based peer-to-peer network.
It talks to a running node over JSON-RPC, loads seed files, reads and writes
node configuration as YAML, and keeps periodic per-peer message counters.

## What is in the package

- `ringsnode.cli.Client` — a high-level client for a node's JSON-RPC endpoint.
  Every request carries an `X-SIGNATURE` header with the signature given to
  the constructor. Its methods are `connect_peer_via_http`,
  `connect_with_seed`, `answer_offer`, `connect_with_did`, `create_offer`,
  `accept_answer`, `list_peers`, `disconnect`, `list_pendings`,
  `close_pending_transport`, `send_message`, `send_custom_message`
  (message type 0 to 65535, base64 data), `send_simple_text_message`,
  `register_service`, `lookup_service`, `publish_message_to_topic` and
  `subscribe_topic`. Each call except `subscribe_topic` returns a
  `ClientOutput` holding the decoded `result` and a `display` text;
  `show()` prints the display text.
- `ringsnode.rpc_client.SimpleClient` — a plain JSON-RPC 2.0 client over
  HTTP with `call_method` and `notify`. An error object from the server is
  raised as `JsonRpcError`, HTTP and connection problems as `ClientError`,
  and unparseable replies as `ResponseParseError`; all derive from `RpcError`
  in `ringsnode.rpc_request`.
- `ringsnode.rpc_request` — `RequestBuilder` (`single_request`,
  `call_request`, `subscribe_request`, `unsubscribe_request`,
  `notification`) builds request bodies with ids counting up from 0;
  `parse_response` decodes a success, a failure or a subscription
  notification into a `ParsedResponse`.
- `ringsnode.method.Method` — the names of the RPC methods a node serves;
  `Method.parse("listPeers")` gives the member, and an unknown name raises
  `NodeError` with kind `INVALID_METHOD`.
- `ringsnode.response` — the `Peer`, `TransportInfo` and `TransportAndIce`
  records a node returns, with `from_dict`, `to_json_obj`, and for `Peer`
  and `TransportAndIce` also `to_json_bytes` and `base64_encode`. A missing
  state defaults to `"Unknown"`.
- `ringsnode.seed` — `Seed` and `SeedPeer`; `Seed.load(source)` reads a seed
  list from a `file://` URL or fetches it over HTTP. `load_resource` does the
  same for any JSON document.
- `ringsnode.params.parse_params` — turns `None`, a list or a dict into
  JSON-RPC params.
- `ringsnode.config` — `Config`, `StorageConfig` and `HiddenServerConfig`,
  with `Config.write_fs(path)` and `Config.read_fs(path)` for YAML files
  (a leading `~` expands to `$HOME`), and `get_storage_location`.
- `ringsnode.measure` — `PeriodicMeasure` counts messages sent to and
  received from each peer (`MeasureCounter.SENT`, `MeasureCounter.RECEIVED`)
  per period, one hour by default. `get_count` reports the previous period's
  count, or the running count while the previous period saw nothing. Counts
  are saved in a `JsonFileStorage`, a key-value store kept in one JSON file.
- `ringsnode.error` — `NodeError` and `ErrorKind`; `to_rpc_error()` gives
  the JSON-RPC error object, with codes counting down from `-32000`.
- `ringsnode.util` — `build_version()`, `IceConnectionState`,
  `ice_state_to_str` and `ice_state_from_str`.
- `ringsnode.logsetup` — `init_logging(level)` adds a stderr handler at a
  `LogLevel` (or a numeric level) and installs an exception hook that logs
  uncaught exceptions; `install_exception_hook()` does only the latter.

## Example

```python
from ringsnode.cli import Client

client = Client("http://127.0.0.1:50000", "placeholder")

offer = client.create_offer()
offer.show()
print(offer.result.transport_id, offer.result.ice)

client.list_peers().show()

for message in client.subscribe_topic("news", 5):
    print(message)
```

`subscribe_topic` waits the given interval in seconds before each fetch,
yields every new message, and never ends; failed or malformed fetches are
logged and retried.

## Configuration

```python
from ringsnode.config import Config

config = Config.generate()
written_to = config.write_fs("~/.rings/config.yaml")
same = Config.read_fs(written_to)
```

`Config.generate()` makes a random 32-byte hex key; `Config.new_with_key(key)`
uses the one given. Defaults: `http_addr` (stored as `bind`) is
`127.0.0.1:50000`, `endpoint_url` is `http://127.0.0.1:50000`, `ice_servers`
is a public STUN server, `stabilize_timeout` is 20, `backend` holds one
`ipfs` entry, and data and measure storage live under `~/.rings/data` and
`~/.rings/measure` with a capacity of 200000000. Read and write failures
raise `NodeError`.

## What the package does not do

It does not run a node. There is no JSON-RPC server, no WebRTC transport,
no DHT or storage of the network's data, and no TURN server; the client
needs a running node to talk to. The package installs no command; use
`Client` from Python.

## Running the tests

Install the `test` extra and run `pytest` from the project root.