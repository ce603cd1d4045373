# microws

`microws` provides building blocks for an HTTP and WebSocket server. It uses
only the standard library.

- `microws.router.HttpRouter` matches a method and a URL against registered
  patterns. A pattern can contain static segments, `:name` parameters and a
  `*` wildcard. Every route has a priority. A handler can decline a request,
  and the router then tries the next route that matches.
- `microws.query.get_decoded_query_value` looks up a key in a raw query string
  such as `?a=1&b=hello+world` and returns its value with percent and plus
  encoding decoded.
- `microws.deflate.DeflationStream` and `microws.deflate.InflationStream`
  handle permessage-deflate compression and decompression of WebSocket
  messages. Window sizes come from `microws.deflate.CompressOptions`.
  Inflation enforces a maximum payload length.
- `microws.behavior.WebSocketBehavior` holds the settings and event handlers
  of a WebSocket route, and checks its timeout settings.
- `microws.useragent.has_broken_compression` recognises Safari 15.0–15.3. Its
  compression support is broken and should be turned off.

## Installation

From a checkout of the project:

```
pip install .
```

## Routing

```python
from microws.router import HttpRouter

router = HttpRouter()

def show_user(r):
    (user_id,) = r.parameters()
    print("user", user_id)
    return True  # handled

router.add(["GET"], "/users/:id", show_user, HttpRouter.MEDIUM_PRIORITY)
router.route("GET", "/users/42")   # prints "user 42", returns True
router.route("GET", "/nothing")    # returns False
```

A handler is called with the router. It returns `True` when it has handled the
request. If it returns `False`, routing moves on to the next candidate.
`parameters()` returns the values of the `:name` segments matched so far, as a
tuple of strings.

Routes registered under the method `"*"` (`HttpRouter.ANY_METHOD_TOKEN`) match
every method, and the router tries them last. The priorities are
`HIGH_PRIORITY`, `MEDIUM_PRIORITY` (the default for `add`) and `LOW_PRIORITY`.
A handler can use the `user_data` attribute to reach data that the caller
attached to the router before it called `route`.

If you add a route again with the same first method, the same pattern and the
same priority, the new route replaces the old one. `remove` deletes a route
and every other route that shares its handler. It returns `False` when it
finds nothing to remove:

```python
router.remove("GET", "/users/:id", HttpRouter.MEDIUM_PRIORITY)
```

## Query values

```python
from microws.query import get_decoded_query_value

get_decoded_query_value("name", "?name=J%C3%B6rg&x=1")   # "Jörg"
get_decoded_query_value(b"x", b"?name=a&x=1")            # b"1"
```

The raw query keeps its leading `?`. The return value is `None` in any of
these cases:

- the key is empty;
- the key is missing;
- the query is malformed;
- a `%` escape is cut short.

A key that is present with an empty value gives an empty string. Text input
returns text and bytes input returns bytes.

## Compression

```python
from microws.deflate import CompressOptions, DeflationStream, InflationStream

deflater = DeflationStream(CompressOptions.DEDICATED_COMPRESSOR)
inflater = InflationStream(CompressOptions.DEDICATED_DECOMPRESSOR)

payload = deflater.deflate(b"hello hello hello", True)
inflater.inflate(payload, 1024, True)  # b"hello hello hello"
```

- `deflate` returns the sync-flushed output with the trailing four-byte marker
  removed.
- `deflate` raises `ValueError` when given an empty message.
- `inflate` returns `None` when the data is corrupt or when the output would
  exceed the maximum payload length.
- Passing `reset=True` to either method starts a fresh stream afterwards.
- The constructors raise `ValueError` when the options do not select a
  dedicated compressor or decompressor.

## WebSocket settings

```python
from microws.behavior import WebSocketBehavior

behavior = WebSocketBehavior(idle_timeout=60, max_payload_length=64 * 1024)
behavior.validate()
```

`validate` returns the behavior itself. It raises `ValueError` in any of these
cases:

- `idle_timeout` is neither 0 nor at least 8 seconds;
- `idle_timeout` is more than 960 seconds;
- `max_lifetime` is more than 240 minutes.

## What this package does not do

There is no server in this package. It does not open sockets, run an event
loop, parse HTTP requests or WebSocket frames, or publish messages to
subscribers. The components above are meant to be used by code that does
those things.

## Running the tests

```
pip install ".[test]"
pytest
```