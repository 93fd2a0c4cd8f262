# lettuce

lettuce is a small in-memory data store. It speaks a subset of the Redis
serialization protocol (RESP) over TCP. It keeps strings and lists, and it
saves its contents to a plain-text dump file named `dump.ldb`.

## Installation

```
pip install .
```

## Running the server

```
lettuce-server          # listens on port 6379
lettuce-server 6390     # listens on a custom port
```

At startup the server loads `dump.ldb` from the current directory. It prints
`Database loaded from dump.ldb` if it finds the file and
`No dump.ldb file found` if it does not. While the server runs, a background
thread saves the database to the same file every five minutes. The server
also saves it after each client disconnects. Press Ctrl+C to stop the server.

The server listens on all interfaces. It serves one client at a time: it
accepts the next connection only after the current client disconnects. Each
read takes up to 1023 bytes and is handled as one request. Progress is
logged at INFO level.

You can talk to it with any Redis client, or with plain inline text:

```
$ printf 'PING\r\n' | nc localhost 6379
+PONG
```

If a request starts with `*`, it is read as a RESP array of bulk strings.
Parsing stops at the first malformed element. Any other request is split on
whitespace. Command names are not case-sensitive.

## Supported commands

| Command | Reply |
|---|---|
| `PING` | `+PONG` |
| `ECHO msg` | `+msg` |
| `FLUSHALL` | `+OK` |
| `SET key value` | `+OK` |
| `GET key` | bulk string, or `$-1` if the key is missing |
| `KEYS` | array of all keys (strings, then lists, then hashes) |
| `TYPE key` | `string`, `list`, `hash` or `none` |
| `DEL key` | `:1` if something was deleted, otherwise `:0` |
| `EXPIRE key seconds` | `:1` if the key exists, otherwise `:0` |
| `RENAME old new` | `:1` if the key was renamed, otherwise `:0` |
| `LLEN key` | length of the list (`:0` if it is missing) |
| `LPUSH key value` / `RPUSH key value` | new length of the list |
| `LPOP key` / `RPOP key` | popped element, or `$-1` |
| `LREM key count value` | number of elements removed |
| `LINDEX key index` | element at the index (negative counts from the tail), or `$-1` |
| `LSET key index value` | `+OK`, or `-ERR: Index out of range` |

If a command is missing arguments, the reply is an `-ERR: ...` message. An
unknown command gets `-ERR: Unknown command`, and an empty request gets
`-ERR: empty command`.

For `LREM`, a count of `0` removes every occurrence. A positive count removes
at most that many occurrences, starting from the head. A negative count
removes nothing.

## What it does not do

- Keys never expire. `EXPIRE` records a deadline, but nothing acts on it.
- No command creates or reads hashes. The store holds a hash only if one is
  loaded from a dump file. `TYPE`, `KEYS`, `DEL` and `RENAME` still see it.
- The dump file separates fields with whitespace. A value that contains
  whitespace is not restored unchanged by a dump and load.
- The server drops the connection on a malformed count or length in a RESP
  request, or on a non-numeric `EXPIRE` time. It does not send an error reply
  in these cases.

## Using it as a library

```python
from lettuce.database import Database
from lettuce.command_handler import CommandHandler, parse_resp_command

db = Database.get_instance()
db.rpush("fruits", "apple")
db.lindex("fruits", 0)          # "apple"
db.lpop("missing")              # None

handler = CommandHandler(db)
handler.handle_command("*1\r\n$4\r\nPING\r\n")   # "+PONG\r\n"

parse_resp_command("*2\r\n$4\r\nECHO\r\n$2\r\nhi\r\n")  # ["ECHO", "hi"]
```

`Database.get_instance()` returns one shared database for the process.
`CommandHandler()` uses that shared database when it is given none.
`Database.dump(filename)` and `Database.load(filename)` write and read the
dump format. Both raise `OSError` when the file cannot be written or read.
The functions in `lettuce.handlers`, such as `handle_get(tokens, db)`, each
run one command against a database and return the RESP reply.

`lettuce.server.LettuceServer(port)` provides the TCP server. Its `run()`
method blocks and serves clients until `shutdown()` is called. `run()` sets
the `ready` event once the socket is listening. If you pass port `0`, the
`port` attribute holds the port that was actually bound.

## Running the tests

```
pip install '.[test]'
pytest
```