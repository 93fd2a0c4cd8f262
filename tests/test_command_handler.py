import pytest

from lettuce.command_handler import CommandHandler, parse_resp_command
from lettuce.database import Database


@pytest.fixture
def handler():
    return CommandHandler(Database())


def test_parse_resp_array():
    tokens = parse_resp_command("*2\r\n$4\r\nPING\r\n$4\r\nTEST\r\n")
    assert tokens == ["PING", "TEST"]


def test_parse_inline_command():
    assert parse_resp_command("PING TEST") == ["PING", "TEST"]


def test_parse_empty():
    assert parse_resp_command("") == []


def test_parse_accepts_bytes():
    assert parse_resp_command(b"*2\r\n$4\r\nPING\r\n$4\r\nTEST\r\n") == ["PING", "TEST"]


def test_parse_stops_at_truncated_element():
    assert parse_resp_command("*2\r\n$4\r\nPING\r\n$9\r\nTEST\r\n") == ["PING"]


def test_parse_missing_count_terminator():
    assert parse_resp_command("*2") == []


def test_parse_invalid_count_raises():
    with pytest.raises(ValueError):
        parse_resp_command("*x\r\n$4\r\nPING\r\n")


def test_parse_inline_round_trip_whitespace():
    assert parse_resp_command("SET  key\tvalue\r\n") == ["SET", "key", "value"]


def test_ping(handler):
    resp = handler.handle_command("*1\r\n$4\r\nPING\r\n")
    assert "+PONG" in resp


def test_unknown_command(handler):
    resp = handler.handle_command("*1\r\n$5\r\nHELLO\r\n")
    assert "-ERR: Unknown command" in resp


def test_empty_command(handler):
    assert handler.handle_command("") == "-ERR: empty command\r\n"


def test_echo(handler):
    resp = handler.handle_command("*2\r\n$4\r\nECHO\r\n$5\r\nwat\r\n")
    assert resp.startswith("+wat")


def test_echo_requires_argument(handler):
    resp = handler.handle_command("*1\r\n$4\r\nECHO\r\n")
    assert "-ERR: ECHO requires an argument" in resp


def test_command_name_is_case_insensitive(handler):
    assert handler.handle_command("ping") == "+PONG\r\n"


def test_llen(handler):
    handler.handle_command("*3\r\n$5\r\nLPUSH\r\n$6\r\nmylist\r\n$1\r\na\r\n")
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$6\r\nmylist\r\n$1\r\nb\r\n")
    resp = handler.handle_command("*2\r\n$4\r\nLLEN\r\n$6\r\nmylist\r\n")
    assert ":2" in resp


def test_lpop_and_rpop(handler):
    handler.handle_command("*3\r\n$5\r\nLPUSH\r\n$6\r\nmylist\r\n$1\r\nx\r\n")
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$6\r\nmylist\r\n$1\r\ny\r\n")
    lpop_resp = handler.handle_command("*2\r\n$4\r\nLPOP\r\n$6\r\nmylist\r\n")
    assert "$1\r\nx\r\n" in lpop_resp
    rpop_resp = handler.handle_command("*2\r\n$4\r\nRPOP\r\n$6\r\nmylist\r\n")
    assert "$1\r\ny\r\n" in rpop_resp


def test_lrem(handler):
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$6\r\nmylist\r\n$1\r\nf\r\n")
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$6\r\nmylist\r\n$1\r\nf\r\n")
    resp = handler.handle_command("*4\r\n$4\r\nLREM\r\n$6\r\nmylist\r\n$1\r\n0\r\n$1\r\nf\r\n")
    assert ":2" in resp


def test_lindex(handler):
    handler.handle_command("*3\r\n$5\r\nLPUSH\r\n$6\r\nmylist\r\n$1\r\nz\r\n")
    resp = handler.handle_command("*3\r\n$6\r\nLINDEX\r\n$6\r\nmylist\r\n$1\r\n0\r\n")
    assert "$1\r\nz\r\n" in resp


def test_lset(handler):
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$6\r\nmylist\r\n$1\r\na\r\n")
    lset_resp = handler.handle_command("*4\r\n$4\r\nLSET\r\n$6\r\nmylist\r\n$1\r\n0\r\n$1\r\nf\r\n")
    assert "+OK" in lset_resp
    lindex_resp = handler.handle_command("*3\r\n$6\r\nLINDEX\r\n$6\r\nmylist\r\n$1\r\n0\r\n")
    assert "$1\r\nf\r\n" in lindex_resp


def test_lpush_adds_to_left(handler):
    handler.handle_command("*3\r\n$5\r\nLPUSH\r\n$6\r\nmylist\r\n$1\r\na\r\n")
    handler.handle_command("*3\r\n$5\r\nLPUSH\r\n$6\r\nmylist\r\n$1\r\nb\r\n")
    lindex0 = handler.handle_command("*3\r\n$6\r\nLINDEX\r\n$6\r\nmylist\r\n$1\r\n0\r\n")
    lindex1 = handler.handle_command("*3\r\n$6\r\nLINDEX\r\n$6\r\nmylist\r\n$1\r\n1\r\n")
    assert "$1\r\nb\r\n" in lindex0
    assert "$1\r\na\r\n" in lindex1


def test_rpush_adds_to_right(handler):
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$5\r\nlisty\r\n$1\r\nn\r\n")
    handler.handle_command("*3\r\n$5\r\nRPUSH\r\n$5\r\nlisty\r\n$1\r\nj\r\n")
    lindex0 = handler.handle_command("*3\r\n$6\r\nLINDEX\r\n$5\r\nlisty\r\n$1\r\n0\r\n")
    lindex1 = handler.handle_command("*3\r\n$6\r\nLINDEX\r\n$5\r\nlisty\r\n$1\r\n1\r\n")
    assert "$1\r\nn\r\n" in lindex0
    assert "$1\r\nj\r\n" in lindex1


def test_set_get_inline(handler):
    assert handler.handle_command("SET greeting hi") == "+OK\r\n"
    assert handler.handle_command("GET greeting") == "$2\r\nhi\r\n"
    assert handler.database.get("greeting") == "hi"


def test_default_database_is_shared_instance():
    assert CommandHandler().database is Database.get_instance()