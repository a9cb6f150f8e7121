import pytest

from logpull_exporter.collection.aggregator import ResponseAggregator, decode_response
from logpull_exporter.domain.exceptions import DecodeError


def _line(host: str, edge: int, origin: int) -> str:
    return (
        f'{{"ClientRequestHost": "{host}", "EdgeResponseStatus": {edge}, '
        f'"OriginResponseStatus": {origin}}}'
    )


def test_decode_response_builds_label_key():
    record = decode_response(_line("example.org", 200, 502))
    assert record.key() == ("example.org", "200", "502")


def test_decode_response_defaults_missing_fields():
    record = decode_response('{"ClientRequestHost": "example.org"}')
    assert record.key() == ("example.org", "0", "0")


def test_decode_response_raises_on_malformed_json():
    with pytest.raises(DecodeError):
        decode_response('{"ClientRequestHost": ')


def test_consume_counts_identical_triples():
    lines = [
        _line("a.example", 200, 200),
        _line("a.example", 200, 200),
        _line("b.example", 404, 404),
        _line("a.example", 200, 200),
        "",
    ]

    counts = ResponseAggregator().consume(lines).counts()

    assert counts == {
        ("a.example", "200", "200"): 3,
        ("b.example", "404", "404"): 1,
    }


def test_consume_stops_at_first_bad_record():
    aggregator = ResponseAggregator()
    lines = iter([_line("a.example", 200, 200), "not json", _line("b.example", 200, 200)])

    with pytest.raises(DecodeError):
        aggregator.consume(lines)

    assert aggregator.counts() == {("a.example", "200", "200"): 1}
    assert next(lines) == _line("b.example", 200, 200)


def test_aggregators_do_not_share_state():
    first = ResponseAggregator().consume([_line("a.example", 200, 200)])
    second = ResponseAggregator()

    assert len(first) == 1
    assert len(second) == 0


def test_decode_response_treats_null_fields_as_zero_values():
    record = decode_response(
        '{"ClientRequestHost": null, "EdgeResponseStatus": null, '
        '"OriginResponseStatus": null}'
    )
    assert record.key() == ("", "0", "0")


@pytest.mark.parametrize(
    "line",
    [
        '{"ClientRequestHost": "h", "EdgeResponseStatus": "200", "OriginResponseStatus": 200}',
        '{"ClientRequestHost": "h", "EdgeResponseStatus": 200, "OriginResponseStatus": true}',
        '{"ClientRequestHost": 42, "EdgeResponseStatus": 200, "OriginResponseStatus": 200}',
        '{"ClientRequestHost": "h", "EdgeResponseStatus": 200.5, "OriginResponseStatus": 200}',
    ],
)
def test_decode_response_rejects_wrongly_typed_fields(line):
    with pytest.raises(DecodeError):
        decode_response(line)
