from __future__ import annotations

from datetime import datetime, timezone

import pytest

from atproto_xrpc.decoder import decode_response, parse_error_body
from atproto_xrpc.errors import DecodingError
from atproto_xrpc.models import GetLatestCommitOutput, GraphGetListsOutput, SetViewDefinition

METHOD = "com.atproto.sync.getLatestCommit"


def test_decodes_into_model_and_ignores_unknown_fields() -> None:
    output = decode_response(
        b'{"cid":"bafyreib","rev":"3a","futureField":{"x":1}}',
        GetLatestCommitOutput,
        method_id=METHOD,
    )

    assert output == GetLatestCommitOutput(cid="bafyreib", rev="3a")


def test_missing_required_field_fails() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode_response(b'{"cid":"bafyreib"}', GetLatestCommitOutput, method_id=METHOD, status_code=200)

    assert excinfo.value.method_id == METHOD
    assert excinfo.value.model_name == "GetLatestCommitOutput"
    assert excinfo.value.status_code == 200
    assert excinfo.value.raw_sample == {"cid": "bafyreib"}


def test_wrong_type_is_not_coerced() -> None:
    with pytest.raises(DecodingError):
        decode_response(b'{"cid":"bafyreib","rev":3}', GetLatestCommitOutput, method_id=METHOD)

    with pytest.raises(DecodingError):
        decode_response(
            b'{"name":"set","setSize":"4","createdAt":"2024-10-19T00:00:00Z","updatedAt":"2024-10-19T00:00:00Z"}',
            SetViewDefinition,
            method_id="tools.ozone.set.upsertSet",
        )


def test_absent_and_null_optional_fields_decode_to_none() -> None:
    absent = decode_response(b'{"lists":[]}', GraphGetListsOutput, method_id="app.bsky.graph.getLists")
    null = decode_response(b'{"cursor":null,"lists":[]}', GraphGetListsOutput, method_id="app.bsky.graph.getLists")

    assert absent.cursor is None
    assert null.cursor is None


def test_null_for_required_field_fails() -> None:
    with pytest.raises(DecodingError):
        decode_response(b'{"cid":null,"rev":"3a"}', GetLatestCommitOutput, method_id=METHOD)


def test_inbound_values_are_not_truncated() -> None:
    body = (
        b'{"name":"' + b"n" * 300 + b'","setSize":4,'
        b'"createdAt":"2024-10-19T08:00:00.250Z","updatedAt":"2024-10-19T10:00:00+02:00"}'
    )

    output = decode_response(body, SetViewDefinition, method_id="tools.ozone.set.upsertSet")

    assert output.name == "n" * 300
    assert output.created_at == datetime(2024, 10, 19, 8, 0, 0, 250000, tzinfo=timezone.utc)
    assert output.updated_at == datetime(2024, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


def test_invalid_date_is_a_decoding_error() -> None:
    with pytest.raises(DecodingError):
        decode_response(
            b'{"name":"set","setSize":4,"createdAt":"last tuesday","updatedAt":"2024-10-19T00:00:00Z"}',
            SetViewDefinition,
            method_id="tools.ozone.set.upsertSet",
        )


def test_non_json_body_is_a_decoding_error() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode_response(b"<html>oops</html>", GetLatestCommitOutput, method_id=METHOD)

    assert excinfo.value.raw_sample == "<html>oops</html>"


def test_generic_shapes_are_supported() -> None:
    assert decode_response(b'["a","b"]', list[str], method_id=METHOD) == ["a", "b"]


def test_parse_error_body() -> None:
    parsed = parse_error_body(b'{"error":"InvalidRequest","message":"bad did"}')

    assert parsed is not None
    assert parsed.error == "InvalidRequest"
    assert parsed.message == "bad did"
    assert parse_error_body(b'{"error":"RateLimitExceeded"}').message is None  # type: ignore[union-attr]
    assert parse_error_body(b"") is None
    assert parse_error_body(b"Bad Gateway") is None
    assert parse_error_body(b'{"message":"no code"}') is None
