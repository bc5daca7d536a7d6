import io
import json
import urllib.error

import pytest

import node_client
from node_client import NodeClient, NodeResponseError


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self._body = body.encode("utf-8")

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def captured(monkeypatch):
    calls = []

    def fake_urlopen(req, timeout=None):
        calls.append((req.full_url, timeout))
        return FakeResponse(200, json.dumps({"ok": True, "url": req.full_url}))

    monkeypatch.setattr(node_client.urllib.request, "urlopen", fake_urlopen)
    return calls


class TestConstruction:
    def test_strips_trailing_slashes(self):
        assert NodeClient("http://node:7332///").node_url == "http://node:7332"

    @pytest.mark.parametrize("url", ["", None, 42])
    def test_rejects_missing_url(self, url):
        with pytest.raises(ValueError, match="Node URL"):
            NodeClient(url)

    def test_build_url_adds_leading_slash(self):
        client = NodeClient("http://node")
        assert client.build_url("block/1") == "http://node/block/1"
        assert client.build_url("/block/1") == "http://node/block/1"


class TestHelpers:
    def test_encode_segment_matches_encode_uri_component(self):
        assert node_client.encode_segment(" a b/c?d ") == "a%20b%2Fc%3Fd"
        assert node_client.encode_segment("A-z_0.9!~*'()") == "A-z_0.9!~*'()"
        assert node_client.encode_segment(None) == ""
        assert node_client.encode_segment(17) == "17"

    def test_build_transaction_payload(self):
        assert node_client.build_transaction_payload("a", "b", 10, 0) == {
            "sender": "a",
            "recipient": "b",
            "amount": 10,
            "nonce": 0,
            "payload": "",
        }

    def test_build_transaction_payload_requires_fields(self):
        with pytest.raises(ValueError, match="must be provided"):
            node_client.build_transaction_payload("a", None, 10, 0)

    def test_parse_json_response_error_keeps_status_and_body(self):
        with pytest.raises(NodeResponseError) as info:
            node_client.parse_json_response(404, "no such block")
        assert info.value.status == 404
        assert info.value.body == "no such block"
        assert "404: no such block" in str(info.value)


class TestLookups:
    @pytest.mark.parametrize(
        "method,arg,path",
        [
            ("get_block_by_id", "abc:1", "/block/abc%3A1"),
            ("get_block_by_height", 12, "/height/12"),
            ("get_account_by_id", "acc 1", "/account/acc%201"),
            ("get_epoch_data", 3, "/epoch_data/3"),
            ("get_aggregated_finalization_proof", "b1", "/aggregated_finalization_proof/b1"),
            ("get_aggregated_epoch_finalization_proof", 4, "/aggregated_epoch_finalization_proof/4"),
            ("get_transaction_by_hash", "ff", "/transaction/ff"),
        ],
    )
    def test_lookup_paths(self, captured, method, arg, path):
        client = NodeClient("http://node/", timeout=3)
        result = getattr(client, method)(arg)
        assert result == {"ok": True, "url": "http://node" + path}
        assert captured == [("http://node" + path, 3)]

    def test_http_error_becomes_node_response_error(self, monkeypatch):
        def fake_urlopen(req, timeout=None):
            raise urllib.error.HTTPError(req.full_url, 500, "err", {}, io.BytesIO(b"boom"))

        monkeypatch.setattr(node_client.urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(NodeResponseError) as info:
            NodeClient("http://node").get_block_by_id("x")
        assert info.value.status == 500
        assert info.value.body == "boom"

    def test_submit_transaction_not_implemented(self):
        with pytest.raises(NotImplementedError):
            NodeClient("http://node").submit_transaction({})
