from __future__ import annotations

import pytest
import requests

from services.similarity import HuggingFaceSimilarity


class _Resp:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))


def test_posts_sentence_pair_and_reads_first_score(monkeypatch):
    seen = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        seen.update(url=url, headers=headers, json=json, timeout=timeout)
        return _Resp([0.91])

    monkeypatch.setattr(requests, "post", fake_post)
    sim = HuggingFaceSimilarity("hf_key", url="https://hf.example/model")

    assert sim.similarity("jane doe | acme", "jane doe") == pytest.approx(0.91)
    assert seen["headers"]["Authorization"] == "Bearer hf_key"
    assert seen["json"] == {"inputs": {"source_sentence": "jane doe | acme", "sentences": ["jane doe"]}}
    assert seen["timeout"]


def test_unexpected_payload_scores_zero(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **k: _Resp({"error": "loading"}))
    assert HuggingFaceSimilarity("k").similarity("a", "b") == 0.0


def test_http_errors_propagate(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **k: _Resp({}, status_code=503))
    with pytest.raises(requests.HTTPError):
        HuggingFaceSimilarity("k").similarity("a", "b")
