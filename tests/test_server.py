"""Tests for the FastAPI conversion API.

WHY: Validates that every endpoint behaves correctly: happy paths,
invalid uploads, and metadata validation.

HOW: FastAPI TestClient (synchronous, in-process). ROM sets are built in
memory and uploaded as .zip archives.

RULES:
- All tests use the FastAPI TestClient
- No state is shared between requests, so no reset fixture is needed
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from neo_converter.core.alignment import HEADER_SIZE
from neo_converter.core.genres import GENRES
from neo_converter.core.header import parse_header
from neo_converter.server.app import _content_disposition, app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def rom_zip(small_rom_set, zip_bytes):
    return zip_bytes(small_rom_set)


class TestConversions:

    def test_returns_neo_file(self, client, rom_zip):
        response = client.post(
            "/conversions",
            files={"file": ("kof94.zip", rom_zip, "application/zip")},
            data={"name": "King of Fighters", "genre": "Fighting", "year": "1994", "ngh": "55"},
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/octet-stream"
        assert 'filename="kof94.neo"' in response.headers["content-disposition"]

        info = parse_header(response.content)
        assert info.name == "King of Fighters"
        assert info.genre == "Fighting"
        assert info.year == 1994
        assert info.ngh == "55"
        assert info.manufacturer == "SNK"
        assert len(response.content) == HEADER_SIZE + info.sizes.total

    def test_size_headers(self, client, rom_zip):
        response = client.post(
            "/conversions",
            files={"file": ("game.zip", rom_zip, "application/zip")},
        )
        assert response.status_code == 200
        info = parse_header(response.content)
        assert int(response.headers["x-neo-p-size"]) == info.sizes.program
        assert int(response.headers["x-neo-c-size"]) == info.sizes.color_tile
        assert int(response.headers["x-neo-v2-size"]) == 0

    def test_name_defaults_to_archive_stem(self, client, rom_zip):
        response = client.post(
            "/conversions",
            files={"file": ("lbowling.zip", rom_zip, "application/zip")},
        )
        assert parse_header(response.content).name == "lbowling"

    def test_bad_archive(self, client):
        response = client.post(
            "/conversions",
            files={"file": ("game.zip", b"not a zip", "application/zip")},
        )
        assert response.status_code == 400
        assert "not a valid .zip" in response.json()["detail"]

    def test_encrypted_archive(self, client, small_rom_set, zip_bytes, mark_encrypted):
        response = client.post(
            "/conversions",
            files={"file": ("game.zip", mark_encrypted(zip_bytes(small_rom_set)), "application/zip")},
        )
        assert response.status_code == 400
        assert "could not be extracted" in response.json()["detail"]

    def test_non_latin1_filename(self, client, rom_zip):
        response = client.post(
            "/conversions",
            files={"file": ("餓狼.zip", rom_zip, "application/zip")},
        )
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="__.neo"' in disposition
        assert "filename*=UTF-8''%E9%A4%93%E7%8B%BC.neo" in disposition
        assert parse_header(response.content).name == "??"

    @pytest.mark.parametrize("data, message", [
        ({"genre": "Racing"}, "Genre must be one of"),
        ({"name": "x" * 34}, "Game name"),
        ({"manufacturer": "x" * 18}, "Manufacturer name"),
    ])
    def test_invalid_metadata(self, client, rom_zip, data, message):
        response = client.post(
            "/conversions",
            files={"file": ("game.zip", rom_zip, "application/zip")},
            data=data,
        )
        assert response.status_code == 400
        assert message in response.json()["detail"]

    def test_upload_too_large(self, client, rom_zip, monkeypatch):
        monkeypatch.setattr("neo_converter.server.app.MAX_UPLOAD_BYTES", 16)
        response = client.post(
            "/conversions",
            files={"file": ("game.zip", rom_zip, "application/zip")},
        )
        assert response.status_code == 413


def test_content_disposition_escapes_quotes():
    value = _content_disposition('say "hi".neo')
    assert value.startswith('attachment; filename="say \\"hi\\".neo";')
    assert value.endswith("filename*=UTF-8''say%20%22hi%22.neo")


class TestHeaders:

    def test_parses_uploaded_header(self, client, rom_zip):
        neo = client.post(
            "/conversions",
            files={"file": ("game.zip", rom_zip, "application/zip")},
            data={"name": "Header Test", "ngh": "95", "screenshot": "4"},
        ).content

        response = client.post(
            "/headers",
            files={"file": ("game.neo", neo[:HEADER_SIZE], "application/octet-stream")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Header Test"
        assert body["ngh"] == "95"
        assert body["screenshot"] == 4
        assert body["genre"] == "Other"
        assert body["sizes"]["p"] == parse_header(neo).sizes.program

    def test_truncated(self, client):
        response = client.post(
            "/headers",
            files={"file": ("short.neo", b"NEO\x01", "application/octet-stream")},
        )
        assert response.status_code == 400


class TestInfo:

    def test_genres(self, client):
        body = client.get("/genres").json()
        assert [g["name"] for g in body["genres"]] == list(GENRES)
        assert body["genres"][9] == {"name": "Fighting", "code": 9}

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
