from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dwlr_ingest.main import create_app
from dwlr_ingest.services.dataset_store import StationDatasetStore

STATION_FORM = {"station_name": "Test Well", "latitude": "12.97", "longitude": "77.59"}

CSV_BODY = (
    b"timestamp,level,temperature,ph\n"
    b"2024-01-15 08:01:00,205.7,22.4,7.1\n"
    b"2024-01-15 08:00:00,205.5,22.3,7.2\n"
)


@pytest.fixture()
def store() -> StationDatasetStore:
    return StationDatasetStore()


@pytest.fixture()
def client(store: StationDatasetStore) -> TestClient:
    return TestClient(create_app(store=store))


def _upload(client: TestClient, filename: str, body: bytes, form: dict | None = None):
    return client.post(
        "/stations/ST-1/uploads",
        files={"file": (filename, body, "application/octet-stream")},
        data=STATION_FORM if form is None else form,
    )


def test_upload_csv_and_fetch_dataset(client, store) -> None:
    response = _upload(client, "readings.csv", CSV_BODY)

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Successfully parsed 2 data points"
    assert payload["data_point_count"] == 2
    assert [point["level"] for point in payload["data_points"]] == [205.5, 205.7]
    assert payload["errors"] == []
    assert store.get("ST-1") is not None

    fetched = client.get("/stations/ST-1/data")
    assert fetched.status_code == 200
    dataset = fetched.json()
    assert dataset["station_name"] == "Test Well"
    assert dataset["source_filename"] == "readings.csv"
    assert dataset["data_points"][0]["id"] == "ST-1-uploaded-2"

    assert client.get("/stations").json() == {"station_ids": ["ST-1"]}


def test_failed_upload_returns_report(client, store) -> None:
    body = b"timestamp,level\n" + b"\n".join(b"bad,1" for _ in range(12))

    response = _upload(client, "readings.csv", body)

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["success"] is False
    assert detail["message"] == "No valid data points could be parsed from the file"
    assert len(detail["errors"]) == 12
    assert len(detail["display_errors"]) == 11
    assert detail["display_errors"][-1] == "... and 2 more errors"
    assert store.get("ST-1") is None


def test_partial_success_includes_errors(client) -> None:
    body = b'[{"timestamp": "2024-01-15T08:00:00Z", "level": 1}, {"level": 2}]'

    response = _upload(client, "readings.json", body)

    assert response.status_code == 200
    assert response.json()["errors"] == ["Item 2: Invalid timestamp"]


def test_unparsable_json_is_a_client_error(client, store) -> None:
    depth = 200_000
    response = _upload(client, "readings.json", b"[" * depth + b"]" * depth)

    assert response.status_code == 400
    assert response.json()["detail"]["message"].startswith("Error parsing JSON")
    assert store.get("ST-1") is None


def test_unsupported_format(client) -> None:
    response = _upload(client, "readings.txt", CSV_BODY)

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == (
        "Unsupported file format. Please upload CSV or JSON files only."
    )


def test_missing_station_fields(client) -> None:
    response = _upload(client, "readings.csv", CSV_BODY, form={"station_name": "Test Well"})

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == (
        "Please fill in all station information fields before uploading data"
    )


def test_unknown_station_data(client) -> None:
    assert client.get("/stations/NOPE/data").status_code == 404
    assert client.delete("/stations/NOPE/data").status_code == 404


def test_delete_station_data(client, store) -> None:
    _upload(client, "readings.csv", CSV_BODY)

    response = client.delete("/stations/ST-1/data")

    assert response.status_code == 204
    assert store.get("ST-1") is None


def test_sample_downloads(client) -> None:
    csv_response = client.get("/samples/csv")
    assert csv_response.status_code == 200
    assert csv_response.text.startswith("timestamp,level,temperature,ph")
    assert "sample_water_level_data.csv" in csv_response.headers["content-disposition"]

    json_response = client.get("/samples/JSON")
    assert json_response.status_code == 200
    assert json_response.json()[0]["status"] == "normal"

    assert client.get("/samples/xml").status_code == 404


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "stations_loaded": 0}
