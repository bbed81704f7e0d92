"""
dwlr_ingest/services/dataset_store.py

Caller-owned store of uploaded datasets keyed by station id.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone

from dwlr_ingest.domain.water_level import StationInfo, WaterLevelData


@dataclass(frozen=True)
class StationDataset:
    """
    One accepted upload for a station.
    """

    station: StationInfo
    data_points: tuple[WaterLevelData, ...]
    source_filename: str
    uploaded_at: datetime


class StationDatasetStore:
    """
    In-memory dataset registry.

    A later upload for the same station replaces the earlier one. The store is
    created and owned by the application (or test), never by the pipeline.
    """

    def __init__(self) -> None:
        self._datasets: dict[str, StationDataset] = {}
        self._lock = threading.Lock()

    def put(
        self,
        *,
        station: StationInfo,
        data_points: list[WaterLevelData],
        source_filename: str,
    ) -> StationDataset:
        dataset = StationDataset(
            station=station,
            data_points=tuple(data_points),
            source_filename=source_filename,
            uploaded_at=datetime.now(tz=timezone.utc),
        )
        with self._lock:
            self._datasets[station.station_id] = dataset
        return dataset

    def get(self, station_id: str) -> StationDataset | None:
        with self._lock:
            return self._datasets.get(station_id)

    def remove(self, station_id: str) -> bool:
        with self._lock:
            return self._datasets.pop(station_id, None) is not None

    def station_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._datasets)

    def __len__(self) -> int:
        with self._lock:
            return len(self._datasets)
