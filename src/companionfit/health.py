"""Health-data gateway — commit finished workouts, read steps and heart rate.

A failed commit never rolls back the user; the service reports it and
moves on.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Any, Protocol

import httpx

from companionfit.errors import HealthSyncError
from companionfit.models import ExerciseType, Workout

logger = logging.getLogger(__name__)

ACTIVITY_TYPES: dict[ExerciseType, str] = {
    ExerciseType.STRENGTH: "traditional_strength_training",
    ExerciseType.CARDIO: "running",
    ExerciseType.FLEXIBILITY: "yoga",
    ExerciseType.SPORTS: "mixed_cardio",
    ExerciseType.OTHER: "other",
}


def activity_type_for(workout: Workout) -> str:
    """Activity identifier for the workout's most frequent exercise type.

    Ties go to the type logged first; an empty workout maps to ``other``.
    """
    if not workout.exercises:
        return ACTIVITY_TYPES[ExerciseType.OTHER]
    counts = Counter(exercise.type for exercise in workout.exercises)
    dominant = max(counts, key=lambda t: counts[t])
    return ACTIVITY_TYPES[dominant]


def to_health_payload(workout: Workout) -> dict[str, Any]:
    distance_km = sum(e.distance for e in workout.exercises if e.distance is not None)
    return {
        "workout_id": str(workout.id),
        "activity_type": activity_type_for(workout),
        "start": workout.date.isoformat(),
        "duration_seconds": workout.total_duration,
        "distance_km": distance_km or None,
        "exercise_count": len(workout.exercises),
        "metadata": {"source": "companionfit"},
    }


class HealthDataSink(Protocol):
    def commit_workout(self, workout: Workout) -> None: ...

    def todays_steps(self) -> float: ...

    def latest_heart_rate(self) -> float | None: ...


class HttpHealthSink:
    """Health gateway over a JSON HTTP API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=self.transport,
        )

    def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            with self._client() as client:
                resp = client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise HealthSyncError(operation=operation, message=str(exc)) from exc
        if resp.status_code not in (200, 201, 204):
            raise HealthSyncError(
                operation=operation,
                message=f"HTTP {resp.status_code} — {resp.text[:200]}",
                status_code=resp.status_code,
            )
        return resp

    def _read_number(self, operation: str, resp: httpx.Response, key: str) -> float | None:
        """Pull a numeric field out of a JSON object body; null or absent reads as None."""
        try:
            body = resp.json()
        except ValueError as exc:
            raise HealthSyncError(
                operation=operation, message=f"invalid JSON body: {resp.text[:200]}",
            ) from exc
        if not isinstance(body, dict):
            raise HealthSyncError(
                operation=operation, message=f"expected a JSON object, got {type(body).__name__}",
            )
        value = body.get(key)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise HealthSyncError(
                operation=operation, message=f"non-numeric {key!r}: {value!r}",
            ) from exc

    def commit_workout(self, workout: Workout) -> None:
        self._request("commit_workout", "POST", "/v1/workouts", json=to_health_payload(workout))
        logger.info("Committed workout %s to health store", workout.id)

    def todays_steps(self) -> float:
        resp = self._request(
            "todays_steps", "GET", "/v1/steps", params={"date": date.today().isoformat()},
        )
        return self._read_number("todays_steps", resp, "steps") or 0.0

    def latest_heart_rate(self) -> float | None:
        resp = self._request("latest_heart_rate", "GET", "/v1/heart-rate/latest")
        return self._read_number("latest_heart_rate", resp, "bpm")


class RecordingHealthSink:
    """In-process sink that records commits; used offline and in tests."""

    def __init__(self, steps: float = 0.0, heart_rate: float | None = None) -> None:
        self.committed: list[Workout] = []
        self.steps = steps
        self.heart_rate = heart_rate

    def commit_workout(self, workout: Workout) -> None:
        self.committed.append(workout)

    def todays_steps(self) -> float:
        return self.steps

    def latest_heart_rate(self) -> float | None:
        return self.heart_rate
