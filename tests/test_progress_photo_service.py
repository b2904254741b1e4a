"""Tests for progress photo service."""

import asyncio
import json
from uuid import UUID, uuid4

import pytest

from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.progress_photos import (
    PROGRESS_PHOTO_BUCKET,
    ProgressPhotoService,
    unavailable_body_analysis,
)
from tests.conftest import (
    FakeCompletionClient,
    FakeFileStorage,
    InMemoryProgressPhotoRepository,
    make_onboarding_service,
    make_reference_service,
)

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16

BODY_ANALYSIS = {
    "summary": "Upright posture, moderate muscle definition.",
    "posture": "Slight forward head",
    "bodyComposition": "Athletic",
    "bodyMassEstimate": {"bmi": 23.4, "bodyFatPercentage": 18, "confidence": "medium"},
    "nutritionSuggestions": {
        "calorieAdjustment": "Small surplus",
        "macroRatioSuggestion": "30/45/25",
        "focusAreas": ["protein timing"],
    },
    "recommendations": ["Keep training"],
}


def _service(
    client: FakeCompletionClient,
    repository: InMemoryProgressPhotoRepository | None = None,
    storage: FakeFileStorage | None = None,
    profiles: dict[UUID, NutritionProfile] | None = None,
) -> ProgressPhotoService:
    return ProgressPhotoService(
        repository=repository or InMemoryProgressPhotoRepository(),
        storage=storage or FakeFileStorage(),
        client=client,
        model="vision-model",
        reasoning_effort=None,
        store=False,
        reference_service=make_reference_service(),
        onboarding_service=make_onboarding_service(profiles),
    )


def test_upload_photo_stores_file_and_analysis() -> None:
    user_id = uuid4()
    storage = FakeFileStorage()
    client = FakeCompletionClient([json.dumps(BODY_ANALYSIS)])
    service = _service(
        client,
        storage=storage,
        profiles={user_id: NutritionProfile(id=user_id, age=29, goal="gain")},
    )

    photo = asyncio.run(service.upload_photo(user_id, JPEG_BYTES, "front", "Week 1"))

    [(bucket, path)] = storage.files
    assert bucket == PROGRESS_PHOTO_BUCKET
    assert path.startswith(f"{user_id}/")
    assert path.endswith("_front.jpg")
    assert photo.notes == "Week 1"
    assert photo.ai_analysis is not None
    assert photo.ai_analysis["bodyMassEstimate"]["bmi"] == 23.4
    assert "Person: age: 29, goal: gain" in str(client.calls[0]["prompt"])
    assert "front view" in str(client.calls[0]["prompt"])


@pytest.mark.parametrize(
    ("image", "photo_type"), [(JPEG_BYTES, "diagonal"), (b"", "side")]
)
def test_upload_photo_validates_input(image: bytes, photo_type: str) -> None:
    with pytest.raises(ValueError):
        asyncio.run(
            _service(FakeCompletionClient()).upload_photo(uuid4(), image, photo_type)
        )


def test_analysis_failure_stores_unavailable_analysis() -> None:
    user_id = uuid4()
    service = _service(FakeCompletionClient(error=RuntimeError("rate limited")))

    photo = asyncio.run(service.upload_photo(user_id, JPEG_BYTES, "back"))

    expected = unavailable_body_analysis().model_dump(by_alias=True)
    assert photo.ai_analysis == expected


def test_unparseable_analysis_falls_back() -> None:
    service = _service(FakeCompletionClient(["I cannot assess this image."]))

    analysis = asyncio.run(service.analyze_photo(JPEG_BYTES, "side"))

    assert analysis == unavailable_body_analysis()


def test_reanalyze_updates_stored_analysis() -> None:
    user_id = uuid4()
    repository = InMemoryProgressPhotoRepository()
    client = FakeCompletionClient(["not json", json.dumps(BODY_ANALYSIS)])
    service = _service(client, repository)
    photo = asyncio.run(service.upload_photo(user_id, JPEG_BYTES, "front"))

    updated = asyncio.run(service.reanalyze(user_id, photo.id))

    assert updated is not None
    assert updated.ai_analysis is not None
    assert updated.ai_analysis["summary"] == BODY_ANALYSIS["summary"]
    assert repository.photos[photo.id].ai_analysis == updated.ai_analysis


def test_reanalyze_rejects_other_users() -> None:
    service = _service(FakeCompletionClient())
    photo = asyncio.run(service.upload_photo(uuid4(), JPEG_BYTES, "front"))

    assert asyncio.run(service.reanalyze(uuid4(), photo.id)) is None


def test_delete_photo_removes_file_and_row() -> None:
    user_id = uuid4()
    repository = InMemoryProgressPhotoRepository()
    storage = FakeFileStorage()
    service = _service(FakeCompletionClient(), repository, storage)
    photo = asyncio.run(service.upload_photo(user_id, JPEG_BYTES, "side"))

    assert service.delete_photo(uuid4(), photo.id) is False
    assert service.delete_photo(user_id, photo.id) is True
    assert storage.removed == [(PROGRESS_PHOTO_BUCKET, photo.storage_path)]
    assert service.list_photos(user_id) == []
