"""Tests for exam service."""

import asyncio
import json
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from wellness_tracker.domain.profiles import NutritionProfile
from wellness_tracker.services.exams import (
    EXAM_BUCKET,
    ExamService,
    build_exam_prompt,
    detect_exam_type,
    extract_exam_text,
    fallback_exam_analysis,
)
from tests.conftest import (
    FakeCompletionClient,
    FakeFileStorage,
    InMemoryExamRepository,
    make_onboarding_service,
    make_reference_service,
)

ANALYSIS = {
    "summary": "Low ferritin.",
    "abnormalValues": [
        {"name": "Ferritin", "value": "25", "reference": "70-150", "severity": "high"}
    ],
    "recommendations": ["Retest in 3 months"],
    "nutritionRecommendations": ["Eat more iron-rich foods"],
    "nutritionImpact": {
        "foodsToIncrease": [{"food": "Red meat", "reason": "Heme iron"}],
        "foodsToReduce": [{"food": "Coffee with meals", "reason": "Blocks iron"}],
    },
    "potentialDeficiencies": ["Iron"],
}


def _pdf_with_text(text: str) -> bytes:
    """Build a one-page PDF showing ``text`` in Helvetica."""
    stream = b"BT /F1 12 Tf 72 720 Td (%s) Tj ET" % text.encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n%s\nendstream" % (len(stream), stream),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    pdf = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += b"%d 0 obj\n%s\nendobj\n" % (number, body)
    xref_offset = len(pdf)
    pdf += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        pdf += b"%010d 00000 n \n" % offset
    pdf += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(pdf)


def _service(
    client: FakeCompletionClient,
    repository: InMemoryExamRepository | None = None,
    storage: FakeFileStorage | None = None,
    profiles: dict[UUID, NutritionProfile] | None = None,
) -> ExamService:
    return ExamService(
        repository=repository or InMemoryExamRepository(),
        storage=storage or FakeFileStorage(),
        client=client,
        model="text-model",
        reasoning_effort=None,
        store=False,
        reference_service=make_reference_service(),
        onboarding_service=make_onboarding_service(profiles),
    )


def test_upload_exam_stores_file_and_pending_row() -> None:
    storage = FakeFileStorage()
    service = _service(FakeCompletionClient(), storage=storage)
    user_id = uuid4()

    exam = service.upload_exam(user_id, " Blood test ", "blood_count", b"%PDF", "pdf")

    assert exam.status == "pending"
    assert exam.name == "Blood test"
    [(bucket, path)] = storage.files
    assert bucket == EXAM_BUCKET
    assert path.startswith(f"{user_id}/")
    assert path.endswith(".pdf")
    assert exam.storage_path == path
    assert exam.file_url == f"https://storage.test/{EXAM_BUCKET}/{path}"


@pytest.mark.parametrize(("name", "content"), [("Blood test", b""), (" ", b"data")])
def test_upload_exam_validates_input(name: str, content: bytes) -> None:
    with pytest.raises(ValueError):
        _service(FakeCompletionClient()).upload_exam(uuid4(), name, "other", content)


def test_detect_exam_type_prefers_content_keywords() -> None:
    assert detect_exam_type("Glucose: 92 mg/dL", "other") == "glycemia"
    assert detect_exam_type("LDL 130", "other") == "lipid_panel"
    assert detect_exam_type("Platelet count normal", "other") == "blood_count"
    assert detect_exam_type("TSH 2.1", "thyroid") == "thyroid"


def test_build_exam_prompt_includes_profile() -> None:
    profile = NutritionProfile(
        id=uuid4(),
        age=41,
        gender="female",
        dietary_restrictions=["vegetarian"],
        onboarding_data={"health_conditions": ["hypothyroidism"]},
    )

    prompt = build_exam_prompt("TSH 4.2", "thyroid", profile)

    assert "- Ferritin: 70-150 ng/mL" in prompt
    assert "- Age: 41" in prompt
    assert "- Health conditions: hypothyroidism" in prompt
    assert "- Dietary restrictions: vegetarian" in prompt
    assert prompt.endswith("Exam type: thyroid\nExam content:\nTSH 4.2")


def test_analyze_exam_parses_model_output() -> None:
    client = FakeCompletionClient([json.dumps(ANALYSIS)])

    analysis = asyncio.run(_service(client).analyze_exam("Ferritin 25", "other"))

    assert analysis.summary == "Low ferritin."
    assert analysis.abnormal_values[0].severity == "high"
    assert analysis.nutrition_impact.foods_to_increase[0].food == "Red meat"


def test_analyze_exam_keeps_raw_text_when_not_json() -> None:
    client = FakeCompletionClient(["Your results look mostly normal."])

    analysis = asyncio.run(_service(client).analyze_exam("Glucose 90", "other"))

    assert analysis.summary == "Your results look mostly normal."
    assert analysis.recommendations == fallback_exam_analysis("x").recommendations


def test_analyze_exam_falls_back_when_client_fails() -> None:
    client = FakeCompletionClient(error=RuntimeError("timeout"))

    analysis = asyncio.run(_service(client).analyze_exam("Glucose 90", "other"))

    assert analysis == fallback_exam_analysis("glycemia")


def test_process_exam_analyzes_and_saves() -> None:
    repository = InMemoryExamRepository()
    storage = FakeFileStorage()
    service = _service(
        FakeCompletionClient([json.dumps(ANALYSIS)]), repository, storage
    )
    exam = service.upload_exam(uuid4(), "Iron panel", "vitamins", b"Ferritin 25")

    assert asyncio.run(service.process_exam(exam.id)) is True

    stored = repository.exams[exam.id]
    assert stored.status == "analyzed"
    assert stored.analysis is not None
    assert stored.analysis["summary"] == "Low ferritin."
    assert repository.raw_texts[exam.id] == json.dumps(ANALYSIS)
    assert "nutritionImpact" in stored.analysis
    assert [status for _, status in repository.status_history] == [
        "analyzing",
        "analyzed",
    ]


def test_process_exam_skips_already_analyzed() -> None:
    client = FakeCompletionClient([json.dumps(ANALYSIS)])
    service = _service(client)
    exam = service.upload_exam(uuid4(), "Iron panel", "vitamins", b"Ferritin 25")
    asyncio.run(service.process_exam(exam.id))

    assert asyncio.run(service.process_exam(exam.id)) is True
    assert len(client.calls) == 1


def test_process_exam_resets_to_pending_on_failure() -> None:
    repository = InMemoryExamRepository()
    service = _service(FakeCompletionClient(), repository, FakeFileStorage())
    exam = repository.create_exam(
        uuid4(), "Missing file", "other", None, "https://x", "user/missing.txt"
    )

    assert asyncio.run(service.process_exam(exam.id)) is False
    assert repository.exams[exam.id].status == "pending"


def test_process_exam_unknown_id() -> None:
    assert asyncio.run(_service(FakeCompletionClient()).process_exam(uuid4())) is False


def test_nutrition_insights_merge_and_deduplicate() -> None:
    repository = InMemoryExamRepository()
    service = _service(FakeCompletionClient(), repository)
    user_id = uuid4()
    second = dict(
        ANALYSIS,
        nutritionRecommendations=["Eat more iron-rich foods", "Add vitamin C"],
        nutritionImpact={
            "foodsToIncrease": [
                {"food": "Red meat", "reason": "Duplicate"},
                {"food": "Lentils", "reason": "Plant iron"},
            ]
        },
    )
    for analysis in (ANALYSIS, second, {"summary": 12}):
        exam = repository.create_exam(user_id, "Exam", "other", None, "u", "p")
        repository.save_analysis(exam.id, analysis, "", datetime.now(tz=UTC))

    insights = service.get_nutrition_insights(user_id)

    assert insights.recommendations == ["Eat more iron-rich foods", "Add vitamin C"]
    assert [a.food for a in insights.foods_to_increase] == ["Red meat", "Lentils"]
    assert insights.foods_to_increase[0].reason == "Heme iron"
    assert [a.food for a in insights.foods_to_reduce] == ["Coffee with meals"]


def test_process_exam_reads_pdf_text() -> None:
    repository = InMemoryExamRepository()
    client = FakeCompletionClient([json.dumps(ANALYSIS)])
    service = _service(client, repository, FakeFileStorage())
    pdf = _pdf_with_text("Ferritin 25 ng/mL")
    exam = service.upload_exam(uuid4(), "Iron panel", "vitamins", pdf, "pdf")

    assert asyncio.run(service.process_exam(exam.id)) is True

    prompt = client.calls[0]["prompt"]
    assert isinstance(prompt, str)
    assert "Exam content:\nFerritin 25 ng/mL" in prompt
    assert "%PDF" not in prompt
    assert repository.exams[exam.id].status == "analyzed"


def test_process_exam_keeps_unstructured_reply_as_raw_text() -> None:
    repository = InMemoryExamRepository()
    reply = "Ferritin is low, add iron-rich foods."
    service = _service(FakeCompletionClient([reply]), repository, FakeFileStorage())
    exam = service.upload_exam(uuid4(), "Iron panel", "vitamins", b"Ferritin 25")

    asyncio.run(service.process_exam(exam.id))

    assert repository.raw_texts[exam.id] == reply
    assert repository.exams[exam.id].analysis["summary"] == reply


def test_extract_exam_text_rejects_pdf_without_text() -> None:
    with pytest.raises(ValueError):
        extract_exam_text(_pdf_with_text(""), "user/1.pdf")


def test_extract_exam_text_decodes_plain_files() -> None:
    assert extract_exam_text("Glicose 92".encode(), "user/1.txt") == "Glicose 92"
