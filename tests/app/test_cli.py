from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003

import pytest

from clinic_intake.domain.errors import DraftAlreadyResolvedError, TransactionFailureError
from clinic_intake.domain.matching import ClinicQuery, DuplicateCheckResult
from clinic_intake.domain.model import DraftStatus, PhotoSource, RatingSource, SubmissionFlow
from clinic_intake.domain.resolution import ApprovalOptions, ApprovalResult
from clinic_intake.domain.submissions import ClinicSubmission, SubmissionReceipt
from clinic_intake.ui import cli as cli_module


def test_check_builds_query_from_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[ClinicQuery] = []

    def fake_check(query: ClinicQuery) -> DuplicateCheckResult:
        captured.append(query)
        return DuplicateCheckResult(query=query)

    monkeypatch.setattr(cli_module, "check_clinic_duplicates", fake_check)

    cli_module.main(["check", "--name", "Glow Aesthetics", "--city", "Austin", "--place-id", "p-1"])

    [query] = captured
    assert query.name == "Glow Aesthetics"
    assert query.city == "Austin"
    assert query.place_ref == "p-1"
    assert query.phone is None


def test_check_without_identifying_fields_exits_2(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_check(_query: ClinicQuery) -> DuplicateCheckResult:
        raise AssertionError("not expected")

    monkeypatch.setattr(cli_module, "check_clinic_duplicates", fake_check)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check", "--city", "Austin"])

    assert excinfo.value.code == 2


def test_approve_maps_flags_to_options(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_approve(draft_id: int, options: ApprovalOptions) -> ApprovalResult:
        captured["draft_id"] = draft_id
        captured["options"] = options
        return ApprovalResult(clinic_id=42, clinic_name="Glow", status=DraftStatus.APPROVED)

    monkeypatch.setattr(cli_module, "approve_clinic_draft", fake_approve)

    cli_module.main(
        [
            "approve",
            "7",
            "--reviewer",
            "rev-1",
            "--photo-source",
            "both",
            "--rating-source",
            "manual",
            "--manual-rating",
            "4.5",
            "--manual-review-count",
            "12",
        ]
    )

    assert captured["draft_id"] == 7
    assert captured["options"] == ApprovalOptions(
        reviewer_id="rev-1",
        photo_source=PhotoSource.BOTH,
        rating_source=RatingSource.MANUAL,
        manual_rating=4.5,
        manual_review_count=12,
    )


def test_manual_values_need_manual_rating_source(monkeypatch: pytest.MonkeyPatch) -> None:
    called: list[int] = []
    monkeypatch.setattr(
        cli_module,
        "approve_clinic_draft",
        lambda draft_id, _options: called.append(draft_id),  # pyright: ignore[reportUnknownLambdaType]
    )

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["approve", "7", "--reviewer", "rev-1", "--manual-rating", "4.5"])

    assert excinfo.value.code == 2
    assert called == []


def test_drafts_list_rejects_non_positive_limit() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["drafts", "list", "--limit", "0"])

    assert excinfo.value.code == 2


def test_drafts_list_passes_filters(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_list(**kwargs: object) -> list[object]:
        captured.update(kwargs)
        return []

    monkeypatch.setattr(cli_module, "list_clinic_drafts", fake_list)

    cli_module.main(["drafts", "list", "--status", "pending_review", "--limit", "5"])

    assert captured == {"status": DraftStatus.PENDING_REVIEW, "source": None, "limit": 5}


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (DraftAlreadyResolvedError("Draft 7 is already approved"), 2),
        (TransactionFailureError("Approval of draft 7 failed"), 1),
    ],
    ids=["rejected-input", "failed-write"],
)
def test_approve_errors_map_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch,
    error: Exception,
    code: int,
) -> None:
    def fake_approve(_draft_id: int, _options: ApprovalOptions) -> ApprovalResult:
        raise error

    monkeypatch.setattr(cli_module, "approve_clinic_draft", fake_approve)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["approve", "7", "--reviewer", "rev-1"])

    assert excinfo.value.code == code


def test_submit_reads_wizard_payload(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: list[ClinicSubmission] = []

    def fake_submit(submission: ClinicSubmission) -> SubmissionReceipt:
        captured.append(submission)
        return SubmissionReceipt(
            submission_id="GLW-2025-0001",
            draft_id=1,
            status=DraftStatus.PENDING_REVIEW,
        )

    monkeypatch.setattr(cli_module, "submit_wizard_clinic", fake_submit)
    payload = tmp_path / "submission.json"
    payload.write_text(
        json.dumps(
            {
                "flow": "new_clinic",
                "submitterKey": "wizard-user",
                "clinic": {"clinicName": "Glow Aesthetics", "city": "Austin", "state": "TX"},
                "providers": [{"providerName": "Dr. Ada Park"}],
            }
        ),
        encoding="utf-8",
    )

    cli_module.main(["submit", str(payload)])

    [submission] = captured
    assert submission.flow is SubmissionFlow.NEW_CLINIC
    assert submission.submitted_by == "wizard-user"
    assert submission.clinic is not None
    assert submission.clinic.name == "Glow Aesthetics"


def test_submit_rejects_malformed_payload(tmp_path: Path) -> None:
    payload = tmp_path / "submission.json"
    payload.write_text(json.dumps({"clinic": {"clinicName": "No flow"}}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["submit", str(payload)])

    assert excinfo.value.code == 2
