from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from clinic_intake.app import (
    approve_clinic_draft,
    check_clinic_duplicates,
    check_draft_duplicates,
    list_clinic_drafts,
    reject_clinic_draft,
    submit_wizard_clinic,
)
from clinic_intake.config import configure_logging
from clinic_intake.domain.errors import ValidationFailedError
from clinic_intake.domain.matching import ClinicQuery
from clinic_intake.domain.model import DraftSource, DraftStatus, PhotoSource, RatingSource
from clinic_intake.domain.resolution import ApprovalOptions
from clinic_intake.ui.payloads import SubmissionPayload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from clinic_intake.domain.matching import DuplicateCheckResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Review clinic submissions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check a clinic against the catalog")
    check.add_argument("--name", type=str, help="Clinic name")
    check.add_argument("--address", type=str, help="Street address")
    check.add_argument("--city", type=str, help="City")
    check.add_argument("--state", type=str, help="State")
    check.add_argument("--phone", type=str, help="Phone number in any format")
    check.add_argument("--website", type=str, help="Website URL or bare domain")
    check.add_argument("--place-id", type=str, help="Google place id")

    check_draft = subparsers.add_parser(
        "check-draft",
        help="Check a stored draft against the catalog",
    )
    check_draft.add_argument("draft_id", type=int, help="Draft id")

    submit = subparsers.add_parser("submit", help="Store a wizard submission as a draft")
    submit.add_argument("payload", type=Path, help="Path to the submission JSON")

    drafts = subparsers.add_parser("drafts", help="Draft queue commands")
    drafts_sub = drafts.add_subparsers(dest="drafts_command", required=True)
    drafts_list = drafts_sub.add_parser("list", help="List drafts, newest first")
    drafts_list.add_argument(
        "--status",
        type=DraftStatus,
        choices=list(DraftStatus),
        help="Only drafts in this status",
    )
    drafts_list.add_argument(
        "--source",
        type=DraftSource,
        choices=list(DraftSource),
        help="Only drafts from this source",
    )
    drafts_list.add_argument("--limit", type=int, help="Maximum number of drafts to list")

    approve = subparsers.add_parser("approve", help="Approve a draft into the catalog")
    approve.add_argument("draft_id", type=int, help="Draft id")
    approve.add_argument("--reviewer", type=str, required=True, help="Reviewer id")
    approve.add_argument(
        "--photo-source",
        type=PhotoSource,
        choices=list(PhotoSource),
        default=PhotoSource.USER,
        help="Photos to copy into the catalog (default: %(default)s)",
    )
    approve.add_argument(
        "--rating-source",
        type=RatingSource,
        choices=list(RatingSource),
        default=RatingSource.GOOGLE,
        help="Where the rating comes from (default: %(default)s)",
    )
    approve.add_argument("--manual-rating", type=float, help="Rating for --rating-source manual")
    approve.add_argument(
        "--manual-review-count",
        type=int,
        help="Review count for --rating-source manual",
    )

    reject = subparsers.add_parser("reject", help="Reject a draft")
    reject.add_argument("draft_id", type=int, help="Draft id")
    reject.add_argument("--reviewer", type=str, required=True, help="Reviewer id")

    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if args.command == "drafts" and args.limit is not None and args.limit < 1:
        raise ValueError("--limit must be positive")
    if args.command == "approve":
        manual_given = args.manual_rating is not None or args.manual_review_count is not None
        if manual_given and args.rating_source is not RatingSource.MANUAL:
            raise ValueError("--manual-rating/--manual-review-count need --rating-source manual")


def _log_duplicates(result: DuplicateCheckResult) -> None:
    if not result.has_duplicates:
        log.info("No potential duplicates found")
        return
    log.info(
        "Found %d potential duplicate(s), confidence=%s",
        len(result.matches),
        result.confidence,
    )
    for match in result.matches:
        log.info(
            "clinic %s %r (%s, %s): %s, %s, similarity=%.2f",
            match.clinic_id,
            match.clinic_name,
            match.city,
            match.state,
            match.reason,
            match.confidence,
            match.similarity,
        )


def _run_command(args: argparse.Namespace) -> None:  # noqa: C901
    if args.command == "check":
        query = ClinicQuery(
            name=args.name,
            address=args.address,
            city=args.city,
            state=args.state,
            phone=args.phone,
            website=args.website,
            place_ref=args.place_id,
        )
        if not query.has_signal():
            raise ValueError("Give at least one of --name, --address, --phone, --website, --place-id")
        _log_duplicates(check_clinic_duplicates(query))
    elif args.command == "check-draft":
        _log_duplicates(check_draft_duplicates(args.draft_id))
    elif args.command == "submit":
        payload = SubmissionPayload.model_validate_json(args.payload.read_text(encoding="utf-8"))
        receipt = submit_wizard_clinic(payload.to_submission())
        log.info(
            "Stored submission %s as draft %s (%s)",
            receipt.submission_id,
            receipt.draft_id,
            receipt.status,
        )
        if receipt.duplicate_warning is not None:
            warning = receipt.duplicate_warning
            log.warning(
                "Submission may duplicate clinic %s %r: %s (%s)",
                warning.clinic_id,
                warning.clinic_name,
                warning.reason,
                warning.confidence,
            )
    elif args.command == "drafts" and args.drafts_command == "list":
        drafts = list_clinic_drafts(status=args.status, source=args.source, limit=args.limit)
        for draft in drafts:
            log.info(
                "draft %s %s %r (%s, %s) status=%s source=%s",
                draft.id,
                draft.submission_id or "-",
                draft.clinic_name,
                draft.city,
                draft.state,
                draft.status,
                draft.source,
            )
        log.info("Listed %d draft(s)", len(drafts))
    elif args.command == "approve":
        result = approve_clinic_draft(
            args.draft_id,
            ApprovalOptions(
                reviewer_id=args.reviewer,
                photo_source=args.photo_source,
                rating_source=args.rating_source,
                manual_rating=args.manual_rating,
                manual_review_count=args.manual_review_count,
            ),
        )
        log.info(
            "Draft %s %s: clinic %s (%r)",
            args.draft_id,
            result.status,
            result.clinic_id,
            result.clinic_name,
        )
    elif args.command == "reject":
        draft = reject_clinic_draft(args.draft_id, reviewer_id=args.reviewer)
        log.info("Draft %s rejected by %s", draft.id, draft.reviewed_by)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate_args(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run_command(parsed_args)
    except (ValidationFailedError, ValueError):
        log.exception("Rejected input for %s", parsed_args.command)
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
