"""Checklist to workflow status mapping."""
from app.domain import Checklist, ReleaseStatus

# Evaluated top-down, most complete first. A rule matches only when every
# flag it names is set, so later steps never count without the earlier ones.
STATUS_RULES: tuple[tuple[tuple[str, ...], ReleaseStatus], ...] = (
    (("files_verified", "metadata_verified", "sent_to_distributor", "share_in_sent"),
     ReleaseStatus.FINALIZED),
    (("files_verified", "metadata_verified", "sent_to_distributor"),
     ReleaseStatus.DISTRIBUTED),
    (("files_verified", "metadata_verified"),
     ReleaseStatus.APPROVED),
    (("files_verified",),
     ReleaseStatus.UNDER_REVIEW),
)


def derive_status(checklist: Checklist) -> ReleaseStatus:
    """Derive a release's status from its full checklist.

    Never returns REJECTED; that status is only ever set by hand.
    """
    for flags, status in STATUS_RULES:
        if all(getattr(checklist, flag) for flag in flags):
            return status
    return ReleaseStatus.NOT_UPLOADED
