"""Explain why candidates stayed unconfirmed."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ammolink.domain.model import CandidateKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ammolink.domain.model import Candidate
    from ammolink.domain.reverse_index import ReverseReferenceIndex


def unconfirmed_reason(candidate: Candidate, reference_count: int, detector_name: str) -> str:
    suffix = f"Refs={reference_count};Detector={detector_name}"
    if candidate.base_weapon is None:
        return f"NoBaseWeapon;{suffix}"
    if candidate.kind is CandidateKind.CREATED_OBJECT:
        if candidate.candidate_ammo is None:
            return f"COBJ_NoAmmoLink;{suffix}"
        return f"COBJ_AmmoPresent_NotConfirmed;{suffix}"
    if candidate.candidate_ammo is not None and not candidate.candidate_ammo_name:
        return f"CandidateAmmo_UnresolvedName;{suffix}"
    if candidate.candidate_ammo is not None:
        return f"CandidateAmmo_Present_NotConfirmed;{suffix}"
    return f"NoAmmoDetected;{suffix}"


def annotate_unconfirmed(
    candidates: Sequence[Candidate],
    reverse_index: ReverseReferenceIndex,
    detector_name: str,
) -> int:
    """Fill ``confirm_reason`` of unconfirmed candidates that have none.

    Returns the number of candidates annotated. Confirmed candidates and
    candidates that already carry a reason are left alone.
    """

    annotated = 0
    for candidate in candidates:
        if candidate.confirmed or candidate.confirm_reason:
            continue
        references = (
            len(reverse_index.lookup(candidate.base_weapon)) if candidate.base_weapon else 0
        )
        candidate.confirm_reason = unconfirmed_reason(candidate, references, detector_name)
        annotated += 1
    return annotated
