"""Deterministic vote counting against a fixed yes-vote threshold."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

VOTE_CHOICES = ("yes", "no", "abstain")


@dataclass(slots=True, frozen=True)
class TallyResult:
    """Counts and verdict for one set of votes."""

    yes_count: int
    no_count: int
    abstain_count: int
    total_count: int
    passed: bool

    def as_payload(self) -> dict[str, object]:
        return {
            "yes_count": self.yes_count,
            "no_count": self.no_count,
            "abstain_count": self.abstain_count,
            "total_count": self.total_count,
            "passed": self.passed,
        }


def tally_votes(choices: Iterable[str | None], threshold: int) -> TallyResult:
    """Count yes/no/abstain case-insensitively; pass when yes votes reach the threshold.

    Abstentions and missing votes never help a proposal reach the threshold.
    Unrecognized choice strings are not counted.
    """

    counts = dict.fromkeys(VOTE_CHOICES, 0)
    for raw in choices:
        value = str(raw or "").strip().lower()
        if value in counts:
            counts[value] += 1
    return TallyResult(
        yes_count=counts["yes"],
        no_count=counts["no"],
        abstain_count=counts["abstain"],
        total_count=sum(counts.values()),
        passed=counts["yes"] >= threshold,
    )
