"""User notification texts for detected violations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .contracts import IncompatibilityViolation, QuantityViolation, ViolationReport


def incompatibility_message(violation: IncompatibilityViolation) -> str:
    return (
        f'Le produit "{violation.line.display_title}" est incompatible avec '
        f'"{violation.blocking.display_title}". Le produit incompatible sera supprimé.'
    )


def clamp_message(violation: QuantityViolation) -> str:
    return (
        f'La quantité maximale pour le produit "{violation.line.display_title}" est '
        f"{violation.limit}. Le produit sera ajusté à cette limite."
    )


def notifications(report: ViolationReport) -> tuple[str, ...]:
    messages = [incompatibility_message(violation) for violation in report.incompatibilities]
    messages.extend(clamp_message(report.clamps[index]) for index in sorted(report.clamps))
    return tuple(messages)
