"""Compliance lookup port.

Prescription review lives outside ordering. For orders containing
prescription-only products, the compliance side reports the review state of
the prescriptions and consultations linked to the order; ordering only reads
it to decorate order details.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class ComplianceStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class PrescriptionLink:
    id: str
    status: ComplianceStatus
    rejection_reason: str | None = None


@dataclass(frozen=True)
class ConsultationLink:
    id: str
    status: ComplianceStatus


@dataclass(frozen=True)
class ComplianceInfo:
    status: ComplianceStatus
    prescriptions: tuple[PrescriptionLink, ...] = field(default_factory=tuple)
    consultations: tuple[ConsultationLink, ...] = field(default_factory=tuple)


def derive_compliance_status(prescriptions, consultations) -> ComplianceStatus:
    """Any approval clears the order; otherwise any rejection rejects it; otherwise it waits."""
    statuses = [link.status for link in (*prescriptions, *consultations)]
    if ComplianceStatus.APPROVED in statuses:
        return ComplianceStatus.APPROVED
    if ComplianceStatus.REJECTED in statuses:
        return ComplianceStatus.REJECTED
    return ComplianceStatus.PENDING


class ComplianceLookup(ABC):
    @abstractmethod
    def get_compliance_info(self, order_id: str) -> ComplianceInfo | None:
        """Return the review state, or None when the order has no prescription items."""
        ...
