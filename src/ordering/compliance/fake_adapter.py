"""In-memory compliance records for development and testing."""

from ordering.compliance.port import (
    ComplianceInfo,
    ComplianceLookup,
    ComplianceStatus,
    ConsultationLink,
    PrescriptionLink,
    derive_compliance_status,
)


class InMemoryCompliance(ComplianceLookup):
    def __init__(self) -> None:
        self._prescription_orders: set[str] = set()
        self._prescriptions: dict[str, list[PrescriptionLink]] = {}
        self._consultations: dict[str, list[ConsultationLink]] = {}
        self.calls: list[str] = []

    def require_prescription(self, order_id: str) -> None:
        """Mark an order as containing prescription-only products."""
        self._prescription_orders.add(str(order_id))

    def link_prescription(
        self,
        order_id: str,
        prescription_id: str,
        status: ComplianceStatus = ComplianceStatus.PENDING,
        rejection_reason: str | None = None,
    ) -> None:
        self.require_prescription(order_id)
        self._prescriptions.setdefault(str(order_id), []).append(
            PrescriptionLink(id=prescription_id, status=status, rejection_reason=rejection_reason)
        )

    def link_consultation(
        self,
        order_id: str,
        consultation_id: str,
        status: ComplianceStatus = ComplianceStatus.PENDING,
    ) -> None:
        self.require_prescription(order_id)
        self._consultations.setdefault(str(order_id), []).append(
            ConsultationLink(id=consultation_id, status=status)
        )

    def get_compliance_info(self, order_id: str) -> ComplianceInfo | None:
        order_id = str(order_id)
        self.calls.append(order_id)
        if order_id not in self._prescription_orders:
            return None

        prescriptions = tuple(self._prescriptions.get(order_id, ()))
        consultations = tuple(self._consultations.get(order_id, ()))
        return ComplianceInfo(
            status=derive_compliance_status(prescriptions, consultations),
            prescriptions=prescriptions,
            consultations=consultations,
        )
