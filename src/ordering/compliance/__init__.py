"""Compliance lookup factory, selected by ``COMPLIANCE_ADAPTER``."""

import os

from ordering.compliance.port import ComplianceLookup

_current_compliance: ComplianceLookup | None = None


def get_compliance() -> ComplianceLookup:
    global _current_compliance
    if _current_compliance is None:
        adapter = os.environ.get("COMPLIANCE_ADAPTER", "memory")
        if adapter == "memory":
            from ordering.compliance.fake_adapter import InMemoryCompliance

            _current_compliance = InMemoryCompliance()
        else:
            raise ValueError(f"Unknown compliance adapter: {adapter}")
    return _current_compliance


def set_compliance(compliance: ComplianceLookup) -> None:
    global _current_compliance
    _current_compliance = compliance


def reset_compliance() -> None:
    global _current_compliance
    _current_compliance = None
