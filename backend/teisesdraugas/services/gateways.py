# teisesdraugas/services/gateways.py
"""
External delivery and e-filing collaborators.

E. pristatymas delivers demand letters with legal proof of service and
e.teismas (LITEKO) accepts signed court filings. Both sit behind the same
result shape: success flag, optional reference, optional error. A gateway
never raises for a missing configuration or an unavailable integration.

The simulated gateways acknowledge immediately with a synthetic reference.
The live gateways only check their configuration for now.
"""
import random
import string
import time
from dataclasses import dataclass
from typing import Optional

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import Case, CourtFiling, DemandLetter, SignatureMethod

NOT_IMPLEMENTED = "Production integration not yet implemented"


@dataclass
class SubmissionResult:
    success: bool
    reference: Optional[str] = None
    error: Optional[str] = None


def _millis() -> int:
    return int(time.time() * 1000)


# ============================================================================
# E. pristatymas (demand letters)
# ============================================================================

class SimulatedDeliveryGateway:
    """Acknowledges every letter with an EP-{ms}-{9 chars} reference"""

    def deliver(self, letter: DemandLetter, case: Case) -> SubmissionResult:
        suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
        reference = f"EP-{_millis()}-{suffix}"
        logger.info(f"Simulated E. pristatymas delivery for letter {letter.id}: {reference}")
        return SubmissionResult(success=True, reference=reference)


class EPristatymasGateway:

    def __init__(self, config: Settings):
        self.api_url = config.E_PRISTATYMAS_API_URL
        self.api_key = config.E_PRISTATYMAS_API_KEY

    def deliver(self, letter: DemandLetter, case: Case) -> SubmissionResult:
        if not self.api_url or not self.api_key:
            return SubmissionResult(success=False, error="E. pristatymas configuration missing")
        # TODO: submit the letter to the E. pristatymas API and poll the delivery status
        logger.warning(f"E. pristatymas delivery requested for letter {letter.id} but the integration is not available")
        return SubmissionResult(success=False, error=NOT_IMPLEMENTED)


# ============================================================================
# e.teismas (court filings)
# ============================================================================

class SimulatedFilingGateway:
    """Accepts every filing with an LT-{ms}-{6 CHARS} court reference"""

    def submit(self, filing: CourtFiling, case: Case, signature_method: SignatureMethod) -> SubmissionResult:
        suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
        reference = f"LT-{_millis()}-{suffix}"
        logger.info(f"Simulated e.teismas submission for filing {filing.id} via {signature_method.value}: {reference}")
        return SubmissionResult(success=True, reference=reference)


class ETeismasGateway:

    def __init__(self, config: Settings):
        self.api_url = config.E_TEISMAS_API_URL
        self.api_key = config.E_TEISMAS_API_KEY

    def submit(self, filing: CourtFiling, case: Case, signature_method: SignatureMethod) -> SubmissionResult:
        if not self.api_url or not self.api_key:
            return SubmissionResult(success=False, error="e.teismas configuration missing")
        # TODO: sign through Smart-ID/Mobile-ID and submit the XML to LITEKO
        logger.warning(f"e.teismas submission requested for filing {filing.id} but the integration is not available")
        return SubmissionResult(success=False, error=NOT_IMPLEMENTED)


def create_delivery_gateway(config: Settings):
    if config.DELIVERY_BACKEND == "live":
        return EPristatymasGateway(config)
    if config.DELIVERY_BACKEND == "simulated":
        return SimulatedDeliveryGateway()
    raise ValueError(f"Unknown DELIVERY_BACKEND: {config.DELIVERY_BACKEND}")


def create_filing_gateway(config: Settings):
    if config.FILING_BACKEND == "live":
        return ETeismasGateway(config)
    if config.FILING_BACKEND == "simulated":
        return SimulatedFilingGateway()
    raise ValueError(f"Unknown FILING_BACKEND: {config.FILING_BACKEND}")
