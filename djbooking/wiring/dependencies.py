from functools import lru_cache
import logging

from djbooking.core.config import settings
from djbooking.application.ports.booking_backend import BookingBackendPort
from djbooking.application.ports.wizard_store import WizardStorePort
from djbooking.application.use_cases.availability_gate import AvailabilityGateUseCase
from djbooking.application.use_cases.checkout_session import CheckoutSession
from djbooking.application.use_cases.payment_reconciliation import PaymentReconciliationUseCase
from djbooking.infrastructure.backend.booking_api_client import BookingApiClient
from djbooking.infrastructure.backend.mock_backend import MockBookingBackend
from djbooking.infrastructure.health.health_monitor import HealthMonitor
from djbooking.infrastructure.store.memory_wizard_store import MemoryWizardStore


@lru_cache
def get_booking_backend() -> BookingBackendPort:
    logger = logging.getLogger(__name__)
    if settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockBookingBackend (ENV=%s)", settings.ENV)
        return MockBookingBackend()
    logger.info("Using BookingApiClient at %s", settings.BOOKING_API_BASE_URL)
    return BookingApiClient()


@lru_cache
def get_wizard_store() -> WizardStorePort:
    return MemoryWizardStore()


@lru_cache
def get_health_monitor() -> HealthMonitor:
    return HealthMonitor(
        health_check_url=settings.HEALTH_CHECK_URL,
        interval_seconds=settings.HEALTH_POLL_INTERVAL_SECONDS,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def get_availability_gate() -> AvailabilityGateUseCase:
    return AvailabilityGateUseCase(backend=get_booking_backend())


def get_payment_reconciliation() -> PaymentReconciliationUseCase:
    return PaymentReconciliationUseCase(
        backend=get_booking_backend(),
        phone_prefix=settings.PHONE_COUNTRY_PREFIX,
        currency=settings.GATEWAY_CURRENCY,
        gateway_key_id=settings.GATEWAY_KEY_ID,
        merchant_name=settings.BUSINESS_NAME,
    )


def new_checkout_session() -> CheckoutSession:
    return CheckoutSession(
        gate=get_availability_gate(),
        reconciliation=get_payment_reconciliation(),
    )
