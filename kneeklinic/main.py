"""
kneeklinic/main.py

Purpose: Application entry point

- Loads configuration and logging
- Opens local storage and restores the saved session
- Wires the API client, services and auth session together
- Manages application lifecycle (startup/shutdown)
- No business logic should be written here
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from kneeklinic.core.config import settings, validate_settings
from kneeklinic.core.logging import setup_logging, get_logger
from kneeklinic.flow.handlers.password_reset import PasswordResetFlow
from kneeklinic.flow.handlers.signup import SignupFlow
from kneeklinic.services.activity_service import ActivityService
from kneeklinic.services.api_client import ApiClient
from kneeklinic.services.appointment_service import AppointmentService
from kneeklinic.services.auth_service import AuthService
from kneeklinic.services.community_service import CommunityService
from kneeklinic.services.health_service import HealthService
from kneeklinic.services.message_service import MessageService
from kneeklinic.services.session_service import init_auth_session, reset_auth_session
from kneeklinic.services.step_counter_service import StepCounterService
from kneeklinic.services.xray_service import XRayService
from kneeklinic.storage.local_store import InMemoryStore, close_store, open_store, use_store
from kneeklinic.utils.constants import APP_NAME, APP_VERSION

logger = get_logger(__name__)


class KneeKlinicApp:
    """
    Everything a patient-facing front end needs, built around one store and one API client.
    """

    def __init__(
        self,
        store: InMemoryStore,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.store = store
        self.client = ApiClient(store, base_url=base_url, transport=transport)

        self.auth = AuthService(self.client)
        self.messages = MessageService(self.client)
        self.community = CommunityService(self.client)
        self.xray = XRayService(self.client)
        self.appointments = AppointmentService(self.client)
        self.activity = ActivityService(self.client)
        self.health = HealthService(self.client)

        self.session = init_auth_session(store, self.auth)
        self.step_counter = StepCounterService(self.health)

    def signup_flow(self) -> SignupFlow:
        return SignupFlow(self.session)

    def password_reset_flow(self) -> PasswordResetFlow:
        return PasswordResetFlow(self.auth)


_app: Optional[KneeKlinicApp] = None


@asynccontextmanager
async def lifespan(
    store: Optional[InMemoryStore] = None,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[KneeKlinicApp]:
    """
    Application lifespan manager.
    Handles startup and shutdown.

    Usage:
        async with lifespan() as app:
            user = await app.session.login(email, password)
    """
    global _app

    setup_logging()
    logger.info(f"Starting {APP_NAME} client v{APP_VERSION}...")

    try:
        validate_settings()
        logger.info("Configuration validated")

        store = use_store(store) if store is not None else open_store()

        _app = KneeKlinicApp(store, base_url=base_url, transport=transport)
        user = _app.session.load()

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Backend: {_app.client.base_url}")
        if user:
            logger.info("Signed in from stored session", extra={"user_id": user.id})
        else:
            logger.info("No stored session")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        close_store()
        raise

    try:
        yield _app
    finally:
        logger.info("Shutting down KneeKlinic client...")
        _app = None
        reset_auth_session()
        close_store()
        logger.info("KneeKlinic client shut down")


def get_app() -> KneeKlinicApp:
    """
    Returns the running application.

    Raises:
        RuntimeError: Outside of `lifespan()`
    """
    if _app is None:
        raise RuntimeError("Application not started. Use `async with lifespan()`.")
    return _app
