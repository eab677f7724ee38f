"""Administrator booking sub-flow.

Select a client, let the allocation policy pick a package of the chosen
type, then book. Package fetches carry a generation number so that a
fetch started for a previously selected client is ignored when it
finishes late.
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum

from ..backends.base import BookingGateway, ScheduleStore
from ..errors import BookingError, CoachbookError, FetchError
from ..models.booking import BookingReceipt
from ..models.packages import LessonPackage, PackageType
from ..models.people import Client, SessionContext
from ..rules.booking_validator import BookingValidator
from ..rules.package_allocation import select_best_package

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.25
DEFAULT_COMMIT_TIMEOUT = 10.0


class BookingPhase(str, Enum):
    """Where the booking sub-flow is."""

    IDLE = "idle"
    CLIENT_SELECTED = "client_selected"
    PACKAGES_LOADING = "packages_loading"
    PACKAGES_READY = "packages_ready"
    PACKAGE_SELECTED = "package_selected"
    BOOKING = "booking"
    ERROR = "error"


class BookingFlow:
    """State of one booking editor.

    All state is touched from the event loop only; the package and client
    lists are replaced wholesale on every fetch.
    """

    def __init__(
        self,
        store: ScheduleStore,
        gateway: BookingGateway,
        context: SessionContext,
        trainer_id: str,
        package_type: PackageType = PackageType.PRIVATE,
        validator: BookingValidator | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        commit_timeout: float = DEFAULT_COMMIT_TIMEOUT,
    ):
        self.store = store
        self.gateway = gateway
        self.context = context
        self.trainer_id = trainer_id
        self.validator = validator or BookingValidator()
        self.poll_interval = poll_interval
        self.commit_timeout = commit_timeout

        self.phase = BookingPhase.IDLE
        self.clients: list[Client] = []
        self.client_id: str | None = None
        self.packages: list[LessonPackage] = []
        self.package_type = package_type
        self.package_id: str | None = None
        self.error_message: str | None = None
        self.last_receipt: BookingReceipt | None = None
        self._generation = 0
        self._dismissed = False

    @property
    def is_booking(self) -> bool:
        return self.validator.is_booking

    async def load_clients(self) -> list[Client]:
        """Fetch the trainer's clients; only administrators may book."""
        if not self.context.is_admin:
            self.error_message = "Only administrators can book lessons"
            self.clients = []
            return self.clients

        try:
            self.clients = await self.store.fetch_clients(self.trainer_id)
            self.error_message = None
        except Exception as e:
            error = e if isinstance(e, FetchError) else FetchError(f"Failed to load clients: {e}")
            logger.warning("Client fetch for trainer %s failed: %s", self.trainer_id, e)
            self.clients = []
            self.error_message = error.message
        return self.clients

    async def select_client(self, client_id: str) -> bool:
        """Select a client and load their packages.

        Returns:
            False if the selection was refused (a booking is in flight) or
            superseded by a newer selection before its packages arrived
        """
        if self.is_booking:
            logger.debug("Ignoring client selection while booking")
            return False

        self._generation += 1
        generation = self._generation
        self.client_id = client_id
        self.packages = []
        self.package_id = None
        self.error_message = None
        self.phase = BookingPhase.CLIENT_SELECTED

        self.phase = BookingPhase.PACKAGES_LOADING
        try:
            packages = await self.store.fetch_packages(client_id)
        except Exception as e:
            if generation != self._generation:
                return False
            logger.warning("Package fetch for client %s failed: %s", client_id, e)
            self.packages = []
            self.error_message = FetchError(f"Failed to load packages: {e}").message
            self.phase = BookingPhase.PACKAGES_READY
            return True

        if generation != self._generation:
            logger.debug("Discarding stale packages for client %s", client_id)
            return False

        self.packages = packages
        self.phase = BookingPhase.PACKAGES_READY
        self._reselect_package()
        return True

    def select_package_type(self, package_type: PackageType | str) -> None:
        """Change the requested type; the package is re-picked automatically."""
        self.package_type = PackageType.parse(package_type)
        if self.phase in (BookingPhase.PACKAGES_READY, BookingPhase.PACKAGE_SELECTED):
            self._reselect_package()

    def _reselect_package(self, now: datetime | None = None) -> None:
        self.package_id = select_best_package(self.package_type, self.packages, now)
        if self.package_id:
            self.phase = BookingPhase.PACKAGE_SELECTED
        else:
            self.phase = BookingPhase.PACKAGES_READY

    def can_book(self, start: datetime, end: datetime) -> bool:
        return self.validator.can_book(self.client_id, self.package_id, start, end)

    async def book(self, start: datetime, end: datetime) -> bool:
        """Book a lesson for the selected client and package.

        Waits for the gateway's receipt and, if the write is not yet
        committed, polls until it is or the commit timeout passes.

        Returns:
            True when the booking is confirmed
        """
        if not self.can_book(start, end):
            if self.is_booking:
                return False
            self.error_message = self._missing_reason(start, end)
            self.phase = BookingPhase.ERROR
            return False

        self.validator.begin_booking()
        self.phase = BookingPhase.BOOKING
        self.error_message = None
        try:
            request = self.validator.booking_request(
                self.client_id, self.package_id, start, end
            )
            receipt = await self.gateway.book_lesson(self.trainer_id, request.to_payload())
            if not receipt.committed:
                await self._wait_until_committed(receipt.booking_id)
        except Exception as e:
            error = e if isinstance(e, CoachbookError) else BookingError(str(e))
            logger.warning("Booking for client %s failed: %s", self.client_id, error.message)
            self.error_message = error.message
            if self._dismissed:
                self._reset()
            else:
                self.phase = BookingPhase.ERROR
            return False
        finally:
            self.validator.end_booking()

        self.last_receipt = receipt
        logger.info("Booking %s confirmed", receipt.booking_id)
        self._reset()
        return True

    async def _wait_until_committed(self, booking_id: str) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.commit_timeout
        while not await self.gateway.booking_committed(booking_id):
            if loop.time() >= deadline:
                raise BookingError(
                    "booking was not confirmed", details={"booking_id": booking_id}
                )
            await asyncio.sleep(self.poll_interval)

    def _missing_reason(self, start: datetime, end: datetime) -> str:
        try:
            self.validator.booking_request(self.client_id, self.package_id, start, end)
        except BookingError as e:
            return e.message
        return "Booking is not possible right now"

    def dismiss(self) -> None:
        """Close the editor; an in-flight booking keeps running to completion."""
        if self.phase == BookingPhase.BOOKING:
            self._dismissed = True
            self.phase = BookingPhase.IDLE
            return
        self._reset()

    def _reset(self) -> None:
        self._generation += 1
        self._dismissed = False
        self.phase = BookingPhase.IDLE
        self.client_id = None
        self.packages = []
        self.package_id = None
