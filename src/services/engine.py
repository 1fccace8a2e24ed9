import logging
import uuid
from collections.abc import Iterable
from datetime import datetime

from src.core.exceptions import (
    DuplicateSlotError,
    DuplicateVehicleError,
    InvalidInputError,
    SessionNotActiveError,
    SlotOccupiedError,
    UnknownSessionError,
    UnknownSlotError,
    UnknownVehicleError,
    VehicleAlreadyParkedError,
)
from src.schemas.parking import Slot
from src.schemas.payment import Payment
from src.schemas.session import FeeCalculation, ParkingSession
from src.schemas.vehicle import Vehicle
from src.services.fees import as_utc, calculate_fee, elapsed_seconds, format_elapsed
from src.utils.constants import (
    PAYMENT_ID_PREFIX,
    SESSION_ID_PREFIX,
    SessionStatus,
    SlotStatus,
    StorageKey,
)

logger = logging.getLogger(__name__)


def generate_slot_id() -> str:
    return uuid.uuid4().hex[:12]


def generate_session_id() -> str:
    return f"{SESSION_ID_PREFIX}-{uuid.uuid4().hex[:12].upper()}"


def generate_payment_id() -> str:
    return f"{PAYMENT_ID_PREFIX}-{uuid.uuid4().hex[:12].upper()}"


def normalize_key(value: str | None) -> str:
    return (value or "").strip().upper()


class ParkingEngine:
    """
    Owns the slots, vehicles, sessions and payments of one parking lot.

    Every operation validates first and mutates afterwards, so a raised error
    leaves all four collections untouched. Multi-collection changes (starting,
    ending and deleting a session) are applied in one uninterrupted sequence;
    no caller can observe a session whose slot has not been flipped yet.

    ``version`` increases after every accepted mutation so that observers
    (the storage adapter) know when a new snapshot has to be written.
    """

    def __init__(
        self,
        hourly_rate: float,
        slots: Iterable[Slot] = (),
        vehicles: Iterable[Vehicle] = (),
        sessions: Iterable[ParkingSession] = (),
        payments: Iterable[Payment] = (),
    ):
        self.hourly_rate = hourly_rate
        self._slots: list[Slot] = list(slots)
        self._vehicles: list[Vehicle] = list(vehicles)
        self._sessions: list[ParkingSession] = list(sessions)
        self._payments: list[Payment] = list(payments)
        self.version = 0
        self._drop_duplicates()
        self._reconcile_slots()

    # Read access

    @property
    def slots(self) -> tuple[Slot, ...]:
        return tuple(self._slots)

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return tuple(self._vehicles)

    @property
    def sessions(self) -> tuple[ParkingSession, ...]:
        return tuple(self._sessions)

    @property
    def payments(self) -> tuple[Payment, ...]:
        return tuple(self._payments)

    def get_vehicle(self, plate_number: str) -> Vehicle:
        plate = normalize_key(plate_number)
        for vehicle in self._vehicles:
            if vehicle.plate_number == plate:
                return vehicle
        raise UnknownVehicleError(f"Vehicle {plate} is not registered")

    def get_slot(self, slot_id: str) -> Slot:
        return self._slots[self._slot_index(slot_id)]

    def get_session(self, session_id: str) -> ParkingSession:
        return self._sessions[self._session_index(session_id)]

    def active_session_for(self, plate_number: str) -> ParkingSession | None:
        plate = normalize_key(plate_number)
        for session in self._sessions:
            if session.plate_number == plate and session.status == SessionStatus.ACTIVE:
                return session
        return None

    def available_slots(self) -> list[Slot]:
        return [s for s in self._slots if s.status == SlotStatus.AVAILABLE]

    # Mutations

    def register_vehicle(
        self, plate_number: str, driver_name: str, phone_number: str | None = None
    ) -> Vehicle:
        plate = normalize_key(plate_number)
        name = (driver_name or "").strip()
        if not plate or not name:
            raise InvalidInputError("Plate number and driver name are required")
        if any(v.plate_number == plate for v in self._vehicles):
            raise DuplicateVehicleError(f"Vehicle {plate} is already registered")

        vehicle = Vehicle(
            plate_number=plate,
            driver_name=name,
            phone_number=(phone_number or "").strip() or None,
        )
        self._vehicles.append(vehicle)
        self._changed("Registered vehicle %s", plate)
        return vehicle

    def add_slot(self, slot_number: str) -> Slot:
        number = self._check_slot_number(slot_number)
        slot = Slot(id=generate_slot_id(), slot_number=number, status=SlotStatus.AVAILABLE)
        self._slots.append(slot)
        self._changed("Added slot %s", number)
        return slot

    def rename_slot(self, slot_id: str, slot_number: str) -> Slot:
        index = self._slot_index(slot_id)
        slot = self._slots[index]
        if slot.status != SlotStatus.AVAILABLE:
            # Active sessions reference slots by number
            raise SlotOccupiedError(f"Slot {slot.slot_number} is occupied and cannot be renamed")
        number = normalize_key(slot_number)
        if number == slot.slot_number:
            return slot
        number = self._check_slot_number(number)

        renamed = slot.model_copy(update={"slot_number": number})
        self._slots[index] = renamed
        self._changed("Renamed slot %s to %s", slot.slot_number, number)
        return renamed

    def start_session(self, plate_number: str, slot_id: str, now: datetime) -> ParkingSession:
        vehicle = self.get_vehicle(plate_number)
        slot_index = self._slot_index(slot_id)
        slot = self._slots[slot_index]
        if slot.status != SlotStatus.AVAILABLE:
            raise SlotOccupiedError(f"Slot {slot.slot_number} is already occupied")
        existing = self.active_session_for(vehicle.plate_number)
        if existing is not None:
            raise VehicleAlreadyParkedError(
                f"Vehicle {vehicle.plate_number} is already parked in {existing.slot_number} "
                f"(ticket: {existing.id})"
            )

        session = ParkingSession(
            id=generate_session_id(),
            plate_number=vehicle.plate_number,
            slot_number=slot.slot_number,
            driver_name=vehicle.driver_name,
            entry_time=as_utc(now),
            status=SessionStatus.ACTIVE,
        )
        self._sessions.append(session)
        self._slots[slot_index] = slot.model_copy(update={"status": SlotStatus.OCCUPIED})
        self._changed("Parked %s in %s", vehicle.plate_number, slot.slot_number)
        return session

    def end_session(self, session_id: str, now: datetime) -> tuple[ParkingSession, Payment]:
        index = self._session_index(session_id)
        session = self._sessions[index]
        if session.status != SessionStatus.ACTIVE:
            raise SessionNotActiveError(f"Session {session_id} has already been checked out")

        exit_time = as_utc(now)
        fee = calculate_fee(session.entry_time, exit_time, self.hourly_rate)

        completed = session.model_copy(
            update={
                "exit_time": exit_time,
                "duration": fee.duration_hours,
                "amount_paid": fee.amount,
                "status": SessionStatus.COMPLETED,
            }
        )
        payment = Payment(
            id=generate_payment_id(),
            session_id=session.id,
            plate_number=session.plate_number,
            amount_paid=fee.amount,
            payment_date=exit_time,
        )
        self._sessions[index] = completed
        self._payments.append(payment)
        self._release_slot(session.slot_number)
        self._changed(
            "Checked out %s from %s: %s hour(s), %s",
            session.plate_number,
            session.slot_number,
            fee.duration_hours,
            fee.amount,
        )
        return completed, payment

    def delete_session(self, session_id: str) -> None:
        """
        Remove a session. An active session gives its slot back first.

        Payments are left in place; a deleted completed session keeps its
        payment as part of the payment history.
        """
        index = self._session_index(session_id)
        session = self._sessions[index]
        if session.status == SessionStatus.ACTIVE:
            self._release_slot(session.slot_number)
        del self._sessions[index]
        self._changed("Deleted %s session %s", session.status.value.lower(), session_id)

    # Fees

    def current_fee(self, session_id: str, now: datetime) -> FeeCalculation:
        """Running fee of an active session, or what a completed one was billed."""
        session = self.get_session(session_id)
        if session.status == SessionStatus.ACTIVE:
            return calculate_fee(session.entry_time, now, self.hourly_rate)

        # The rate may have changed since checkout
        return FeeCalculation(
            elapsed_seconds=int(elapsed_seconds(session.entry_time, session.exit_time)),
            elapsed=format_elapsed(session.entry_time, session.exit_time),
            duration_hours=session.duration,
            hourly_rate=round(session.amount_paid / session.duration, 2),
            amount=session.amount_paid,
        )

    # Snapshots

    def snapshot(self) -> dict[StorageKey, list[dict]]:
        return {
            StorageKey.SLOTS: [s.model_dump(mode="json") for s in self._slots],
            StorageKey.VEHICLES: [v.model_dump(mode="json") for v in self._vehicles],
            StorageKey.SESSIONS: [s.model_dump(mode="json") for s in self._sessions],
            StorageKey.PAYMENTS: [p.model_dump(mode="json") for p in self._payments],
        }

    # Internals

    def _changed(self, message: str, *args) -> None:
        self.version += 1
        logger.info(message, *args)

    def _check_slot_number(self, slot_number: str) -> str:
        number = normalize_key(slot_number)
        if not number:
            raise InvalidInputError("Slot number is required")
        if any(s.slot_number == number for s in self._slots):
            raise DuplicateSlotError(f"Slot {number} already exists")
        return number

    def _slot_index(self, slot_id: str) -> int:
        for index, slot in enumerate(self._slots):
            if slot.id == slot_id:
                return index
        raise UnknownSlotError(f"Slot {slot_id} not found")

    def _session_index(self, session_id: str) -> int:
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                return index
        raise UnknownSessionError(f"Session {session_id} not found")

    def _release_slot(self, slot_number: str) -> None:
        for index, slot in enumerate(self._slots):
            if slot.slot_number == slot_number:
                self._slots[index] = slot.model_copy(update={"status": SlotStatus.AVAILABLE})

    def _reconcile_slots(self) -> None:
        occupied = {s.slot_number for s in self._sessions if s.status == SessionStatus.ACTIVE}
        for index, slot in enumerate(self._slots):
            expected = SlotStatus.OCCUPIED if slot.slot_number in occupied else SlotStatus.AVAILABLE
            if slot.status != expected:
                logger.warning(
                    "Slot %s was stored as %s, correcting to %s",
                    slot.slot_number,
                    slot.status.value,
                    expected.value,
                )
                self._slots[index] = slot.model_copy(update={"status": expected})

        known = {s.slot_number for s in self._slots}
        for number in occupied - known:
            logger.warning("Active session references unknown slot %s", number)

    def _drop_duplicates(self) -> None:
        """Keep the first of any records that break uniqueness in loaded data."""
        self._vehicles = _first_by(self._vehicles, lambda v: v.plate_number, "vehicle")
        self._slots = _first_by(self._slots, lambda s: s.slot_number, "slot")
        self._slots = _first_by(self._slots, lambda s: s.id, "slot id")

        parked_plates: set[str] = set()
        parked_slots: set[str] = set()
        sessions = []
        for session in _first_by(self._sessions, lambda s: s.id, "session"):
            if session.status == SessionStatus.ACTIVE:
                if session.plate_number in parked_plates or session.slot_number in parked_slots:
                    logger.warning(
                        "Dropping active session %s: %s or %s already has an active session",
                        session.id,
                        session.plate_number,
                        session.slot_number,
                    )
                    continue
                parked_plates.add(session.plate_number)
                parked_slots.add(session.slot_number)
            sessions.append(session)
        self._sessions = sessions


def _first_by(records: list, key, label: str) -> list:
    seen = set()
    kept = []
    for record in records:
        value = key(record)
        if value in seen:
            logger.warning("Dropping duplicate %s %s", label, value)
            continue
        seen.add(value)
        kept.append(record)
    return kept
