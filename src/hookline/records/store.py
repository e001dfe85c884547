"""Record store -- the owned, in-memory record set with referential integrity.

Holds the three ordered collections (contacts, deals, activities) and is the
only place they change. Every mutation either completes fully or raises
before touching any collection:

- creates validate their payload and foreign keys first,
- cascading deletes build every replacement collection, then swap them in
  together.

After each successful mutation the affected collections are handed to the
SnapshotStorage collaborator in full. A failed save is logged and counted but
never undoes the mutation: the in-memory state stays authoritative.

Activities are prepended on creation, so the collection is always newest
first. Contacts and deals keep insertion order, and updates replace records
in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from src.hookline.core.monitoring import record_mutations_total, storage_write_failures_total
from src.hookline.records.exceptions import (
    RecordNotFoundError,
    RecordValidationError,
    StorageWriteError,
)
from src.hookline.records.providers import Clock, IdSupplier, new_id, utc_now
from src.hookline.records.schemas import (
    Activity,
    ActivityCreate,
    Contact,
    ContactCreate,
    Deal,
    DealCreate,
    Snapshot,
)
from src.hookline.records.stages import breaks_terminal_probability
from src.hookline.storage.base import SnapshotStorage

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

CONTACTS = "contacts"
DEALS = "deals"
ACTIVITIES = "activities"

_COLLECTION_TYPES: dict[str, TypeAdapter] = {
    CONTACTS: TypeAdapter(list[Contact]),
    DEALS: TypeAdapter(list[Deal]),
    ACTIVITIES: TypeAdapter(list[Activity]),
}


# ── Payload Helpers ─────────────────────────────────────────────────────────


def _payload(fields: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(fields, BaseModel):
        return fields.model_dump()
    return dict(fields)


def _validate(model: type[M], payload: dict[str, Any]) -> M:
    """Validate a payload, converting schema failures to RecordValidationError."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise RecordValidationError(
            f"Invalid {model.__name__}: {fields}",
            errors=exc.errors(include_url=False, include_context=False),
        ) from exc


def _record_id(fields: BaseModel | Mapping[str, Any]) -> str:
    record_id = _payload(fields).get("id")
    if not record_id:
        raise RecordValidationError("Record id is required for updates")
    return str(record_id)


# ── Store ───────────────────────────────────────────────────────────────────


class RecordStore:
    """Owns contacts, deals and activities and enforces their integrity rules.

    Args:
        storage: Collaborator persisting each collection by key.
        id_supplier: Callable returning a fresh unique id.
        clock: Callable returning the current (timezone-aware) datetime.
        key_prefix: Prefix of the storage keys (``<prefix>contacts`` etc.).
        defaults: Record set used for any collection that storage does not
            hold (or holds in unreadable form). Empty when omitted.
    """

    def __init__(
        self,
        storage: SnapshotStorage,
        *,
        id_supplier: IdSupplier = new_id,
        clock: Clock = utc_now,
        key_prefix: str = "hl_",
        defaults: Snapshot | None = None,
    ) -> None:
        self._storage = storage
        self._new_id = id_supplier
        self._clock = clock
        self._key_prefix = key_prefix
        self._defaults = defaults or Snapshot()
        self._contacts: list[Contact] = list(self._defaults.contacts)
        self._deals: list[Deal] = list(self._defaults.deals)
        self._activities: list[Activity] = list(self._defaults.activities)

    # ── Lifecycle ───────────────────────────────────────────────────────────

    def storage_key(self, kind: str) -> str:
        return f"{self._key_prefix}{kind}"

    def load(self) -> None:
        """Replace the in-memory collections with the persisted ones.

        Any collection that is missing or unreadable falls back to the
        defaults given at construction; nothing is raised.
        """
        self._contacts = self._load_collection(CONTACTS, self._defaults.contacts)
        self._deals = self._load_collection(DEALS, self._defaults.deals)
        self._activities = self._load_collection(ACTIVITIES, self._defaults.activities)
        logger.info(
            "record_store_loaded",
            contacts=len(self._contacts),
            deals=len(self._deals),
            activities=len(self._activities),
        )

    def flush(self) -> None:
        """Persist every collection (used at shutdown)."""
        self._persist(CONTACTS, DEALS, ACTIVITIES)

    def _load_collection(self, kind: str, default: list[Any]) -> list[Any]:
        key = self.storage_key(kind)
        raw = self._storage.load(key, [record.model_dump(mode="json") for record in default])
        try:
            return _COLLECTION_TYPES[kind].validate_python(raw)
        except ValidationError as exc:
            # Same recovery as an unreadable file: fall back to the defaults.
            logger.warning(
                "snapshot_invalid_records",
                key=key,
                reason=f"{exc.error_count()} invalid field(s)",
            )
            return list(default)

    def _collection(self, kind: str) -> list[Any]:
        return {CONTACTS: self._contacts, DEALS: self._deals, ACTIVITIES: self._activities}[kind]

    def _persist(self, *kinds: str) -> None:
        for kind in kinds:
            key = self.storage_key(kind)
            records = [record.model_dump(mode="json") for record in self._collection(kind)]
            try:
                self._storage.save(key, records)
            except StorageWriteError as exc:
                storage_write_failures_total.labels(key=key).inc()
                logger.error("snapshot_save_failed", key=key, reason=exc.reason)

    # ── Reads ───────────────────────────────────────────────────────────────

    @property
    def contacts(self) -> list[Contact]:
        return list(self._contacts)

    @property
    def deals(self) -> list[Deal]:
        return list(self._deals)

    @property
    def activities(self) -> list[Activity]:
        return list(self._activities)

    def snapshot(self) -> Snapshot:
        """Return the current record set. Later mutations do not affect it."""
        return Snapshot(
            contacts=list(self._contacts),
            deals=list(self._deals),
            activities=list(self._activities),
        )

    def get_contact(self, contact_id: str) -> Contact:
        return self._find(self._contacts, contact_id, "contact")[1]

    def get_deal(self, deal_id: str) -> Deal:
        return self._find(self._deals, deal_id, "deal")[1]

    def get_activity(self, activity_id: str) -> Activity:
        return self._find(self._activities, activity_id, "activity")[1]

    @staticmethod
    def _find(records: list[M], record_id: str | None, kind: str) -> tuple[int, M]:
        for index, record in enumerate(records):
            if record.id == record_id:  # type: ignore[attr-defined]
                return index, record
        raise RecordNotFoundError(kind, record_id)

    # ── Contacts ────────────────────────────────────────────────────────────

    def create_contact(self, fields: ContactCreate | Mapping[str, Any]) -> Contact:
        """Create a contact stamped with a fresh id and today's date.

        Raises:
            RecordValidationError: If name or email is missing/blank.
        """
        data = _validate(ContactCreate, _payload(fields))
        contact = Contact(
            **data.model_dump(),
            id=self._new_id(),
            created_at=self._clock().date(),
        )
        self._contacts = [*self._contacts, contact]
        self._persist(CONTACTS)
        record_mutations_total.labels(kind="contact", operation="create").inc()
        logger.info("contact_created", contact_id=contact.id, type=contact.type.value)
        return contact

    def update_contact(self, contact: Contact | Mapping[str, Any]) -> Contact:
        """Replace the stored contact with the same id, keeping its position.

        ``created_at`` always keeps the stored value.

        Raises:
            RecordNotFoundError: If no contact has the given id.
            RecordValidationError: If the id is missing or a field is invalid.
        """
        record_id = _record_id(contact)
        index, existing = self._find(self._contacts, record_id, "contact")
        payload = _payload(contact)
        payload["created_at"] = existing.created_at
        updated = _validate(Contact, payload)

        contacts = list(self._contacts)
        contacts[index] = updated
        self._contacts = contacts
        self._persist(CONTACTS)
        record_mutations_total.labels(kind="contact", operation="update").inc()
        logger.info("contact_updated", contact_id=record_id)
        return updated

    def delete_contact(self, contact_id: str) -> None:
        """Delete a contact together with its deals and activities.

        Activities logged on any of the removed deals go too, even when they
        were recorded against another contact before the deal was reassigned.

        Raises:
            RecordNotFoundError: If no contact has ``contact_id``.
        """
        self._find(self._contacts, contact_id, "contact")

        contacts = [c for c in self._contacts if c.id != contact_id]
        deals = [d for d in self._deals if d.contact_id != contact_id]
        removed_deal_ids = {d.id for d in self._deals if d.contact_id == contact_id}
        activities = [
            a
            for a in self._activities
            if a.contact_id != contact_id and a.deal_id not in removed_deal_ids
        ]
        removed_deals = len(self._deals) - len(deals)
        removed_activities = len(self._activities) - len(activities)

        self._contacts, self._deals, self._activities = contacts, deals, activities
        self._persist(CONTACTS, DEALS, ACTIVITIES)
        record_mutations_total.labels(kind="contact", operation="delete").inc()
        logger.info(
            "contact_deleted",
            contact_id=contact_id,
            removed_deals=removed_deals,
            removed_activities=removed_activities,
        )

    # ── Deals ───────────────────────────────────────────────────────────────

    def create_deal(self, fields: DealCreate | Mapping[str, Any]) -> Deal:
        """Create a deal for an existing contact.

        Raises:
            RecordValidationError: If title/contact_id is missing or value or
                probability is out of range.
            RecordNotFoundError: If ``contact_id`` names no contact.
        """
        data = _validate(DealCreate, _payload(fields))
        self._find(self._contacts, data.contact_id, "contact")

        deal = Deal(**data.model_dump(), id=self._new_id())
        self._deals = [*self._deals, deal]
        self._persist(DEALS)
        record_mutations_total.labels(kind="deal", operation="create").inc()
        logger.info(
            "deal_created",
            deal_id=deal.id,
            contact_id=deal.contact_id,
            stage=deal.stage.value,
            value=deal.value,
        )
        return deal

    def update_deal(self, deal: Deal | Mapping[str, Any]) -> Deal:
        """Replace the stored deal with the same id, keeping its position.

        Stage and probability are taken as given: a WON deal below 100% or a
        LOST deal above 0% is accepted as a manual override and logged.

        Raises:
            RecordNotFoundError: If the deal or its ``contact_id`` does not exist.
            RecordValidationError: If the id is missing or a field is invalid.
        """
        record_id = _record_id(deal)
        index, _ = self._find(self._deals, record_id, "deal")
        updated = _validate(Deal, _payload(deal))
        self._find(self._contacts, updated.contact_id, "contact")

        deals = list(self._deals)
        deals[index] = updated
        self._deals = deals
        self._persist(DEALS)
        record_mutations_total.labels(kind="deal", operation="update").inc()
        logger.info(
            "deal_updated",
            deal_id=record_id,
            stage=updated.stage.value,
            probability=updated.probability,
            probability_override=breaks_terminal_probability(updated.stage, updated.probability),
        )
        return updated

    def delete_deal(self, deal_id: str) -> None:
        """Delete a deal together with the activities logged against it.

        Raises:
            RecordNotFoundError: If no deal has ``deal_id``.
        """
        self._find(self._deals, deal_id, "deal")

        deals = [d for d in self._deals if d.id != deal_id]
        activities = [a for a in self._activities if a.deal_id != deal_id]
        removed_activities = len(self._activities) - len(activities)

        self._deals, self._activities = deals, activities
        self._persist(DEALS, ACTIVITIES)
        record_mutations_total.labels(kind="deal", operation="delete").inc()
        logger.info("deal_deleted", deal_id=deal_id, removed_activities=removed_activities)

    # ── Activities ──────────────────────────────────────────────────────────

    def create_activity(self, fields: ActivityCreate | Mapping[str, Any]) -> Activity:
        """Log an activity stamped with the current time, at the front of the list.

        Raises:
            RecordValidationError: If contact_id/description is missing, or the
                deal belongs to a different contact.
            RecordNotFoundError: If ``contact_id`` or ``deal_id`` names no record.
        """
        data = _validate(ActivityCreate, _payload(fields))
        self._find(self._contacts, data.contact_id, "contact")
        if data.deal_id is not None:
            _, deal = self._find(self._deals, data.deal_id, "deal")
            if deal.contact_id != data.contact_id:
                raise RecordValidationError(
                    f"Deal {deal.id} belongs to contact {deal.contact_id}, "
                    f"not {data.contact_id}"
                )

        activity = Activity(**data.model_dump(), id=self._new_id(), date=self._clock())
        self._activities = [activity, *self._activities]
        self._persist(ACTIVITIES)
        record_mutations_total.labels(kind="activity", operation="create").inc()
        logger.info(
            "activity_created",
            activity_id=activity.id,
            type=activity.type.value,
            contact_id=activity.contact_id,
            deal_id=activity.deal_id,
        )
        return activity
