# logitrack/services/mappers.py
"""
Record mappers: raw store field-bags -> fully shaped records.

Every field gets a default when it is absent or falsy, so consumers never see
a missing string or list. Enum-like values that are present are passed
through as stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Optional

from logitrack.errors import TimestampShapeError
from logitrack.store.timestamps import normalize_timestamp
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Truck:
    id: str
    ownership_type: str = "own"
    subcontractor_id: str = ""
    license_plate: str = ""
    province: str = ""
    vin: str = ""
    engine_number: str = ""
    truck_status: str = ""
    brand: str = ""
    model: str = ""
    year: str = ""
    color: str = ""
    type: str = ""
    seats: str = ""
    driver: str = ""
    fuel_type: str = ""
    engine_capacity: Optional[float] = None
    fuel_capacity: Optional[float] = None
    max_load_weight: Optional[float] = None
    registration_date: str = ""
    buying_date: str = ""
    notes: str = ""
    image_front_right: str = ""
    image_front_left: str = ""
    image_back_right: str = ""
    image_back_left: str = ""
    document_tax: str = ""
    document_register: str = ""
    images: list[str] = field(default_factory=list)
    insurance_policy_id: str = ""
    insurance_policy_number: str = ""
    insurance_company: str = ""
    insurance_type: str = ""
    insurance_start_date: str = ""
    insurance_expiry_date: str = ""
    insurance_premium: Optional[float] = None
    insurance_documents: list[str] = field(default_factory=list)
    insurance_notes: str = ""
    created_by: str = ""
    updated_by: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Subcontractor:
    id: str
    name: str = ""
    type: str = "individual"
    id_card_number: str = ""
    tax_id: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    status: str = "active"
    documents: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class UserRecord:
    id: str
    uid: str = ""
    email: str = ""
    display_name: str = ""
    photo_url: str = ""
    role: str = "user"
    admin: bool = False
    auth_creation_time: Optional[datetime] = None
    last_login: Optional[datetime] = None
    provider_data: list[str] = field(default_factory=list)


@dataclass
class WaitlistEntry:
    id: str
    email: str = ""
    created_at: Optional[datetime] = None


def _timestamp(value: Any, doc_id: str, field_name: str) -> Optional[datetime]:
    try:
        return normalize_timestamp(value or None)
    except TimestampShapeError as e:
        logger.warning(f"[MAPPER] {doc_id}.{field_name}: {e}; mapped to None")
        return None


def _auth_time(value: Any, doc_id: str, field_name: str) -> Optional[datetime]:
    """Auth metadata synced by older jobs is an RFC 2822 string ("Tue, 01 Oct 2024 ...")."""
    if isinstance(value, str) and value:
        try:
            return normalize_timestamp(parsedate_to_datetime(value))
        except (TypeError, ValueError):
            logger.warning(f"[MAPPER] {doc_id}.{field_name}: unparseable date {value!r}; mapped to None")
            return None
    return _timestamp(value, doc_id, field_name)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def map_truck(doc_id: str, data: dict) -> Truck:
    return Truck(
        id=doc_id,
        ownership_type=data.get("ownershipType") or "own",
        subcontractor_id=data.get("subcontractorId") or "",
        license_plate=data.get("licensePlate") or "",
        province=data.get("province") or "",
        vin=data.get("vin") or "",
        engine_number=data.get("engineNumber") or "",
        truck_status=data.get("truckStatus") or "",
        brand=data.get("brand") or "",
        model=data.get("model") or "",
        year=data.get("year") or "",
        color=data.get("color") or "",
        type=data.get("type") or "",
        seats=data.get("seats") or "",
        driver=data.get("driver") or "",
        fuel_type=data.get("fuelType") or "",
        engine_capacity=_number(data.get("engineCapacity")),
        fuel_capacity=_number(data.get("fuelCapacity")),
        max_load_weight=_number(data.get("maxLoadWeight")),
        registration_date=data.get("registrationDate") or "",
        buying_date=data.get("buyingDate") or "",
        notes=data.get("notes") or "",
        image_front_right=data.get("imageFrontRight") or "",
        image_front_left=data.get("imageFrontLeft") or "",
        image_back_right=data.get("imageBackRight") or "",
        image_back_left=data.get("imageBackLeft") or "",
        document_tax=data.get("documentTax") or "",
        document_register=data.get("documentRegister") or "",
        images=list(data.get("images") or []),
        insurance_policy_id=data.get("insurancePolicyId") or "",
        insurance_policy_number=data.get("insurancePolicyNumber") or "",
        insurance_company=data.get("insuranceCompany") or "",
        insurance_type=data.get("insuranceType") or "",
        insurance_start_date=data.get("insuranceStartDate") or "",
        insurance_expiry_date=data.get("insuranceExpiryDate") or "",
        insurance_premium=_number(data.get("insurancePremium")),
        insurance_documents=list(data.get("insuranceDocuments") or []),
        insurance_notes=data.get("insuranceNotes") or "",
        created_by=data.get("createdBy") or "",
        updated_by=data.get("updatedBy") or "",
        created_at=_timestamp(data.get("createdAt"), doc_id, "createdAt"),
        updated_at=_timestamp(data.get("updatedAt"), doc_id, "updatedAt"),
    )


def map_subcontractor(doc_id: str, data: dict) -> Subcontractor:
    return Subcontractor(
        id=doc_id,
        name=data.get("name") or "",
        type=data.get("type") or "individual",
        id_card_number=data.get("idCardNumber") or "",
        tax_id=data.get("taxId") or "",
        contact_person=data.get("contactPerson") or "",
        phone=data.get("phone") or "",
        email=data.get("email") or "",
        address=data.get("address") or "",
        status=data.get("status") or "active",
        documents=list(data.get("documents") or []),
        created_at=_timestamp(data.get("createdAt"), doc_id, "createdAt"),
        updated_at=_timestamp(data.get("updatedAt"), doc_id, "updatedAt"),
    )


def map_user(doc_id: str, data: dict) -> UserRecord:
    role = data.get("role") or "user"
    return UserRecord(
        id=doc_id,
        uid=data.get("uid") or doc_id,
        email=data.get("email") or "",
        display_name=data.get("displayName") or "",
        photo_url=data.get("photoURL") or "",
        role=role,
        admin=role == "admin",
        auth_creation_time=_auth_time(data.get("authCreationTime"), doc_id, "authCreationTime"),
        last_login=_auth_time(data.get("lastLogin"), doc_id, "lastLogin"),
        provider_data=list(data.get("providerData") or []),
    )


def map_waitlist_entry(doc_id: str, data: dict) -> WaitlistEntry:
    return WaitlistEntry(
        id=doc_id,
        email=data.get("email") or "",
        created_at=_timestamp(data.get("createdAt"), doc_id, "createdAt"),
    )
