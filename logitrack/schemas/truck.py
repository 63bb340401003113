# logitrack/schemas/truck.py
import math
import re
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from logitrack.schemas.validation import form_error, validate_form
from logitrack.utils.plates import PLATE_PATTERN

TRUCK_STATUSES = ("active", "inactive", "maintenance", "insurance-claim", "sold")
INSURANCE_TYPES = ("1", "2", "2+", "3", "3+")

REQUIRED_LABELS = {
    "province": "Province",
    "brand": "Brand",
    "model": "Model",
    "color": "Color",
    "type": "Type",
}

# field -> (label, upper bound); lower bound is always 0
NUMERIC_BOUNDS = {
    "engine_capacity": ("Engine capacity", 20000),
    "fuel_capacity": ("Fuel capacity", 1000),
    "max_load_weight": ("Max load weight", 100000),
    "insurance_premium": ("Premium", 1000000),
}

OWN_FLEET_REQUIRED = {
    "imageFrontRight": "Front-Right image is required for own fleet",
    "imageFrontLeft": "Front-Left image is required for own fleet",
    "imageBackRight": "Back-Right image is required for own fleet",
    "imageBackLeft": "Back-Left image is required for own fleet",
    "documentTax": "Tax document is required for own fleet",
    "documentRegister": "Registration document is required for own fleet",
    "fuelType": "Fuel type is required for own fleet",
}


def _leading_int(value: str) -> Optional[int]:
    """Integer prefix of a string ("7 seats" -> 7), None when there is none."""
    text = value.strip()
    sign = -1 if text.startswith("-") else 1
    digits = ""
    for ch in text.lstrip("+-"):
        if ch not in "0123456789":
            break
        digits += ch
    return sign * int(digits) if digits else None


class TruckForm(BaseModel):
    # Ownership
    ownership_type: Literal["own", "subcontractor"] = "own"
    subcontractor_id: str = ""

    # Identification
    license_plate: str = ""
    province: str = ""
    vin: str = ""
    engine_number: str = ""
    truck_status: str = ""

    # Vehicle details
    brand: str = ""
    model: str = ""
    year: str = ""
    color: str = ""
    type: str = ""
    seats: str = ""
    driver: str = ""

    # Engine
    fuel_type: str = ""
    engine_capacity: Optional[float] = None
    fuel_capacity: Optional[float] = None
    max_load_weight: Optional[float] = None

    # Registration
    registration_date: str = ""
    buying_date: str = ""
    notes: str = ""

    # Photos and documents
    image_front_right: str = ""
    image_front_left: str = ""
    image_back_right: str = ""
    image_back_left: str = ""
    document_tax: str = ""
    document_register: str = ""
    images: list[str] = Field(default_factory=list)

    # Insurance
    insurance_policy_id: str = ""
    insurance_policy_number: str = ""
    insurance_company: str = ""
    insurance_type: str = ""
    insurance_start_date: str = ""
    insurance_expiry_date: str = ""
    insurance_premium: Optional[float] = None
    insurance_documents: list[str] = Field(default_factory=list)
    insurance_notes: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        validate_default = True
        extra = "ignore"

    @field_validator("license_plate")
    @classmethod
    def _plate(cls, value: str) -> str:
        if not value:
            raise form_error("License plate is required")
        if not PLATE_PATTERN.fullmatch(value):
            raise form_error(
                "License plate must be in format xx-xxxx or xxx-xxxx (e.g., กก-1234 or 1กก-1234)"
            )
        return value

    @field_validator(*REQUIRED_LABELS)
    @classmethod
    def _required(cls, value: str, info) -> str:
        if not value.strip():
            raise form_error("{label} is required", label=REQUIRED_LABELS[info.field_name])
        return value

    @field_validator("vin")
    @classmethod
    def _vin(cls, value: str) -> str:
        if value and len(value) != 17:
            raise form_error("VIN must be exactly 17 characters")
        return value

    @field_validator("engine_number")
    @classmethod
    def _engine_number(cls, value: str) -> str:
        if value and len(value) != 10:
            raise form_error("Engine number must be exactly 10 characters")
        return value

    @field_validator("truck_status")
    @classmethod
    def _status(cls, value: str) -> str:
        if value == "":
            raise form_error("Truck status is required")
        if value not in TRUCK_STATUSES:
            raise form_error("Truck status must be one of: {allowed}", allowed=", ".join(TRUCK_STATUSES))
        return value

    @field_validator("year")
    @classmethod
    def _year(cls, value: str) -> str:
        if not re.fullmatch(r"[0-9]{4}", value):
            raise form_error("Year must be a 4-digit number")
        return value

    @field_validator("seats")
    @classmethod
    def _seats(cls, value: str) -> str:
        if not value:
            return value
        seats = _leading_int(value)
        if seats is None or not 0 <= seats <= 10:
            raise form_error("Seats must be 0-10 and cannot be negative")
        return value

    @field_validator(*NUMERIC_BOUNDS, mode="before")
    @classmethod
    def _bounded_number(cls, value: Any, info) -> Optional[float]:
        label, upper = NUMERIC_BOUNDS[info.field_name]
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise form_error("{label} must be a number", label=label)
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise form_error("{label} must be a number", label=label)
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise form_error("{label} must be a number", label=label)
        if value < 0:
            raise form_error("{label} cannot be negative", label=label)
        if value > upper:
            raise form_error("{label} cannot exceed {max}", label=label, max=upper)
        return value

    @field_validator("insurance_type")
    @classmethod
    def _insurance_type(cls, value: str) -> str:
        if value and value not in INSURANCE_TYPES:
            raise form_error("Insurance type must be one of: {allowed}", allowed=", ".join(INSURANCE_TYPES))
        return value

    def to_document(self) -> dict[str, Any]:
        """camelCase field-bag ready for the store. Unset numerics are left out."""
        return {k: v for k, v in self.model_dump(by_alias=True).items() if v is not None}


def refine_ownership(form: TruckForm) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    doc = form.model_dump(by_alias=True)
    if form.ownership_type == "own":
        for path, message in OWN_FLEET_REQUIRED.items():
            if not doc[path]:
                errors[path] = [message]
    elif not form.subcontractor_id:
        errors["subcontractorId"] = ["Subcontractor is required"]
    return errors


def validate_truck(payload: dict) -> TruckForm:
    """Validate a truck form. Raises FormValidationError with every failing field."""
    return validate_form(TruckForm, payload, (refine_ownership,))
