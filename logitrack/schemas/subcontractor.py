# logitrack/schemas/subcontractor.py
from typing import Any, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from logitrack.schemas.validation import form_error, validate_form
from logitrack.utils.thai_id import is_valid_thai_id

REQUIRED_LABELS = {
    "name": "Name",
    "contact_person": "Contact person",
    "phone": "Phone",
}


class SubcontractorForm(BaseModel):
    name: str = ""
    type: Literal["individual", "company"] = "individual"
    id_card_number: str = ""
    tax_id: str = ""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    status: Literal["active", "pending", "suspended"] = "active"
    documents: list[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        validate_default = True
        extra = "ignore"

    @field_validator(*REQUIRED_LABELS)
    @classmethod
    def _required(cls, value: str, info) -> str:
        if not value.strip():
            raise form_error("{label} is required", label=REQUIRED_LABELS[info.field_name])
        return value

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        if not value:
            return value
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise form_error("Invalid email")
        return value

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def refine_identity(form: SubcontractorForm) -> dict[str, list[str]]:
    """Individuals need a valid national ID, companies a valid tax ID. The other field is not checked."""
    if form.type == "individual" and not is_valid_thai_id(form.id_card_number):
        return {"idCardNumber": ["Please enter a valid 13-digit national ID number"]}
    if form.type == "company" and not is_valid_thai_id(form.tax_id):
        return {"taxId": ["Please enter a valid 13-digit tax ID number"]}
    return {}


def validate_subcontractor(payload: dict) -> SubcontractorForm:
    return validate_form(SubcontractorForm, payload, (refine_identity,))
