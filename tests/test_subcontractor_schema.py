# tests/test_subcontractor_schema.py
"""Unit tests for subcontractor validation and the Thai ID check digit."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from logitrack.errors import FormValidationError
from logitrack.schemas.subcontractor import validate_subcontractor
from logitrack.utils.thai_id import is_valid_thai_id, thai_id_check_digit

VALID_ID = "1101700203450"
VALID_TAX_ID = "0105536000020"


def errors_for(payload):
    with pytest.raises(FormValidationError) as exc_info:
        validate_subcontractor(payload)
    return exc_info.value.errors


class TestThaiId:
    def test_known_valid_numbers(self):
        assert is_valid_thai_id(VALID_ID)
        assert is_valid_thai_id(VALID_TAX_ID)

    def test_computed_check_digit_passes(self):
        first_twelve = "358201234567"
        assert is_valid_thai_id(first_twelve + str(thai_id_check_digit(first_twelve)))

    def test_changed_check_digit_fails(self):
        for digit in "123456789":
            assert not is_valid_thai_id(VALID_ID[:12] + digit)

    @pytest.mark.parametrize("position", [0, 4, 7, 11])
    def test_changed_body_digit_fails(self, position):
        digit = int(VALID_ID[position])
        changed = VALID_ID[:position] + str((digit + 1) % 10) + VALID_ID[position + 1:]
        assert not is_valid_thai_id(changed)

    @pytest.mark.parametrize("value", ["", "123", "11017002034501", "11017OO203450",
                                       "1101700203450\n", "๑๑๐๑๗๐๐๒๐๓๔๕๐"])
    def test_wrong_shape(self, value):
        assert not is_valid_thai_id(value)


class TestSubcontractorForm:
    def test_valid_individual(self, subcontractor_payload):
        form = validate_subcontractor(subcontractor_payload())
        assert form.type == "individual"
        assert form.id_card_number == VALID_ID
        assert form.documents == []

    def test_individual_needs_valid_id(self, subcontractor_payload):
        errors = errors_for(subcontractor_payload(idCardNumber="1101700203451"))
        assert list(errors) == ["idCardNumber"]

    def test_id_with_trailing_newline_is_rejected(self, subcontractor_payload):
        errors = errors_for(subcontractor_payload(idCardNumber=VALID_ID + "\n"))
        assert list(errors) == ["idCardNumber"]

    def test_company_needs_valid_tax_id_and_ignores_id_card(self, subcontractor_payload):
        payload = subcontractor_payload(type="company", idCardNumber="garbage", taxId=VALID_TAX_ID)
        assert validate_subcontractor(payload).tax_id == VALID_TAX_ID
        assert list(errors_for(subcontractor_payload(type="company", taxId=""))) == ["taxId"]

    def test_required_fields_and_email(self, subcontractor_payload):
        errors = errors_for(subcontractor_payload(name="", phone="", email="not-an-email"))
        assert errors["name"] == ["Name is required"]
        assert errors["phone"] == ["Phone is required"]
        assert errors["email"] == ["Invalid email"]

    def test_empty_email_allowed(self, subcontractor_payload):
        assert validate_subcontractor(subcontractor_payload(email="")).email == ""

    def test_defaults(self):
        form = validate_subcontractor({"name": "A", "contactPerson": "B", "phone": "1", "idCardNumber": VALID_ID})
        assert form.type == "individual"
        assert form.status == "active"

    def test_bad_status(self, subcontractor_payload):
        assert "status" in errors_for(subcontractor_payload(status="deleted"))
