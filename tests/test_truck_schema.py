# tests/test_truck_schema.py
"""Unit tests for truck form validation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from logitrack.errors import FormValidationError
from logitrack.schemas.truck import validate_truck
from logitrack.utils.plates import format_license_plate, is_valid_license_plate


def errors_for(payload):
    with pytest.raises(FormValidationError) as exc_info:
        validate_truck(payload)
    return exc_info.value.errors


class TestLicensePlate:
    @pytest.mark.parametrize("plate", ["กก-1234", "1กก-1234", "ขค-1"])
    def test_accepted(self, truck_payload, plate):
        assert validate_truck(truck_payload(licensePlate=plate)).license_plate == plate

    @pytest.mark.parametrize("plate", ["กก1234", "abc-1234", "กกก-1234", "กก-12345", "กก-1234\n", "กก-๑๒๓๔"])
    def test_rejected(self, truck_payload, plate):
        assert "licensePlate" in errors_for(truck_payload(licensePlate=plate))

    def test_empty_plate_is_required(self, truck_payload):
        assert errors_for(truck_payload(licensePlate=""))["licensePlate"] == ["License plate is required"]


class TestFieldRules:
    def test_valid_payload_is_typed(self, truck_payload):
        form = validate_truck(truck_payload())
        assert form.engine_capacity == 5193
        assert form.fuel_capacity == 200
        assert form.max_load_weight is None
        assert form.insurance_premium == 18500

    def test_all_field_errors_are_collected(self, truck_payload):
        errors = errors_for(truck_payload(province="", brand="", year="21", truckStatus=""))
        assert errors["province"] == ["Province is required"]
        assert errors["brand"] == ["Brand is required"]
        assert errors["year"] == ["Year must be a 4-digit number"]
        assert errors["truckStatus"] == ["Truck status is required"]

    def test_missing_status_uses_required_message(self, truck_payload):
        payload = truck_payload()
        del payload["truckStatus"]
        assert errors_for(payload)["truckStatus"] == ["Truck status is required"]

    def test_unknown_status(self, truck_payload):
        assert "truckStatus" in errors_for(truck_payload(truckStatus="parked"))

    def test_vin_and_engine_number_lengths(self, truck_payload):
        errors = errors_for(truck_payload(vin="SHORT", engineNumber="123"))
        assert errors["vin"] == ["VIN must be exactly 17 characters"]
        assert errors["engineNumber"] == ["Engine number must be exactly 10 characters"]

    def test_vin_and_engine_number_may_be_empty(self, truck_payload):
        form = validate_truck(truck_payload(vin="", engineNumber=""))
        assert form.vin == "" and form.engine_number == ""

    @pytest.mark.parametrize("seats", ["", "0", "10", "2 rows"])
    def test_seats_accepted(self, truck_payload, seats):
        validate_truck(truck_payload(seats=seats))

    @pytest.mark.parametrize("seats", ["11", "-1", "many", "๕"])
    def test_seats_rejected(self, truck_payload, seats):
        assert errors_for(truck_payload(seats=seats))["seats"] == ["Seats must be 0-10 and cannot be negative"]

    @pytest.mark.parametrize("year", ["๒๕๖๗", "2024\n", "20x4"])
    def test_year_must_be_four_ascii_digits(self, truck_payload, year):
        assert errors_for(truck_payload(year=year))["year"] == ["Year must be a 4-digit number"]

    def test_numeric_bounds_single_message(self, truck_payload):
        errors = errors_for(truck_payload(engineCapacity="20001", fuelCapacity=-5, insurancePremium="lots"))
        assert errors["engineCapacity"] == ["Engine capacity cannot exceed 20000"]
        assert errors["fuelCapacity"] == ["Fuel capacity cannot be negative"]
        assert errors["insurancePremium"] == ["Premium must be a number"]

    def test_numeric_upper_bound_is_inclusive(self, truck_payload):
        assert validate_truck(truck_payload(maxLoadWeight=100000)).max_load_weight == 100000

    def test_insurance_type(self, truck_payload):
        assert validate_truck(truck_payload(insuranceType="")).insurance_type == ""
        assert "insuranceType" in errors_for(truck_payload(insuranceType="4"))


class TestOwnershipRefinement:
    def test_own_fleet_requires_photos_documents_and_fuel(self, truck_payload):
        errors = errors_for(truck_payload(imageBackLeft="", documentTax="", fuelType=""))
        assert errors == {
            "imageBackLeft": ["Back-Left image is required for own fleet"],
            "documentTax": ["Tax document is required for own fleet"],
            "fuelType": ["Fuel type is required for own fleet"],
        }

    def test_subcontractor_truck_needs_subcontractor(self, truck_payload):
        payload = truck_payload(ownershipType="subcontractor", imageFrontRight="", documentTax="",
                                vin="", engineNumber="")
        assert errors_for(payload) == {"subcontractorId": ["Subcontractor is required"]}
        payload["subcontractorId"] = "sub-1"
        assert validate_truck(payload).subcontractor_id == "sub-1"

    def test_refinements_wait_for_field_errors(self, truck_payload):
        errors = errors_for(truck_payload(brand="", imageFrontRight=""))
        assert "brand" in errors
        assert "imageFrontRight" not in errors


class TestDocumentShape:
    def test_to_document_uses_stored_field_names(self, truck_payload):
        doc = validate_truck(truck_payload()).to_document()
        assert doc["licensePlate"] == "กก-1234"
        assert doc["ownershipType"] == "own"
        assert doc["insurancePremium"] == 18500
        assert "maxLoadWeight" not in doc

    def test_snake_case_input_is_accepted(self, truck_payload):
        payload = truck_payload()
        payload["license_plate"] = payload.pop("licensePlate")
        assert validate_truck(payload).license_plate == "กก-1234"


class TestFormatLicensePlate:
    @pytest.mark.parametrize("raw, expected", [
        ("กก1234", "กก-1234"),
        ("1กก 1234", "1กก-1234"),
        ("1กก-1234", "1กก-1234"),
        ("ABC-12", "ABC-12"),
        ("ABC 12", "ABC12"),
        ("", ""),
    ])
    def test_format(self, raw, expected):
        assert format_license_plate(raw) == expected

    def test_trailing_newline_is_not_a_valid_plate(self):
        assert is_valid_license_plate("กก-1234")
        assert not is_valid_license_plate("กก-1234\n")
