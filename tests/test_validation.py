"""
tests/test_validation.py -- Unit tests for inventory/validation.py.

Boundary rules: required fields, digits-only asset tag, catalog membership,
location normalization. Pure functions -- no fixtures beyond the form factory.
"""

import pytest

from core.catalogs import LOCATIONS, resolve_location
from core.errors import ValidationError
from inventory.validation import REQUIRED_FIELDS, validate_asset_tag, validate_input


class TestAssetTag:
    def test_non_numeric_asset_tag_rejected(self, make_form):
        with pytest.raises(ValidationError) as exc_info:
            validate_input(make_form(asset_tag="12a3"))
        assert exc_info.value.field == "asset_tag"

    @pytest.mark.parametrize("tag", ["-1", "1.5", "12 3", "abc"])
    def test_other_non_digit_tags_rejected(self, tag):
        with pytest.raises(ValidationError):
            validate_asset_tag(tag)

    def test_non_ascii_digits_rejected(self, make_form):
        # Arabic-Indic "100" would otherwise sit beside "100" as a second tag.
        with pytest.raises(ValidationError) as exc_info:
            validate_input(make_form(asset_tag="١٠٠"))
        assert exc_info.value.field == "asset_tag"

    def test_digits_accepted_and_stripped(self):
        assert validate_asset_tag(" 000123 ") == "000123"


class TestRequiredFields:
    @pytest.mark.parametrize("name", REQUIRED_FIELDS)
    def test_blank_field_rejected(self, make_form, name):
        with pytest.raises(ValidationError) as exc_info:
            validate_input(make_form(**{name: "   "}))
        assert exc_info.value.field == name

    def test_missing_field_rejected(self, make_form):
        data = make_form()
        del data["sector"]
        with pytest.raises(ValidationError) as exc_info:
            validate_input(data)
        assert exc_info.value.field == "sector"

    def test_valid_form_is_stripped(self, make_form):
        result = validate_input(make_form(brand="  Dell  ", serial_number=" SN1 "))
        assert result.brand == "Dell"
        assert result.serial_number == "SN1"


class TestCatalogs:
    def test_unknown_model_rejected(self, make_form):
        with pytest.raises(ValidationError) as exc_info:
            validate_input(make_form(model="Mainframe"))
        assert exc_info.value.field == "model"

    def test_unknown_ram_rejected(self, make_form):
        with pytest.raises(ValidationError) as exc_info:
            validate_input(make_form(ram_spec="64GBDDR5"))
        assert exc_info.value.field == "ram_spec"

    def test_unknown_location_rejected(self, make_form):
        with pytest.raises(ValidationError) as exc_info:
            validate_input(make_form(location="escola_inexistente"))
        assert exc_info.value.field == "location"

    def test_location_key_stored_as_display_name(self, make_form):
        result = validate_input(make_form(location="uab"))
        assert result.location == "Universidade Aberta Brasileira"

    def test_location_display_name_accepted(self, make_form):
        result = validate_input(make_form(location="E.M.E.I. Abelhinhas"))
        assert result.location == "E.M.E.I. Abelhinhas"

    def test_resolve_location_covers_every_key(self):
        for key, name in LOCATIONS.items():
            assert resolve_location(key) == name
        assert resolve_location("nowhere") is None
