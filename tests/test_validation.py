"""Tests for payload validation, markup stripping and PII masking."""

import pytest

from crm_intake.webhook_api.schemas.inquiry import InquiryPayload, RecruitPayload
from crm_intake.webhook_api.services.validation import (
    MASK,
    PayloadValidationError,
    mask_pii,
    sanitize_fields,
    strip_markup,
    validate_payload,
)


class TestStripMarkup:
    """Tests for strip_markup."""

    def test_removes_tags(self):
        assert strip_markup("<b>Kim</b>") == "Kim"

    def test_trims_whitespace(self):
        assert strip_markup("  <p> hello </p>\n") == "hello"

    def test_none_is_empty(self):
        assert strip_markup(None) == ""

    def test_plain_text_untouched(self):
        assert strip_markup("010-1111-2222") == "010-1111-2222"

    def test_entities_survive(self):
        """Encoded markup is not decoded."""
        assert strip_markup("&lt;script&gt;") == "&lt;script&gt;"


class TestMaskPii:
    """Tests for mask_pii."""

    def test_masks_phone_and_birthday(self):
        body = {"name": "Kim", "phone": "010-1111-2222", "birthday": "1990-01-01"}
        masked = mask_pii(body)
        assert masked == {"name": "Kim", "phone": MASK, "birthday": MASK}

    def test_original_untouched(self):
        body = {"phone": "010-1111-2222"}
        mask_pii(body)
        assert body["phone"] == "010-1111-2222"

    def test_empty_values_left_alone(self):
        assert mask_pii({"phone": "", "birthday": None}) == {"phone": "", "birthday": None}

    def test_non_dict_passthrough(self):
        assert mask_pii(["a"]) == ["a"]


class TestValidatePayload:
    """Tests for validate_payload."""

    def test_all_fields_optional(self):
        payload = validate_payload(InquiryPayload, {})
        assert payload.name is None
        assert payload.request is None

    def test_unknown_fields_ignored(self):
        payload = validate_payload(InquiryPayload, {"name": "Kim", "extra": "x"})
        assert payload.name == "Kim"

    def test_bad_date_format(self):
        with pytest.raises(PayloadValidationError) as exc:
            validate_payload(InquiryPayload, {"date": "2024/01/01"})
        assert "date" in exc.value.field_errors

    def test_non_ascii_digits_in_date(self):
        """Only ASCII digits form a valid date."""
        with pytest.raises(PayloadValidationError) as exc:
            validate_payload(InquiryPayload, {"date": "٢٠٢٥-٠١-٠١"})
        assert "date" in exc.value.field_errors
        with pytest.raises(PayloadValidationError):
            validate_payload(RecruitPayload, {"date": "２０２５-01-01"})

    def test_good_date(self):
        payload = validate_payload(InquiryPayload, {"date": "2024-01-01"})
        assert payload.date == "2024-01-01"

    def test_too_long_field(self):
        with pytest.raises(PayloadValidationError) as exc:
            validate_payload(InquiryPayload, {"phone": "1" * 31, "name": "n" * 101})
        assert set(exc.value.field_errors) == {"phone", "name"}

    def test_request_length_bound(self):
        validate_payload(InquiryPayload, {"request": "r" * 5000})
        with pytest.raises(PayloadValidationError):
            validate_payload(InquiryPayload, {"request": "r" * 5001})

    def test_non_string_rejected(self):
        with pytest.raises(PayloadValidationError) as exc:
            validate_payload(InquiryPayload, {"phone": 1011112222})
        assert "phone" in exc.value.field_errors

    def test_non_object_body(self):
        with pytest.raises(PayloadValidationError) as exc:
            validate_payload(InquiryPayload, ["not", "an", "object"])
        assert "_root" in exc.value.field_errors

    def test_recruit_fields(self):
        payload = validate_payload(RecruitPayload, {"age": "31", "career": "c" * 5000})
        assert payload.age == "31"
        with pytest.raises(PayloadValidationError):
            validate_payload(RecruitPayload, {"referer_page": "u" * 2001})


class TestSanitizeFields:
    """Tests for sanitize_fields."""

    def test_strips_every_text_field(self):
        payload = InquiryPayload(name="<b>Kim</b>", source_url=" <i>https://x.test</i> ")
        fields = sanitize_fields(payload)
        assert fields["name"] == "Kim"
        assert fields["source_url"] == "https://x.test"

    def test_absent_text_becomes_empty(self):
        fields = sanitize_fields(InquiryPayload())
        assert fields["phone"] == ""
        assert fields["request"] == ""

    def test_date_passes_through(self):
        assert sanitize_fields(InquiryPayload())["date"] is None
        assert sanitize_fields(InquiryPayload(date="2024-05-06"))["date"] == "2024-05-06"
