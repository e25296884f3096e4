"""
Atelier Catalog — Facet Normalizer Unit Tests
===============================================

What:  Per-rule coercion and rejection, trust badge slotting, root and
       statistic normalization.
How:   Pure function calls; no database.
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.services.normalizer import normalize_facet, normalize_root, normalize_statistic


class TestDecimalRule:

    def test_float_and_padded_string_store_identically(self):
        a = normalize_facet("pricing", {"price": 12.5})
        b = normalize_facet("pricing", {"price": "12.50"})
        assert a == b == {"price": "12.50"}

    def test_scaled_values_round_half_up(self):
        assert normalize_facet("pricing", {"price": "10.005"}) == {"price": "10.01"}
        assert normalize_facet("pricing", {"priceUSD": Decimal("3")}) == {"price_usd": "3.00"}

    def test_unscaled_values_strip_trailing_zeros(self):
        assert normalize_facet("basic", {"weight": "1.500"}) == {"weight": "1.5"}
        assert normalize_facet("basic", {"weight": "1E+2"}) == {"weight": "100"}
        assert normalize_facet("pricing", {"discount": 0}) == {"discount": "0"}

    @pytest.mark.parametrize("value", [True, "NaN", "Infinity", float("inf"), "abc", [1]])
    def test_non_numbers_are_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            normalize_facet("pricing", {"price": value})
        assert exc_info.value.field == "price"

    def test_range_is_enforced(self):
        with pytest.raises(ValidationError):
            normalize_facet("pricing", {"price": -1})
        with pytest.raises(ValidationError):
            normalize_facet("pricing", {"discount": "100.5"})
        with pytest.raises(ValidationError):
            normalize_facet("shippingPolicies", {"weightKg": 1001})

    @pytest.mark.parametrize("value", ["1e999999999", "1E+1000000", "1e40"])
    def test_huge_exponents_are_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            normalize_facet("basic", {"weight": value})
        assert exc_info.value.field == "weight"


class TestIntegerRule:

    def test_integral_values_become_strings(self):
        assert normalize_facet("basic", {"stock": 5}) == {"stock": "5"}
        assert normalize_facet("basic", {"stock": "7"}) == {"stock": "7"}
        assert normalize_facet("basic", {"stock": 3.0}) == {"stock": "3"}

    @pytest.mark.parametrize("value", [5.5, True, "five", "2.5"])
    def test_non_integers_are_rejected(self, value):
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"stock": value})

    def test_bounds(self):
        with pytest.raises(ValidationError):
            normalize_facet("reels", {"durationSec": 0})
        with pytest.raises(ValidationError):
            normalize_facet("reels", {"durationSec": 301})
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"minOrderQty": 0})
        assert normalize_facet("reels", {"durationSec": 300}) == {"duration_sec": "300"}


class TestScalarRules:

    def test_boolean_accepts_literals(self):
        assert normalize_facet("basic", {"isFeatured": True}) == {"is_featured": True}
        assert normalize_facet("basic", {"isFeatured": "false"}) == {"is_featured": False}
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"isFeatured": "yes"})
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"isFeatured": " TRUE "})
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"isFeatured": "False"})
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"isFeatured": 1})

    def test_enum_membership(self):
        assert normalize_facet("pricing", {"currency": "USD"}) == {"currency": "USD"}
        with pytest.raises(ValidationError) as exc_info:
            normalize_facet("pricing", {"currency": "JPY"})
        assert exc_info.value.context["facet"] == "pricing"

    def test_string_length_bounds(self):
        assert normalize_facet("seo", {"seoTitle": "x" * 60}) == {"seo_title": "x" * 60}
        with pytest.raises(ValidationError):
            normalize_facet("seo", {"seoTitle": "x" * 61})
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"brand": ""})

    def test_url_is_checked_and_stored_as_submitted(self):
        url = "https://cdn.example.com/og/ring-a.jpg"
        assert normalize_facet("seo", {"ogImage": url}) == {"og_image": url}
        with pytest.raises(ValidationError):
            normalize_facet("seo", {"canonicalUrl": "not a url"})

    def test_uuid_references_are_parsed(self):
        ref = uuid.uuid4()
        assert normalize_facet("basic", {"categoryId": str(ref)}) == {"category_id": ref}
        with pytest.raises(ValidationError):
            normalize_facet("basic", {"collectionId": "not-a-uuid"})

    def test_dates(self):
        assert normalize_facet("basic", {"publishedAt": "2024-01-15T12:00:00Z"}) == {
            "published_at": "2024-01-15T12:00:00Z"
        }
        assert normalize_facet("pricing", {"saleStartAt": date(2024, 1, 15)}) == {
            "sale_start_at": "2024-01-15"
        }
        with pytest.raises(ValidationError):
            normalize_facet("pricing", {"saleEndAt": "next tuesday"})

    def test_text_accepts_any_length(self):
        blurb = "a" * 5000
        assert normalize_facet("itemDetails", {"sellerBlurb": blurb}) == {"seller_blurb": blurb}


class TestJsonRules:

    def test_arrays_are_serialized_compactly(self):
        assert normalize_facet("basic", {"colors": ["gold", "rose"]}) == {"colors": '["gold","rose"]'}
        assert normalize_facet("basic", {"colors": '[ "gold" , "rose" ]'}) == {"colors": '["gold","rose"]'}

    def test_non_ascii_is_kept(self):
        assert normalize_facet("basic", {"tags": ["café"]}) == {"tags": '["café"]'}

    def test_object_field_requires_object(self):
        assert normalize_facet("attributesTag", {"attributes": {"metal": "gold"}}) == {
            "attributes": '{"metal":"gold"}'
        }
        with pytest.raises(ValidationError):
            normalize_facet("attributesTag", {"attributes": ["gold"]})

    def test_array_field_rejects_other_json(self):
        with pytest.raises(ValidationError):
            normalize_facet("media", {"images": '{"a": 1}'})
        with pytest.raises(ValidationError):
            normalize_facet("media", {"images": "[not json"})


class TestTrustBadges:

    def test_five_badges_keep_first_three_in_order(self):
        values = normalize_facet("itemDetails", {"trustBadges": ["a", "b", "c", "d", "e"]})
        assert values == {
            "trust_badge_1": '"a"',
            "trust_badge_2": '"b"',
            "trust_badge_3": '"c"',
        }

    def test_short_lists_clear_remaining_slots(self):
        values = normalize_facet("itemDetails", {"trustBadges": [{"icon": "shield"}, ""]})
        assert values == {
            "trust_badge_1": '{"icon":"shield"}',
            "trust_badge_2": None,
            "trust_badge_3": None,
        }

    def test_json_text_is_decoded_first(self):
        values = normalize_facet("itemDetails", {"trustBadges": '["x", "y", "z", "w"]'})
        assert values["trust_badge_3"] == '"z"'

    def test_plain_text_goes_whole_into_first_slot(self):
        values = normalize_facet("itemDetails", {"trustBadges": "Certified gold"})
        assert values == {
            "trust_badge_1": "Certified gold",
            "trust_badge_2": None,
            "trust_badge_3": None,
        }

    def test_json_that_is_not_an_array_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_facet("itemDetails", {"trustBadges": '{"a": 1}'})
        assert exc_info.value.field == "trustBadges"

    def test_none_clears_every_slot(self):
        values = normalize_facet("itemDetails", {"trustBadges": None})
        assert values == {"trust_badge_1": None, "trust_badge_2": None, "trust_badge_3": None}


class TestNormalizeFacet:

    def test_unknown_facet_is_not_found(self):
        with pytest.raises(NotFoundError):
            normalize_facet("warranty", {})

    def test_unknown_field_is_rejected_with_its_name(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_facet("pricing", {"prize": 10})
        assert exc_info.value.field == "prize"
        assert exc_info.value.context["facet"] == "pricing"

    def test_explicit_none_clears_the_column(self):
        assert normalize_facet("pricing", {"price": None}) == {"price": None}

    def test_only_supplied_fields_are_returned(self):
        assert normalize_facet("pricing", {}) == {}

    def test_payload_must_be_an_object(self):
        with pytest.raises(ValidationError):
            normalize_facet("pricing", ["price", 10])

    def test_identical_input_gives_identical_output(self):
        raw = {"price": 99.9, "currency": "PKR", "saleStartAt": "2024-02-01"}
        assert normalize_facet("pricing", raw) == normalize_facet("pricing", dict(raw))


class TestNormalizeRoot:

    def test_statistics_and_audit_fields_are_dropped(self):
        values = normalize_root({
            "name": "Ring A",
            "price": 100,
            "rating": "4.9",
            "views": 1000,
            "reviewsCount": 12,
            "id": str(uuid.uuid4()),
            "createdBy": "mallory",
        })
        assert values == {"name": "Ring A", "price": "100.00"}

    def test_name_is_required_on_create(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_root({"price": 10})
        assert exc_info.value.field == "name"

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_root({"name": "   "})

    def test_partial_update_may_omit_name(self):
        assert normalize_root({"shortDescription": "18k gold"}, partial=True) == {
            "short_description": "18k gold"
        }

    def test_partial_update_cannot_clear_name(self):
        with pytest.raises(ValidationError):
            normalize_root({"name": None}, partial=True)

    def test_unknown_root_field_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_root({"name": "Ring A", "warranty": {}})
        assert exc_info.value.field == "warranty"


class TestNormalizeStatistic:

    def test_rating_is_two_place_text(self):
        assert normalize_statistic("rating", 4.567) == "4.57"
        assert normalize_statistic("rating", "5") == "5.00"

    def test_rating_range(self):
        with pytest.raises(ValidationError):
            normalize_statistic("rating", 5.01)
        with pytest.raises(ValidationError):
            normalize_statistic("rating", -0.5)

    def test_counts_are_integers(self):
        assert normalize_statistic("reviewsCount", "3") == 3
        assert normalize_statistic("views", 10) == 10
        with pytest.raises(ValidationError):
            normalize_statistic("views", -1)

    def test_unknown_statistic_and_missing_value(self):
        with pytest.raises(ValidationError):
            normalize_statistic("likes", 1)
        with pytest.raises(ValidationError):
            normalize_statistic("rating", None)
