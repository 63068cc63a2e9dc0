import pytest
from pydantic import ValidationError

from app.schemas import ImportRequest, apply_legacy_aliases
from importer.normalize import normalize_company
from importer.schemas import validate_companies


class TestValidateCompanies:
    def test_normalized_records_pass(self):
        records = [normalize_company({"company_name": "Acme", "reviews": ["Good"]}, session_id="s")]
        validated = validate_companies(records)
        assert validated[0]["company_name"] == "Acme"
        assert validated[0]["reviews"] == [{"text": "Good"}]
        assert validated[0]["company_contact_info"] == {}
        assert validated[0]["session_id"] == "s"

    def test_defaults_and_extra_keys(self):
        validated = validate_companies([{"company_name": "Acme", "surprise": 1}])
        record = validated[0]
        assert "surprise" not in record
        assert record["industries"] == []
        assert record["headquarters_location"] == "Unknown"
        assert record["red_flag"] is False
        assert record["normalized_domain"] == "unknown"
        assert record["session_id"] is None

    def test_one_bad_record_fails_the_batch(self):
        records = [{"company_name": "Acme"}, {"company_name": "Beta", "red_flag": "maybe"}]
        with pytest.raises(ValidationError):
            validate_companies(records)

    def test_missing_or_empty_name(self):
        with pytest.raises(ValidationError):
            validate_companies([{"url": "https://acme.com"}])
        with pytest.raises(ValidationError):
            validate_companies([{"company_name": ""}])

    def test_review_needs_text(self):
        with pytest.raises(ValidationError):
            validate_companies([{"company_name": "Acme", "reviews": [{"link": "https://x.com"}]}])

    @pytest.mark.parametrize("overrides", [
        {"manufacturing_locations": ["Reno", "Ohio"], "manu_lats": [1.0], "manu_lngs": []},
        {"manu_lats": [1.0], "manu_lngs": [2.0]},
        {"reviews": [{"text": "ok", "link": "not a url"}]},
        {"company_contact_info": {"contact_email": "nope"}},
        {"company_contact_info": {"contact_page_url": "ftp://x"}},
    ])
    def test_record_rule_violation_fails_the_batch(self, overrides):
        good = normalize_company({"company_name": "Beta"})
        with pytest.raises(ValidationError):
            validate_companies([good, {"company_name": "Acme", **overrides}])

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            validate_companies([{"company_name": "   "}])

    def test_valid_links_and_contacts_pass(self):
        record = {
            "company_name": "Acme",
            "manufacturing_locations": ["Reno"],
            "manu_lats": [39.5],
            "manu_lngs": [-119.8],
            "reviews": [{"text": "ok", "link": "https://reviews.example.com/1"}],
            "company_contact_info": {"contact_email": "hi@acme.com", "contact_page_url": "https://acme.com/contact"},
        }
        assert validate_companies([record])[0]["company_contact_info"]["contact_email"] == "hi@acme.com"


class TestImportRequest:
    def test_defaults(self):
        req = ImportRequest.model_validate({})
        assert req.maxImports == 1
        assert req.search_dict() == {}
        assert req.requested_timeout_ms is None

    @pytest.mark.parametrize("value", [0, 51, -1, "3", 2.5])
    def test_max_imports_bounds(self, value):
        with pytest.raises(ValidationError):
            ImportRequest.model_validate({"maxImports": value})

    def test_timeout_aliases(self):
        assert ImportRequest.model_validate({"timeout_ms": 20000}).requested_timeout_ms == 20000
        assert ImportRequest.model_validate({"timeoutMs": 30000}).requested_timeout_ms == 30000

    def test_search_rejects_unknown_filter(self):
        with pytest.raises(ValidationError):
            ImportRequest.model_validate({"search": {"ceo": "Jane"}})

    def test_search_dict_drops_unset(self):
        req = ImportRequest.model_validate({"search": {"industries": "Tools"}})
        assert req.search_dict() == {"industries": "Tools"}


class TestLegacyAliases:
    def test_limit(self):
        assert apply_legacy_aliases({"limit": 5}) == {"maxImports": 5}
        assert apply_legacy_aliases({"limit": 5, "maxImports": 2}) == {"maxImports": 2}

    def test_query_type(self):
        body = apply_legacy_aliases({"queryType": "Product_Keyword", "query": "drills"})
        assert body == {"search": {"product_keywords": "drills"}}

    def test_query_type_merges_into_search(self):
        body = apply_legacy_aliases({"queryType": "url", "query": "acme.com", "search": {"industries": "Tools"}})
        assert body["search"] == {"industries": "Tools", "url": "acme.com"}

    def test_unknown_query_type_ignored(self):
        assert apply_legacy_aliases({"queryType": "ceo", "query": "Jane"}) == {}

    def test_malformed_search_left_for_validation(self):
        body = apply_legacy_aliases({"search": "Tools", "queryType": "industries", "query": "Tools"})
        assert body == {"search": "Tools"}
        with pytest.raises(ValidationError):
            ImportRequest.model_validate(body)
