from importer.dedupe import Deduplicator, dedup_key
from importer.normalize import normalize_company


def _record(name, url="", **extra):
    return normalize_company({"company_name": name, "url": url, **extra})


def test_same_name_and_domain_kept_once():
    dedupe = Deduplicator()
    dedupe.add_page([_record("Acme", "https://acme.com", notes="first")])
    novel = dedupe.add_page([_record("Acme", "https://www.acme.com/about", notes="second")])
    assert novel == []
    assert len(dedupe) == 1
    assert dedupe.accepted[0]["notes"] == "first"


def test_duplicates_inside_one_page_dropped():
    dedupe = Deduplicator()
    novel = dedupe.add_page([_record("Acme", "https://acme.com"), _record("Acme", "acme.com")])
    assert len(novel) == 1
    assert dedupe.names == ["Acme"]


def test_different_domain_or_name_is_distinct():
    dedupe = Deduplicator()
    dedupe.add_page([
        _record("Acme", "https://acme.com"),
        _record("Acme", "https://acme.co.uk"),
        _record("ACME", "https://acme.com"),
    ])
    assert len(dedupe) == 3


def test_key():
    assert dedup_key(_record("Acme", "https://WWW.Acme.com")) == ("Acme", "acme.com")
    assert dedup_key(_record("Acme")) == ("Acme", "unknown")
