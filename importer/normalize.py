import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

AMAZON_AFFILIATE_TAG = "tabarnam00-20"

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INDUSTRY_SPLIT_RE = re.compile(r"[,;|]")
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

# Record field -> source fields, tried in order
FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "company_name": ("company_name", "name", "company"),
    "tagline_source": ("description", "product_focus", "products"),
    "product_keywords": ("product_keywords", "related_products", "keywords"),
    "url": ("url", "website"),
    "email_address": ("email_address", "email"),
    "headquarters_location": ("headquarters_location", "headquarters"),
    "amazon_url": ("amazon_url", "amazon"),
}


# ------------------ Validation helpers ------------------

def is_valid_url(value: Any) -> bool:
    try:
        parsed = urlparse(str(value).strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_email(value: Any) -> bool:
    return bool(EMAIL_RE.match(str(value or "").strip()))


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _with_scheme(url: str) -> str:
    return url if SCHEME_RE.match(url) else f"https://{url}"


def resolve_field(fragment: Mapping, field: str, default: Any = "") -> Any:
    """Returns the first truthy value among the aliases of `field`."""
    for key in FIELD_ALIASES[field]:
        value = fragment.get(key)
        if value:
            return value
    return default


# ------------------ Field coercions ------------------

def to_normalized_domain(url_or_host: Any) -> str:
    s = _text(url_or_host)
    if not s:
        return "unknown"
    try:
        host = urlparse(_with_scheme(s)).hostname or ""
    except ValueError:
        return "unknown"
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or "unknown"


def ensure_affiliate_tag(value: Any) -> str:
    url = _text(value)
    if not url:
        return ""
    try:
        parsed = urlparse(_with_scheme(url))
        host = parsed.hostname or ""
    except ValueError:
        return url
    if "amazon." not in host.lower():
        return url
    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != "tag"]
    query.append(("tag", AMAZON_AFFILIATE_TAG))
    return urlunparse(parsed._replace(query=urlencode(query)))


def normalize_industries(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        items = [_text(v) for v in value]
    elif isinstance(value, str):
        items = [s.strip() for s in INDUSTRY_SPLIT_RE.split(value)]
    else:
        return []
    # dict.fromkeys keeps first-seen order
    return list(dict.fromkeys(item for item in items if item))


def normalize_keywords(fragment: Mapping) -> str:
    for key in FIELD_ALIASES["product_keywords"]:
        value = fragment.get(key)
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
    return ""


def normalize_tagline(fragment: Mapping) -> str:
    tagline = _text(fragment.get("company_tagline"))
    if tagline:
        return tagline
    source = resolve_field(fragment, "tagline_source")
    if not isinstance(source, str):
        return ""
    return source.split(". ")[0].strip()


def normalize_manufacturing(fragment: Mapping) -> List[str]:
    locations = fragment.get("manufacturing_locations")
    if isinstance(locations, str):
        locations = [locations]
    if not isinstance(locations, (list, tuple)) or not locations:
        single = fragment.get("manufacturing")
        locations = [single] if single else []
    return [loc for loc in (_text(v) for v in locations) if loc]


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def coerce_reviews(value: Any) -> List[Dict[str, str]]:
    if not value:
        return []
    if isinstance(value, str):
        return [{"text": value.strip()}] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []

    reviews = []
    for item in value:
        if isinstance(item, str):
            review = {"text": item.strip()}
        elif isinstance(item, Mapping):
            review = {"text": _text(item.get("text"))}
            link = _text(item.get("link"))
            if is_valid_url(link):
                review["link"] = link
        else:
            continue
        if review["text"]:
            reviews.append(review)
    return reviews


def sanitize_contact_info(value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    out = {}
    page_url = _text(value.get("contact_page_url"))
    email = _text(value.get("contact_email"))
    if is_valid_url(page_url):
        out["contact_page_url"] = page_url
    if is_valid_email(email):
        out["contact_email"] = email
    return out


# ------------------ Record ------------------

def normalize_company(fragment: Any, session_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Maps one model fragment onto the canonical company record.

    Coordinates start at 0 (one pair per manufacturing location) and are
    filled in by `importer.geocode.enrich_company`.
    """
    if not isinstance(fragment, Mapping):
        raise TypeError(f"company fragment must be an object, got {type(fragment).__name__}")

    industries = fragment.get("industries")
    if not industries:
        industries = [fragment.get("category") or ""]

    url = _text(resolve_field(fragment, "url"))
    manufacturing = normalize_manufacturing(fragment)

    return {
        "company_name": _text(resolve_field(fragment, "company_name")) or "Unknown",
        "company_tagline": normalize_tagline(fragment),
        "industries": normalize_industries(industries),
        "product_keywords": normalize_keywords(fragment),
        "url": url,
        "email_address": _text(resolve_field(fragment, "email_address")),
        "headquarters_location": _text(resolve_field(fragment, "headquarters_location")) or "Unknown",
        "manufacturing_locations": manufacturing,
        "amazon_url": ensure_affiliate_tag(resolve_field(fragment, "amazon_url")),
        "red_flag": coerce_bool(fragment.get("red_flag")),
        "hq_lat": 0.0,
        "hq_lng": 0.0,
        "lat": 0.0,
        "long": 0.0,
        "manu_lats": [0.0] * len(manufacturing),
        "manu_lngs": [0.0] * len(manufacturing),
        "reviews": coerce_reviews(fragment.get("reviews")),
        "notes": _text(fragment.get("notes")),
        "company_contact_info": sanitize_contact_info(fragment.get("company_contact_info")),
        "id": str(uuid.uuid4()),
        "session_id": session_id or None,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "normalized_domain": to_normalized_domain(url),
    }
