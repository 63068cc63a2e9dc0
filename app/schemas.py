#app/schemas.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# --- queryType values accepted by older clients -> search field ---
LEGACY_QUERY_TYPES = {
    "company_name": "company_name",
    "product_keyword": "product_keywords",
    "product_keywords": "product_keywords",
    "industries": "industries",
    "headquarters_location": "headquarters_location",
    "manufacturing_locations": "manufacturing_locations",
    "email_address": "email_address",
    "url": "url",
    "amazon_url": "amazon_url",
}


# --- Free-text filters, each one joined into the prompt with "and" ---
class SearchFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_name: Optional[str] = None
    product_keywords: Optional[str] = None
    industries: Optional[str] = None
    headquarters_location: Optional[str] = None
    manufacturing_locations: Optional[str] = None
    email_address: Optional[str] = None
    url: Optional[str] = None
    amazon_url: Optional[str] = None


# --- Request body for POST /api/xai ---
class ImportRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    maxImports: StrictInt = Field(1, ge=1, le=50)
    timeout_ms: Optional[StrictInt] = None
    timeoutMs: Optional[StrictInt] = None
    session_id: Optional[str] = None
    search: Optional[SearchFilters] = None

    @property
    def requested_timeout_ms(self) -> Optional[int]:
        return self.timeout_ms if self.timeout_ms is not None else self.timeoutMs

    def search_dict(self) -> Dict[str, str]:
        return self.search.model_dump(exclude_none=True) if self.search else {}


def apply_legacy_aliases(body: Dict[str, Any]) -> Dict[str, Any]:
    """Maps `limit` onto maxImports and `queryType` + `query` onto one search field."""
    body = dict(body)
    limit = body.pop("limit", None)
    if isinstance(limit, int) and not isinstance(limit, bool) and "maxImports" not in body:
        body["maxImports"] = limit

    query_type = body.pop("queryType", None)
    query = body.pop("query", None)
    if query_type and query:
        key = LEGACY_QUERY_TYPES.get(str(query_type).lower())
        if key:
            search = body.get("search")
            # a malformed search is left for ImportRequest to reject
            if search is None or isinstance(search, dict):
                body["search"] = {**(search or {}), key: query}
    return body
