from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, TypeAdapter, field_validator, model_validator

from .normalize import is_valid_email, is_valid_url

# ------------------ Pydantic Models ------------------

class Review(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = Field(..., min_length=1)
    link: Optional[str] = None

    @field_validator("link")
    @classmethod
    def link_is_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_url(v):
            raise ValueError("review link must be an http(s) URL")
        return v


class ContactInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    contact_page_url: Optional[str] = None
    contact_email: Optional[str] = None

    @field_validator("contact_page_url")
    @classmethod
    def page_is_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_url(v):
            raise ValueError("contact_page_url must be an http(s) URL")
        return v

    @field_validator("contact_email")
    @classmethod
    def email_is_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_email(v):
            raise ValueError("contact_email must be an email address")
        return v


class CompanyRecord(BaseModel):
    """Final shape of an imported company; extra keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    company_name: str = Field(..., min_length=1)
    company_tagline: str = ""
    industries: List[str] = Field(default_factory=list)
    product_keywords: str = ""
    url: str = ""
    email_address: str = ""
    headquarters_location: str = "Unknown"
    manufacturing_locations: List[str] = Field(default_factory=list)
    amazon_url: str = ""
    red_flag: StrictBool = False
    reviews: List[Review] = Field(default_factory=list)
    notes: str = ""
    company_contact_info: ContactInfo = Field(default_factory=ContactInfo)
    hq_lat: float = 0.0
    hq_lng: float = 0.0
    lat: Optional[float] = None
    long: Optional[float] = None
    manu_lats: List[float] = Field(default_factory=list)
    manu_lngs: List[float] = Field(default_factory=list)
    id: Optional[str] = None
    session_id: Optional[str] = None
    created_at: Optional[str] = None
    normalized_domain: str = "unknown"

    @field_validator("company_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("company_name must not be blank")
        return v

    @model_validator(mode="after")
    def coordinates_match_sites(self) -> "CompanyRecord":
        sites = len(self.manufacturing_locations)
        if not len(self.manu_lats) == len(self.manu_lngs) == sites:
            raise ValueError(
                f"manu_lats/manu_lngs ({len(self.manu_lats)}/{len(self.manu_lngs)}) must match "
                f"manufacturing_locations ({sites})"
            )
        return self


_company_list = TypeAdapter(List[CompanyRecord])


def validate_companies(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Validates the whole batch; one bad record raises pydantic.ValidationError for all of them.
    """
    out = []
    for company in _company_list.validate_python(records):
        data = company.model_dump(exclude_none=True)
        # session_id is reported as null rather than omitted
        data["session_id"] = company.session_id
        out.append(data)
    return out
