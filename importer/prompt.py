from typing import Dict, Iterable, Optional

# search field -> how it reads inside the prompt
SEARCH_CLAUSES = [
    ("company_name", 'company_name containing "{}"'),
    ("product_keywords", 'product_keywords containing "{}"'),
    ("industries", 'industries including "{}"'),
    ("headquarters_location", 'headquarters_location in "{}"'),
    ("manufacturing_locations", 'manufacturing_locations including "{}"'),
    ("email_address", 'email_address matching "{}"'),
    ("url", 'url matching "{}"'),
    ("amazon_url", 'amazon_url matching "{}"'),
]


def build_query_string(search: Optional[Dict[str, str]]) -> str:
    search = search or {}
    parts = [template.format(search[field]) for field, template in SEARCH_CLAUSES if search.get(field)]
    return " and ".join(parts) if parts else "any company"


def build_prompt(search: Optional[Dict[str, str]], previous: Iterable[str] = (), page: int = 1) -> str:
    """
    Builds the completion prompt for one page.
    Names in `previous` are listed as exclusions so later pages return new companies.
    """
    prompt = (
        f"Return ONLY a JSON array (no prose, no markdown) with EXACTLY 1 object that matches ({build_query_string(search)}).\n"
        "Each object MUST include: company_name, industries[], product_keywords (string), url (https://...), "
        "email_address, headquarters_location, manufacturing_locations[], amazon_url, red_flag (boolean), "
        'reviews[] (objects with { "text": "...", "link": "https://..." }), notes, '
        'company_contact_info { "contact_page_url": "https://...", "contact_email": "name@example.com" }.\n'
        'If you don\'t find credible info for a field, use "" (or [] / false).\n'
        "No backticks. No extra keys. Companies must be unique across pages.\n"
    )
    excluded = [name for name in previous if name]
    if excluded:
        prompt += "Do NOT return any of these companies: " + ", ".join(f'"{name}"' for name in excluded) + ".\n"
    return prompt + f"Return result {page}."

