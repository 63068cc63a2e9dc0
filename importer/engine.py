import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from openai import OpenAIError

from .dedupe import Deduplicator
from .extract import extract_companies
from .geocode import Geocoder, enrich_company
from .normalize import normalize_company
from .prompt import build_prompt

logger = logging.getLogger(__name__)

STATUS_COMPLETE = "complete"
STATUS_EXHAUSTIVE = "exhaustive - review or revise search"


class Completions(Protocol):
    def complete(self, prompt: str) -> str: ...


class CompanySink(Protocol):
    def upsert_company(self, doc: Dict[str, Any]) -> bool: ...


@dataclass
class ImportResult:
    companies: List[Dict[str, Any]]
    pages: int = 0
    debug: List[Dict[str, Any]] = field(default_factory=list)


def import_status(accepted: int, max_imports: int) -> str:
    return STATUS_COMPLETE if accepted >= (max_imports or 1) else STATUS_EXHAUSTIVE


def _describe_provider_error(e: OpenAIError) -> Dict[str, Any]:
    status = getattr(e, "status_code", None)
    body = getattr(e, "body", None)
    if body is not None and not isinstance(body, str):
        body = str(body)
    return {"status": status, "message": str(e)[:200], "body": body[:200] if body else None}


def normalize_page(
    fragments: List[Any],
    geocoder: Geocoder,
    session_id: Optional[str] = None,
    page: int = 1,
) -> List[Dict[str, Any]]:
    """Normalizes and geocodes a page; a fragment that fails is dropped and the rest continue."""
    records = []
    for index, fragment in enumerate(fragments):
        try:
            record = normalize_company(fragment, session_id=session_id)
            records.append(enrich_company(record, geocoder))
        except Exception as e:
            logger.warning(f"Page {page}: dropped fragment {index}: {e}")
    return records


def run_import(
    completions: Completions,
    geocoder: Geocoder,
    store: CompanySink,
    search: Optional[Dict[str, str]] = None,
    max_imports: int = 1,
    session_id: Optional[str] = None,
) -> ImportResult:
    """
    Pages through the completion API until `max_imports` companies are accepted,
    a page brings nothing new, or `max_imports` pages have been spent.
    """
    search = search or {}
    dedupe = Deduplicator()
    debug: List[Dict[str, Any]] = []
    page = 1
    requested = 0

    while page <= max_imports and len(dedupe) < max_imports:
        prompt = build_prompt(search, dedupe.names, page=page)
        requested += 1
        try:
            content = completions.complete(prompt)
        except OpenAIError as e:
            info = _describe_provider_error(e)
            logger.error(f"Completion call failed | page {page} | status {info['status']} | {info['message']} | body {info['body']}")
            debug.append({"page": page, "note": "provider-error", "status": info["status"]})
            page += 1
            continue

        extraction = extract_companies(content)
        if not extraction.companies:
            logger.info(f"Page {page}: no companies from model ({extraction.note})")
            debug.append({"page": page, "note": "no-companies-from-model", "parse_note": extraction.note,
                          "preview": str(content)[:140]})
            break

        records = normalize_page(extraction.companies, geocoder, session_id=session_id, page=page)
        novel = dedupe.add_page(records)
        if not novel:
            logger.info(f"Page {page}: no new companies")
            debug.append({"page": page, "note": "no-new-companies"})
            break

        for record in novel:
            store.upsert_company(record)

        logger.info(f"Page {page}: accepted {len(novel)} companies ({len(dedupe)} total)")
        page += 1

    return ImportResult(companies=dedupe.accepted, pages=requested, debug=debug)
