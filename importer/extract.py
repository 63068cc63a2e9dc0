"""
Recovers the list of company fragments from raw model output.

Model text is unreliable: valid JSON may be wrapped in a markdown fence,
nested in an object, or surrounded by prose. Each strategy below handles one
of those shapes and the first one that yields a list wins.
"""
import json
import re
from typing import Any, Callable, List, NamedTuple, Optional

FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class Extraction(NamedTuple):
    companies: Optional[List[Any]]
    note: str

    @property
    def ok(self) -> bool:
        return self.companies is not None


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except ValueError:
        return None


def _from_object(text: str) -> Optional[Extraction]:
    if not text.startswith("{"):
        return None
    obj = _loads(text)
    if isinstance(obj, dict) and isinstance(obj.get("companies"), list):
        return Extraction(obj["companies"], "object.companies")
    return None


def _from_array(text: str) -> Optional[Extraction]:
    if not text.startswith("["):
        return None
    arr = _loads(text)
    return Extraction(arr, "array") if isinstance(arr, list) else None


def _from_slice(text: str) -> Optional[Extraction]:
    start = text.find("[")
    end = text.rfind("]")
    if start < 0 or end <= start:
        return None
    arr = _loads(text[start:end + 1])
    return Extraction(arr, "sliced-array") if isinstance(arr, list) else None


STRATEGIES: List[Callable[[str], Optional[Extraction]]] = [_from_object, _from_array, _from_slice]


def strip_fence(text: str) -> str:
    match = FENCE_RE.search(text)
    return match.group(1).strip() if match else text


def extract_companies(text: Optional[str]) -> Extraction:
    if not text or not str(text).strip():
        return Extraction(None, "empty")

    content = strip_fence(str(text).strip())
    for strategy in STRATEGIES:
        result = strategy(content)
        if result is not None:
            return result
    return Extraction(None, "unparseable")
