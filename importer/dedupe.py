from typing import Any, Dict, Iterable, List, Set, Tuple

DedupKey = Tuple[str, str]


def dedup_key(record: Dict[str, Any]) -> DedupKey:
    return record["company_name"], record["normalized_domain"]


class Deduplicator:
    """Accumulates records for one import run, keyed by (company_name, normalized_domain)."""

    def __init__(self):
        self.accepted: List[Dict[str, Any]] = []
        self._seen: Set[DedupKey] = set()

    def __len__(self) -> int:
        return len(self.accepted)

    @property
    def names(self) -> List[str]:
        return [record["company_name"] for record in self.accepted]

    def add_page(self, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Appends the page's novel records and returns them; repeats within the page are dropped too."""
        novel = []
        for record in records:
            key = dedup_key(record)
            if key in self._seen:
                continue
            self._seen.add(key)
            novel.append(record)
        self.accepted.extend(novel)
        return novel
