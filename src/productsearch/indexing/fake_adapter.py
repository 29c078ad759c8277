"""In-memory search index.

Evaluates the subset of the query DSL the query builder produces (bool,
term, terms, exists, ids, nested, match, multi_match) and applies sort and
``search_after`` the way the search engine does, with missing sort values
last. Relevance is not modelled: every hit scores 1.0.
"""

import copy
from functools import cmp_to_key

from productsearch.errors import IndexWriteError
from productsearch.indexing.port import SearchHit, SearchHits, SearchIndex, SearchRequest


def _field_name(name: str) -> str:
    return name.removesuffix(".keyword")


def _values(document, path: str) -> list:
    """All values at a dotted path, flattening lists along the way."""
    current = [document]
    for part in _field_name(path).split("."):
        found = []
        for item in current:
            if isinstance(item, dict) and part in item:
                value = item[part]
                if isinstance(value, list):
                    found.extend(value)
                else:
                    found.append(value)
        current = found
    flattened = []
    for value in current:
        if isinstance(value, list):
            flattened.extend(value)
        else:
            flattened.append(value)
    return [value for value in flattened if value is not None]


def _term_value(spec):
    return spec["value"] if isinstance(spec, dict) and "value" in spec else spec


def _text_matches(values: list, text: str) -> bool:
    needle = text.lower()
    return any(needle in str(value).lower() for value in values)


def matches(document: dict, query: dict) -> bool:
    if not query or "match_all" in query:
        return True
    if "bool" in query:
        clauses = query["bool"]
        for key in ("filter", "must"):
            if not all(matches(document, clause) for clause in _as_list(clauses.get(key))):
                return False
        if any(matches(document, clause) for clause in _as_list(clauses.get("must_not"))):
            return False
        should = _as_list(clauses.get("should"))
        if should:
            minimum = clauses.get("minimum_should_match", 1)
            if sum(matches(document, clause) for clause in should) < minimum:
                return False
        return True
    if "term" in query:
        ((field, spec),) = query["term"].items()
        return _term_value(spec) in _values(document, field)
    if "terms" in query:
        ((field, wanted),) = query["terms"].items()
        return any(value in wanted for value in _values(document, field))
    if "exists" in query:
        return bool(_values(document, query["exists"]["field"]))
    if "ids" in query:
        return str(document.get("id")) in {str(value) for value in query["ids"]["values"]}
    if "nested" in query:
        return matches(document, query["nested"]["query"])
    if "match" in query:
        ((field, spec),) = query["match"].items()
        text = spec["query"] if isinstance(spec, dict) else spec
        return _text_matches(_values(document, field), text)
    if "multi_match" in query:
        spec = query["multi_match"]
        fields = [field.split("^")[0] for field in spec.get("fields", [])]
        return any(_text_matches(_values(document, field), spec["query"]) for field in fields)
    raise ValueError(f"Unsupported query clause: {sorted(query)}")


def _as_list(value) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _sort_fields(sort: list[dict]) -> list[tuple[str, str]]:
    fields = []
    for clause in sort:
        ((field, spec),) = clause.items()
        order = spec.get("order", "asc") if isinstance(spec, dict) else spec
        fields.append((field, order))
    return fields


def _sort_values(document: dict, fields: list[tuple[str, str]]) -> list:
    sort_values = []
    for field, _ in fields:
        if field == "_score":
            sort_values.append(1.0)
            continue
        values = _values(document, field)
        sort_values.append(values[0] if values else None)
    return sort_values


def compare_sort_values(left: list, right: list, fields: list[tuple[str, str]]) -> int:
    for a, b, (_, order) in zip(left, right, fields, strict=False):
        if a == b:
            continue
        if a is None:
            return 1
        if b is None:
            return -1
        result = -1 if a < b else 1
        return result if order == "asc" else -result
    return 0


class InMemorySearchIndex(SearchIndex):
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.documents: dict[int, dict] = {}
        self.should_succeed: bool = True
        self.failure_reason: str = "Index unavailable"
        self.requests: list[SearchRequest] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Index unavailable") -> None:
        """Make writes fail (reads keep working)."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def upsert(self, product_id: int, document: dict) -> None:
        if not self.should_succeed:
            raise IndexWriteError(f"Upsert {product_id}: {self.failure_reason}", product_id=product_id)
        self.documents[product_id] = copy.deepcopy(document)

    def delete(self, product_id: int) -> bool:
        if not self.should_succeed:
            raise IndexWriteError(f"Delete {product_id}: {self.failure_reason}", product_id=product_id)
        return self.documents.pop(product_id, None) is not None

    def search(self, request: SearchRequest) -> SearchHits:
        self.requests.append(request)
        fields = _sort_fields(request.sort)

        matched = [
            SearchHit(id=product_id, source=copy.deepcopy(document), sort=_sort_values(document, fields))
            for product_id, document in self.documents.items()
            if matches(document, request.query)
        ]
        matched.sort(key=cmp_to_key(lambda a, b: compare_sort_values(a.sort, b.sort, fields)))
        total = len(matched)

        if request.search_after is not None:
            matched = [hit for hit in matched if compare_sort_values(hit.sort, request.search_after, fields) > 0]

        return SearchHits(hits=matched[: request.size], total=total)

    def get_many(self, product_ids: list[int]) -> dict[int, dict]:
        return {pid: copy.deepcopy(self.documents[pid]) for pid in product_ids if pid in self.documents}
