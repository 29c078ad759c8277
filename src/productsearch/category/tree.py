"""Category tree rebuilt from a flat list of rows.

Pure functions only: the cache service stores the flat list and calls
``build_category_tree`` after every load.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from productsearch.document.models import CategoryDocument
from productsearch.source.port import CategoryRecord


@dataclass(eq=False)
class Category:
    id: int
    parent_id: int | None = None
    name: str | None = None
    display_name: str | None = None
    slug: str | None = None
    is_visible: bool = True
    parent: "Category | None" = field(default=None, repr=False)
    children: list["Category"] = field(default_factory=list, repr=False)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def ancestors(self, include_self: bool = False) -> list["Category"]:
        """Return the chain up to and including the root, nearest first."""
        chain = [self] if include_self else []
        node = self.parent
        seen = {self.id}
        while node is not None and node.id not in seen:
            chain.append(node)
            seen.add(node.id)
            node = node.parent
        return chain

    def to_document(self) -> CategoryDocument:
        return CategoryDocument(
            id=self.id,
            parent_id=self.parent.id if self.parent else None,
            name=self.name,
            display_name=self.display_name,
            slug=self.slug,
            is_visible=self.is_visible,
            is_leaf=self.is_leaf,
        )


def build_category_tree(rows: Iterable[CategoryRecord]) -> dict[int, Category]:
    """Link a flat list of category rows into a tree.

    Returns every node keyed by id. A row whose parent id is missing, zero or
    unknown becomes a root. Children keep the order of the input rows.
    """
    nodes: dict[int, Category] = {}
    for row in rows:
        nodes[row.id] = Category(
            id=row.id,
            parent_id=row.parent_id or None,
            name=row.name,
            display_name=row.display_name,
            slug=row.slug,
            is_visible=row.is_visible,
        )

    for node in nodes.values():
        if node.parent_id is None or node.parent_id == node.id:
            continue
        parent = nodes.get(node.parent_id)
        if parent is None:
            continue
        node.parent = parent
        parent.children.append(node)

    return nodes


def categories_with_ancestors(tree: dict[int, Category], category_ids: Iterable[int]) -> list[Category]:
    """Expand ids into categories plus ancestors, de-duplicated in first-seen order."""
    result: list[Category] = []
    seen: set[int] = set()
    for category_id in category_ids:
        category = tree.get(category_id)
        if category is None:
            continue
        for node in category.ancestors(include_self=True):
            if node.id not in seen:
                seen.add(node.id)
                result.append(node)
    return result
