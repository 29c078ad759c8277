"""Tests for rebuilding the category tree from flat rows."""

from productsearch.category.tree import build_category_tree, categories_with_ancestors
from productsearch.source.port import CategoryRecord


def _rows():
    return [
        CategoryRecord(id=1, parent_id=None, name="Women", slug="women"),
        CategoryRecord(id=2, parent_id=1, name="Shoes", slug="women-shoes"),
        CategoryRecord(id=3, parent_id=2, name="Sneakers", slug="sneakers"),
        CategoryRecord(id=4, parent_id=1, name="Tops", slug="tops"),
        CategoryRecord(id=5, parent_id=0, name="Original", slug="original"),
    ]


class TestBuildCategoryTree:
    def test_links_parents_and_children(self):
        tree = build_category_tree(_rows())
        assert tree[3].parent is tree[2]
        assert tree[2].parent is tree[1]
        assert [child.id for child in tree[1].children] == [2, 4]

    def test_roots_and_leaves(self):
        tree = build_category_tree(_rows())
        assert tree[1].is_root
        assert not tree[1].is_leaf
        assert tree[3].is_leaf

    def test_zero_parent_is_a_root(self):
        tree = build_category_tree(_rows())
        assert tree[5].is_root
        assert tree[5].parent_id is None

    def test_unknown_parent_is_a_root(self):
        tree = build_category_tree([CategoryRecord(id=9, parent_id=999, name="Orphan")])
        assert tree[9].is_root

    def test_self_parent_is_a_root(self):
        tree = build_category_tree([CategoryRecord(id=9, parent_id=9, name="Loop")])
        assert tree[9].is_root
        assert tree[9].children == []

    def test_ancestors_include_root_nearest_first(self):
        tree = build_category_tree(_rows())
        assert [node.id for node in tree[3].ancestors()] == [2, 1]
        assert [node.id for node in tree[3].ancestors(include_self=True)] == [3, 2, 1]

    def test_ancestors_stop_on_cycle(self):
        tree = build_category_tree(
            [CategoryRecord(id=1, parent_id=2, name="A"), CategoryRecord(id=2, parent_id=1, name="B")]
        )
        assert [node.id for node in tree[1].ancestors()] == [2]

    def test_building_twice_gives_equal_shapes(self):
        first = build_category_tree(_rows())
        second = build_category_tree(_rows())
        assert {k: v.to_document() for k, v in first.items()} == {k: v.to_document() for k, v in second.items()}

    def test_to_document(self):
        document = build_category_tree(_rows())[3].to_document()
        assert document.id == 3
        assert document.parent_id == 2
        assert document.slug == "sneakers"
        assert document.is_leaf is True


class TestCategoriesWithAncestors:
    def test_expands_and_dedupes_in_first_seen_order(self):
        tree = build_category_tree(_rows())
        result = categories_with_ancestors(tree, [3, 4])
        assert [node.id for node in result] == [3, 2, 1, 4]

    def test_unknown_ids_are_skipped(self):
        tree = build_category_tree(_rows())
        assert [node.id for node in categories_with_ancestors(tree, [404, 4])] == [4, 1]
