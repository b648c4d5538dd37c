import unittest

from querysift_data_model.filter_strategy import CustomMatcher, FilterStrategy
from querysift_engine.core.reactive.cell import Cell
from querysift_engine.engine.search_engine import SearchEngine, filter_items, use_search


class TestSearchScenarios(unittest.TestCase):
    """End-to-end checks through the public entry points."""

    def test_primitive_collection(self):
        self.assertEqual(filter_items("an", ["Apple", "banana", 42, True], strict=False), ["banana"])

    def test_property_name(self):
        self.assertEqual(filter_items("an", [{"name": "Ann"}, {"name": "Bob"}], "name"), [{"name": "Ann"}])

    def test_all_properties(self):
        items = [{"a": "x", "b": "found-it"}]
        self.assertEqual(filter_items("found", items), items)

    def test_strict_property(self):
        self.assertEqual(filter_items("1", [{"a": 1}], "a", strict=True), [])

    def test_mixed_collection(self):
        items = ["anchor", {"title": "Banana bread"}, ["an"], None, 7, {"title": 7}]
        self.assertEqual(filter_items("an", items), ["anchor", {"title": "Banana bread"}])
        self.assertEqual(filter_items("7", items), [7, {"title": 7}])
        self.assertEqual(filter_items("7", items, strict=True), [])

    def test_live_search_session(self):
        products = [
            {"sku": "A-100", "title": "Red Apple", "price": 1200},
            {"sku": "B-200", "title": "Green Pear", "price": 80},
            {"sku": "C-300", "title": "Apple Pie", "price": 1500},
        ]
        query = Cell("")
        filter_by = Cell(FilterStrategy.create_property("title"))
        strict = Cell(False)
        updates = []
        search = use_search(query, products, filter_by, strict, engine=SearchEngine())
        search.subscribe(updates.append)

        query.set("apple")
        filter_by.set(["sku", CustomMatcher("price", lambda value, q, item: q.isdigit() and value < int(q))])
        query.set("100")
        filter_by.set(FilterStrategy.create_property("price"))
        query.set("1,5")

        self.assertEqual(updates, [
            [products[0], products[2]],
            [],
            [products[0], products[1]],
            [],
            [products[2]],
        ])

    def test_predicate_is_bypassed_by_empty_query(self):
        items = ["a", "b"]
        self.assertEqual(filter_items("", items, lambda q, item: False), items)
        self.assertEqual(filter_items("x", items, lambda q, item: False), [])


if __name__ == '__main__':
    unittest.main()
