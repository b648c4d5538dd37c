import unittest

from pydantic import ValidationError

from querysift_data_model.data_models import FilterRequestModel
from querysift_data_model.filter_strategy import CustomMatcher, FilterStrategy
from querysift_data_model.item_kind import ItemKind, classify_item
from querysift_exception_model.exception import InvalidFilterStrategyException


class TestItemKind(unittest.TestCase):

    def test_classify_primitives(self):
        self.assertEqual(classify_item("abc"), ItemKind.STRING)
        self.assertEqual(classify_item(""), ItemKind.STRING)
        self.assertEqual(classify_item(42), ItemKind.NUMBER)
        self.assertEqual(classify_item(4.2), ItemKind.NUMBER)

    def test_bool_is_not_a_number(self):
        self.assertEqual(classify_item(True), ItemKind.BOOLEAN)
        self.assertEqual(classify_item(False), ItemKind.BOOLEAN)

    def test_classify_structured(self):
        self.assertEqual(classify_item({"name": "Ann"}), ItemKind.MAPPING)
        self.assertEqual(classify_item([1, 2]), ItemKind.SEQUENCE)
        self.assertEqual(classify_item(("a",)), ItemKind.SEQUENCE)

    def test_classify_other(self):
        self.assertEqual(classify_item(None), ItemKind.OTHER)
        self.assertEqual(classify_item(object()), ItemKind.OTHER)

    def test_is_primitive(self):
        self.assertTrue(ItemKind.STRING.is_primitive())
        self.assertTrue(ItemKind.BOOLEAN.is_primitive())
        self.assertFalse(ItemKind.MAPPING.is_primitive())
        self.assertFalse(ItemKind.SEQUENCE.is_primitive())


class TestFilterStrategy(unittest.TestCase):

    def test_create_none(self):
        strategy = FilterStrategy.create_none()
        self.assertTrue(strategy.is_none())
        self.assertEqual(strategy.describe(), "all-properties")

    def test_create_property(self):
        strategy = FilterStrategy.create_property("name")
        self.assertTrue(strategy.is_property())
        self.assertEqual(strategy.property_name, "name")
        self.assertEqual(strategy.describe(), "property(name)")

    def test_create_property_empty_name(self):
        with self.assertRaises(InvalidFilterStrategyException):
            FilterStrategy.create_property("")

    def test_create_matcher_list(self):
        matcher = CustomMatcher("email", lambda value, q, item: True)
        strategy = FilterStrategy.create_matcher_list(["username", matcher])
        self.assertTrue(strategy.is_matcher_list())
        self.assertEqual(strategy.matchers, ("username", matcher))
        self.assertEqual(strategy.describe(), "matchers(username, email*)")

    def test_create_matcher_list_rejects_bare_callable(self):
        with self.assertRaises(InvalidFilterStrategyException):
            FilterStrategy.create_matcher_list([lambda q, item: True])

    def test_create_matcher_list_rejects_empty_name(self):
        with self.assertRaises(InvalidFilterStrategyException):
            FilterStrategy.create_matcher_list(["name", ""])

    def test_create_predicate(self):
        strategy = FilterStrategy.create_predicate(lambda q, item: True)
        self.assertTrue(strategy.is_predicate())
        self.assertEqual(strategy.describe(), "predicate")

    def test_create_predicate_not_callable(self):
        with self.assertRaises(InvalidFilterStrategyException):
            FilterStrategy.create_predicate("name")

    def test_custom_matcher_validation(self):
        with self.assertRaises(InvalidFilterStrategyException):
            CustomMatcher("", lambda value, q, item: True)
        with self.assertRaises(InvalidFilterStrategyException):
            CustomMatcher("name", None)


class TestFilterRequestModel(unittest.TestCase):

    def test_defaults(self):
        model = FilterRequestModel()
        self.assertEqual(model.query, "")
        self.assertFalse(model.strict)
        self.assertTrue(model.to_strategy().is_none())

    def test_property_request(self):
        model = FilterRequestModel.model_validate({"query": "an", "filter_by": "name", "strict": True})
        strategy = model.to_strategy()
        self.assertTrue(strategy.is_property())
        self.assertEqual(strategy.property_name, "name")
        self.assertTrue(model.strict)

    def test_list_request(self):
        model = FilterRequestModel.model_validate({"query": "an", "filter_by": ["name", "email"]})
        strategy = model.to_strategy()
        self.assertTrue(strategy.is_matcher_list())
        self.assertEqual(strategy.matchers, ("name", "email"))

    def test_empty_filter_by_request(self):
        model = FilterRequestModel.model_validate({"query": "an", "filter_by": ""})
        self.assertTrue(model.to_strategy().is_none())

    def test_invalid_filter_by(self):
        with self.assertRaises(ValidationError):
            FilterRequestModel.model_validate({"filter_by": {"name": "x"}})


if __name__ == '__main__':
    unittest.main()
