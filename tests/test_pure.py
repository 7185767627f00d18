import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.models import Coupon, Customer, Order  # noqa: E402
from utils.pure import (  # noqa: E402
    filter_items,
    format_date,
    format_price,
    generate_markdown_table,
    move_item,
    orders_to_csv,
)


class FilterTestCase(unittest.TestCase):
    def setUp(self):
        self.customers = [
            Customer(id="1", name="Ann Lee", email="ann@shop.test"),
            Customer(id="2", name="Bob", email="BOB@example.com"),
            Customer(id="3", name="", email="carla@shop.test"),
        ]

    def test_empty_query_returns_everything(self):
        self.assertEqual(filter_items(self.customers, "", ("name", "email")), self.customers)

    def test_matches_any_field_ignoring_case(self):
        got = filter_items(self.customers, "SHOP", ("name", "email"))
        self.assertEqual([c.id for c in got], ["1", "3"])
        got = filter_items(self.customers, "bob@", ("name", "email"))
        self.assertEqual([c.id for c in got], ["2"])

    def test_result_is_subset_in_original_order(self):
        for query in ("a", "e", "zz", "."):
            got = filter_items(self.customers, query, ("name", "email"))
            positions = [self.customers.index(c) for c in got]
            self.assertEqual(positions, sorted(positions))

    def test_coupon_codes_example(self):
        coupons = [
            Coupon(id="1", code="A10", type="flat", value=10),
            Coupon(id="2", code="B5", type="flat", value=5),
        ]
        self.assertEqual([c.code for c in filter_items(coupons, "a1", ("code",))], ["A10"])

    def test_callable_field(self):
        got = filter_items(self.customers, "LEE", (lambda c: c.name.upper(),))
        self.assertEqual([c.id for c in got], ["1"])


class MoveItemTestCase(unittest.TestCase):
    def test_move_up_and_down(self):
        self.assertEqual(move_item(["a", "b", "c"], 2, -1), ["a", "c", "b"])
        self.assertEqual(move_item(["a", "b", "c"], 0, 1), ["b", "a", "c"])

    def test_out_of_bounds(self):
        self.assertIsNone(move_item(["a", "b"], 0, -1))
        self.assertIsNone(move_item(["a", "b"], 1, 1))
        self.assertIsNone(move_item([], 0, 1))

    def test_source_not_mutated(self):
        items = ["a", "b"]
        move_item(items, 0, 1)
        self.assertEqual(items, ["a", "b"])


class FormattingTestCase(unittest.TestCase):
    def test_format_price(self):
        self.assertEqual(format_price(1234.5, "USD"), "$1,234.50")
        self.assertEqual(format_price(1234.5, "AED"), "AED 1,234.50")
        self.assertEqual(format_price(0), "$0.00")

    def test_format_date(self):
        self.assertEqual(format_date("2025-03-04T10:11:12.000Z"), "2025-03-04")
        self.assertEqual(format_date(None), "-")

    def test_markdown_table(self):
        md = generate_markdown_table(["Field", "Value"], [["Note", "a|b"]], ["l", "r"])
        self.assertEqual(
            md.splitlines(),
            ["| Field | Value |", "| :--- | ---: |", "| Note | a\\|b |"],
        )
        self.assertEqual(generate_markdown_table(["x"], []), "")
        with self.assertRaises(ValueError):
            generate_markdown_table(["a", "b"], [["1", "2"]], ["l"])

    def test_orders_csv(self):
        orders = [
            Order(
                id="o1",
                order_number="1001",
                customer_name="Ann, Jr.",
                customer_email="ann@shop.test",
                total=12.5,
                status="shipped",
                created_at="2025-01-02T00:00:00Z",
            )
        ]
        lines = orders_to_csv(orders).splitlines()
        self.assertEqual(lines[0], "Order Number,Customer,Email,Total,Status,Date")
        self.assertEqual(lines[1], '1001,"Ann, Jr.",ann@shop.test,12.50,shipped,2025-01-02')


if __name__ == "__main__":
    unittest.main()
