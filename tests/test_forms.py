import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from utils.forms import (  # noqa: E402
    FormField,
    FormValueError,
    coerce_values,
    initial_values,
    missing_required,
)
from views.scr_coupons import COUPON_DEFAULTS, COUPON_FIELDS  # noqa: E402
from views.scr_users import user_fields  # noqa: E402


class FormsTestCase(unittest.TestCase):
    def test_initial_values_for_edit(self):
        entity = {
            "code": "A1",
            "type": "flat",
            "value": 5.0,
            "expiresAt": "2025-12-31T00:00:00.000Z",
            "isActive": True,
        }
        values = initial_values(COUPON_FIELDS, entity, COUPON_DEFAULTS)
        self.assertEqual(values["code"], "A1")
        self.assertEqual(values["expiresAt"], "2025-12-31")
        self.assertIs(values["isStackable"], False)
        self.assertEqual(values["minAmount"], "")

    def test_initial_values_for_create_use_defaults(self):
        values = initial_values(COUPON_FIELDS, None, COUPON_DEFAULTS)
        for key, val in COUPON_DEFAULTS.items():
            if isinstance(val, bool):
                self.assertIs(values[key], val)
            else:
                self.assertEqual(values[key], val)

    def test_password_never_prefilled(self):
        values = initial_values(user_fields(False), {"password": "hash"}, {})
        self.assertEqual(values["password"], "")

    def test_missing_required(self):
        fields = [
            FormField("code", "Coupon Code", required=True),
            FormField("isActive", "Active", kind="bool", required=True),
            FormField("note", "Note"),
        ]
        missing = missing_required(fields, {"code": "  ", "isActive": False, "note": ""})
        self.assertEqual([f.name for f in missing], ["code"])

    def test_password_required_only_on_create(self):
        raw = {"name": "Eve", "email": "eve@shop.test", "role": "viewer", "password": ""}
        self.assertEqual(
            [f.name for f in missing_required(user_fields(True), raw)], ["password"]
        )
        self.assertEqual(missing_required(user_fields(False), raw), [])

    def test_coerce_values(self):
        raw = {
            "code": "summer10",
            "type": "percentage",
            "value": "10",
            "minAmount": "",
            "maxDiscount": "",
            "usageLimit": "100",
            "expiresAt": "2025-08-31",
            "isStackable": False,
            "isActive": True,
        }
        data = coerce_values(COUPON_FIELDS, raw)
        self.assertEqual(data["code"], "SUMMER10")
        self.assertEqual(data["value"], 10.0)
        self.assertEqual(data["usageLimit"], 100)
        self.assertEqual(data["expiresAt"], "2025-08-31T00:00:00.000Z")
        self.assertNotIn("minAmount", data)
        self.assertIs(data["isActive"], True)

    def test_coerce_rejects_bad_values(self):
        fields = [FormField("usageLimit", "Usage Limit", kind="integer")]
        with self.assertRaises(FormValueError) as ctx:
            coerce_values(fields, {"usageLimit": "ten"})
        self.assertEqual(ctx.exception.field.name, "usageLimit")
        self.assertEqual(str(ctx.exception), "Usage Limit has an invalid value.")

        fields = [FormField("role", "Role", kind="select", options=[("Admin", "admin")])]
        with self.assertRaises(FormValueError):
            coerce_values(fields, {"role": "root"})

        fields = [FormField("expiresAt", "Expires", kind="date")]
        with self.assertRaises(FormValueError):
            coerce_values(fields, {"expiresAt": "31/12/2025"})


if __name__ == "__main__":
    unittest.main()
