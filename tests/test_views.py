import json
import os
import sys
import unittest

import httpx
from textual.app import App
from textual.widgets import Button, DataTable, Input

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.client import ApiClient, ApiError  # noqa: E402
from utils.forms import FormField  # noqa: E402
from utils.state import GlobalState  # noqa: E402
from views.modal_form import EntityFormModal  # noqa: E402
from views.scr_images import CarouselImagesScreen  # noqa: E402

FIELDS = [
    FormField("code", "Coupon Code", required=True, transform=str.upper),
    FormField("value", "Discount Value", kind="number"),
]


class ToastRecorder:
    """Keeps every toast as (severity, message) next to showing it."""

    def notify(self, message, **kwargs):
        self.toasts.append((kwargs.get("severity", "information"), message))
        return super().notify(message, **kwargs)


class FormHostApp(ToastRecorder, App):
    def __init__(self):
        super().__init__()
        self.toasts = []


class ImagesHostApp(ToastRecorder, App):
    MODES = {"images": CarouselImagesScreen}
    ADMIN_MODES = {"images": "Carousel Images"}

    def __init__(self, client: ApiClient):
        super().__init__()
        self.state = GlobalState(client=client)
        self.toasts = []

    async def on_mount(self) -> None:
        await self.switch_mode("images")


class CarouselBackend:
    """Carousel collection kept in memory, ``fail_id`` answers 500 for that image."""

    def __init__(self, count: int):
        self.images = [
            {"_id": f"i{i}", "title": f"T{i}", "imageUrl": f"/uploads/{i}.jpg", "order": i}
            for i in range(count)
        ]
        self.fail_id = None
        self.gets = 0
        self.puts = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        if request.method == "GET" and path == "/carousel-images":
            self.gets += 1
            return httpx.Response(200, json=self.images)
        if request.method == "PUT" and path.startswith("/carousel-images/"):
            image_id = path.rsplit("/", 1)[1]
            body = json.loads(request.content)
            self.puts.append((image_id, body))
            if image_id == self.fail_id:
                return httpx.Response(500, json={"message": "db down"})
            for img in self.images:
                if img["_id"] == image_id:
                    img.update(body)
            return httpx.Response(200, json={"success": True})
        return httpx.Response(404)


async def settle(app: App, pilot) -> None:
    # let messages dispatch and workers (and whatever they trigger) finish
    for _ in range(2):
        await pilot.pause()
        await app.workers.wait_for_complete()
    await pilot.pause()


def table_titles(table: DataTable):
    return [table.get_row_at(row)[1] for row in range(table.row_count)]


class EntityFormModalTestCase(unittest.IsolatedAsyncioTestCase):
    async def open_form(self, app, pilot, submit, results):
        modal = EntityFormModal(
            "Add New Coupon",
            FIELDS,
            submit,
            success_message="Coupon created successfully",
            failure_message="Failed to create coupon",
        )
        app.push_screen(modal, results.append)
        await pilot.pause()
        return modal

    # ---------- Form dialog ----------

    async def test_failed_submit_keeps_dialog_open(self):
        calls, results = [], []

        async def submit(data):
            calls.append(data)
            raise ApiError("Code already exists", 400)

        app = FormHostApp()
        async with app.run_test() as pilot:
            modal = await self.open_form(app, pilot, submit, results)
            modal.query_one("#field-code", Input).value = "a1"
            modal.query_one("#field-value", Input).value = "5"
            modal.query_one("#btn-submit", Button).press()
            await settle(app, pilot)

            self.assertIs(app.screen, modal)
            self.assertEqual(results, [])
            self.assertEqual(calls, [{"code": "A1", "value": 5.0}])
            self.assertIn(("error", "Failed to create coupon: Code already exists"), app.toasts)
            # the dialog can be submitted again
            self.assertFalse(modal.query_one("#btn-submit", Button).disabled)

    async def test_successful_submit_dismisses_true(self):
        calls, results = [], []

        async def submit(data):
            calls.append(data)

        app = FormHostApp()
        async with app.run_test() as pilot:
            modal = await self.open_form(app, pilot, submit, results)
            modal.query_one("#field-code", Input).value = "save10"
            modal.query_one("#btn-submit", Button).press()
            await settle(app, pilot)

            self.assertEqual(results, [True])
            self.assertIsNot(app.screen, modal)
            self.assertEqual(calls, [{"code": "SAVE10"}])
            self.assertIn(("information", "Coupon created successfully"), app.toasts)

    async def test_blank_required_field_is_never_submitted(self):
        calls, results = [], []

        async def submit(data):
            calls.append(data)
            raise ApiError("Code already exists", 400)

        app = FormHostApp()
        async with app.run_test() as pilot:
            modal = await self.open_form(app, pilot, submit, results)
            code = modal.query_one("#field-code", Input)
            modal.query_one("#btn-submit", Button).press()
            await settle(app, pilot)

            self.assertEqual(calls, [])
            self.assertIs(app.screen, modal)
            self.assertTrue(code.has_class("-invalid"))
            self.assertIn(("error", "Coupon Code is required."), app.toasts)

            # once filled in, the invalid mark goes away even if saving fails
            code.value = "A1"
            modal.query_one("#btn-submit", Button).press()
            await settle(app, pilot)
            self.assertEqual(calls, [{"code": "A1"}])
            self.assertFalse(code.has_class("-invalid"))

    async def test_cancel_dismisses_false(self):
        results = []

        async def submit(data):
            raise AssertionError("not expected")

        app = FormHostApp()
        async with app.run_test() as pilot:
            modal = await self.open_form(app, pilot, submit, results)
            modal.query_one("#btn-cancel", Button).press()
            await settle(app, pilot)
            self.assertEqual(results, [False])


class CarouselReorderTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = CarouselBackend(4)
        self.client = ApiClient(
            base_url="http://shop.test/api",
            token="tok",
            transport=httpx.MockTransport(self.backend),
        )

    async def asyncTearDown(self):
        await self.client.aclose()

    async def move_second_row_down(self, app, pilot) -> DataTable:
        await settle(app, pilot)
        table = app.screen.query_one(DataTable)
        self.assertEqual(table_titles(table), ["T0", "T1", "T2", "T3"])

        table.focus()
        table.move_cursor(row=1)
        await pilot.pause()
        await pilot.press("right_square_bracket")
        await settle(app, pilot)
        return table

    # ---------- Carousel reorder ----------

    async def test_move_down_persists_new_sequence(self):
        app = ImagesHostApp(self.client)
        async with app.run_test() as pilot:
            table = await self.move_second_row_down(app, pilot)

            self.assertEqual(
                self.backend.puts,
                [
                    ("i0", {"order": 0}),
                    ("i2", {"order": 1}),
                    ("i1", {"order": 2}),
                    ("i3", {"order": 3}),
                ],
            )
            # refetched, rows follow the backend order, cursor follows the image
            self.assertEqual(self.backend.gets, 2)
            self.assertEqual(table_titles(table), ["T0", "T2", "T1", "T3"])
            self.assertEqual(table.cursor_row, 2)
            self.assertIn(("information", "Image order updated successfully"), app.toasts)

    async def test_failed_put_stops_and_refetches(self):
        self.backend.fail_id = "i1"
        app = ImagesHostApp(self.client)
        async with app.run_test() as pilot:
            await self.move_second_row_down(app, pilot)

            # i0 and i2 were saved, i1 failed, i3 never attempted
            self.assertEqual([image_id for image_id, _ in self.backend.puts], ["i0", "i2", "i1"])
            self.assertEqual(self.backend.gets, 2)
            self.assertIn(
                (
                    "error",
                    "Failed to update image order: "
                    "Reordered 2 of 4 items before failure: db down",
                ),
                app.toasts,
            )


if __name__ == "__main__":
    unittest.main()
