"""Tests for controller mutations: rename, create folder, delete, upload, preview."""

from __future__ import annotations

import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest import mock

from fake_file_api import FakeFileApi, make_controller, record

from dirbrowser.commands.preview import PreviewClass
from dirbrowser.commands.types import Command, CommandStatus
from dirbrowser.context import CLASS_GUEST, MAX_FILE_UPLOAD, SystemConfig
from dirbrowser.controller import STALE_SELECTION
from dirbrowser.listing.types import Listing
from dirbrowser.notify import NotifyLevel
from dirbrowser.transport.errors import TransportError
from dirbrowser.workflow import NEW_FOLDER_PLACEHOLDER, EditState, UploadItem


def _docs_api() -> FakeFileApi:
    return FakeFileApi(
        {
            "/docs/": [
                record("/docs/", "a.txt"),
                record("/docs/", "old", is_dir=True),
                record("/docs/", "x.xyz"),
            ],
        }
    )


class RenameTests(unittest.TestCase):
    def test_rename_commit_renames_reselects_and_empties_cache(self) -> None:
        api = _docs_api()
        controller, _sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.select("/docs/a.txt")

        self.assertTrue(controller.begin_edit(EditState.RENAMING))
        self.assertEqual(controller.workflow.value, "a.txt")
        controller.workflow.value = " b.txt "
        self.assertTrue(controller.commit_edit())

        self.assertEqual(api.calls_to("rename"), [("rename", "/docs/a.txt", "b.txt")])
        self.assertEqual(controller.selected_key(), "/docs/b.txt")
        self.assertIsNone(controller.cache.get("/docs/"))
        self.assertIn("b.txt", [entry.name for entry in controller.listing])
        self.assertIs(controller.workflow.state, EditState.IDLE)

    def test_failed_rename_keeps_edit_state(self) -> None:
        api = _docs_api()
        api.failures["rename"] = TransportError(403)
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.select("/docs/a.txt")
        controller.begin_edit(EditState.RENAMING)
        controller.workflow.value = "b.txt"

        self.assertFalse(controller.commit_edit())

        self.assertIs(controller.workflow.state, EditState.RENAMING)
        self.assertEqual(controller.workflow.value, "b.txt")
        self.assertEqual(sink.texts(NotifyLevel.DANGER), ["Insufficient permission"])

    def test_rename_refuses_selection_missing_from_listing(self) -> None:
        api = FakeFileApi({"/a/b/": [record("/a/b/", "c.txt")]})
        controller, sink, _history = make_controller(api)
        controller.navigate("/a/b/")
        api.failures["list_dir"] = TransportError(500)
        controller.ascend()

        self.assertFalse(controller.run(Command.RENAME))

        self.assertIs(controller.workflow.state, EditState.IDLE)
        self.assertEqual(api.calls_to("rename"), [])
        self.assertEqual(sink.texts(NotifyLevel.WARNING), [STALE_SELECTION])

    def test_rename_commit_rechecks_listing(self) -> None:
        api = _docs_api()
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.select("/docs/a.txt")
        controller.begin_edit(EditState.RENAMING)
        controller.listing = Listing(path="/docs/")
        controller.workflow.value = "b.txt"

        self.assertFalse(controller.commit_edit())

        self.assertEqual(api.calls_to("rename"), [])
        self.assertIs(controller.workflow.state, EditState.RENAMING)
        self.assertEqual(sink.texts(NotifyLevel.WARNING), [STALE_SELECTION])

    def test_rename_needs_a_selection(self) -> None:
        api = _docs_api()
        controller, _sink, _history = make_controller(api)
        controller.navigate("/docs/")

        self.assertFalse(controller.begin_edit(EditState.RENAMING))
        self.assertFalse(controller.run(Command.RENAME))
        self.assertEqual(controller.command_status(Command.RENAME), CommandStatus.DISABLED)

    def test_rename_is_hidden_from_guests_with_a_selection(self) -> None:
        api = _docs_api()
        controller, _sink, _history = make_controller(api, user_class=CLASS_GUEST)
        controller.navigate("/docs/")

        self.assertEqual(controller.command_status(Command.RENAME), CommandStatus.DISABLED)
        controller.select("/docs/a.txt")
        self.assertEqual(controller.command_status(Command.RENAME), CommandStatus.HIDDEN)


class CreateFolderTests(unittest.TestCase):
    def test_create_folder_strips_name_and_reloads(self) -> None:
        api = _docs_api()
        controller, _sink, _history = make_controller(api)
        controller.navigate("/docs/")

        self.assertTrue(controller.run(Command.NEW_FOLDER))
        self.assertEqual(controller.workflow.value, NEW_FOLDER_PLACEHOLDER)
        self.assertTrue(controller.workflow.take_focus_request())
        controller.workflow.value = "  reports  "
        self.assertTrue(controller.commit_edit())

        self.assertEqual(api.calls_to("create_dir"), [("create_dir", "/docs/reports")])
        self.assertEqual(len(controller.cache), 0)
        self.assertIn("reports", [entry.name for entry in controller.listing])

    def test_blank_folder_name_is_rejected(self) -> None:
        api = _docs_api()
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.begin_edit(EditState.CREATING_FOLDER)
        controller.workflow.value = "   "

        self.assertFalse(controller.commit_edit())

        self.assertEqual(api.calls_to("create_dir"), [])
        self.assertIs(controller.workflow.state, EditState.CREATING_FOLDER)
        self.assertEqual(len(sink.texts(NotifyLevel.WARNING)), 1)


class DeleteTests(unittest.TestCase):
    def test_confirmed_delete_removes_file_and_empties_cache(self) -> None:
        api = _docs_api()
        prompts: list[str] = []

        def confirm(prompt: str) -> bool:
            prompts.append(prompt)
            return True

        controller, _sink, _history = make_controller(api, confirm=confirm)
        controller.navigate("/docs/")
        controller.select("/docs/a.txt")

        self.assertTrue(controller.run(Command.DELETE))

        self.assertEqual(len(prompts), 1)
        self.assertEqual(api.calls_to("delete_file"), [("delete_file", "/docs/a.txt")])
        self.assertEqual(controller.selected_key(), "")
        self.assertEqual(len(controller.cache), 0)
        self.assertNotIn("a.txt", [entry.name for entry in controller.listing])

    def test_delete_folder_uses_folder_endpoint(self) -> None:
        api = _docs_api()
        controller, _sink, _history = make_controller(api, confirm=lambda _prompt: True)
        controller.navigate("/docs/")
        controller.select("/docs/old")

        controller.run(Command.DELETE)

        self.assertEqual(api.calls_to("delete_dir"), [("delete_dir", "/docs/old")])

    def test_declined_delete_sends_nothing(self) -> None:
        api = _docs_api()
        controller, _sink, _history = make_controller(api, confirm=lambda _prompt: False)
        controller.navigate("/docs/")
        controller.select("/docs/a.txt")

        self.assertFalse(controller.run(Command.DELETE))

        self.assertEqual(api.calls_to("delete_file"), [])
        self.assertEqual(controller.selected_key(), "/docs/a.txt")

    def test_selection_missing_from_listing_is_never_deleted(self) -> None:
        api = FakeFileApi({"/a/b/": [record("/a/b/", "c.txt")]})
        prompts: list[str] = []
        controller, sink, _history = make_controller(api, confirm=lambda prompt: prompts.append(prompt) or True)
        controller.navigate("/a/b/")
        api.failures["list_dir"] = TransportError(500)

        controller.ascend()

        self.assertEqual(controller.selected_key(), "/a/b")
        self.assertFalse(controller.run(Command.DELETE))
        self.assertFalse(controller.handle_key("Delete"))
        self.assertEqual(prompts, [])
        self.assertEqual(api.calls_to("delete_file") + api.calls_to("delete_dir"), [])
        self.assertIn(STALE_SELECTION, sink.texts(NotifyLevel.WARNING))
        self.assertEqual(controller.selected_key(), "/a/b")


class UploadTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _file(self, name: str, text: str = "data") -> Path:
        path = self.root / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_every_accepted_file_gets_its_own_worker(self) -> None:
        api = _docs_api()
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")
        files = [self._file(f"f{index}.txt") for index in range(12)]

        with mock.patch("dirbrowser.controller.ThreadPoolExecutor", wraps=ThreadPoolExecutor) as pool:
            self.assertTrue(controller.upload(files))

        pool.assert_called_once_with(max_workers=12)
        self.assertEqual(len(sink.texts(NotifyLevel.SUCCESS)), 12)

    def test_upload_sends_allowed_files_and_refuses_others(self) -> None:
        api = _docs_api()
        controller, sink, _history = make_controller(api, config=SystemConfig(ext_table=".txt,.md"))
        controller.navigate("/docs/")

        ok = controller.upload([self._file("notes.txt"), self._file("tool.exe")])

        self.assertTrue(ok)
        self.assertEqual(api.calls_to("upload"), [("upload", "/api/file/docs/notes.txt", "notes.txt")])
        self.assertEqual(sink.texts(NotifyLevel.SUCCESS), ["notes.txt uploaded"])
        self.assertEqual(len(sink.texts(NotifyLevel.DANGER)), 1)
        self.assertIn("tool.exe", sink.texts(NotifyLevel.DANGER)[0])
        self.assertEqual(len(controller.cache), 0)
        self.assertIs(controller.workflow.state, EditState.IDLE)

    def test_archive_upload_uses_archive_table_and_endpoint(self) -> None:
        api = _docs_api()
        config = SystemConfig(ext_table=".txt", archive_table=".zip")
        controller, _sink, _history = make_controller(api, config=config)
        controller.navigate("/docs/")

        controller.upload([self._file("bundle.zip"), self._file("notes.txt")], folder_mode=True)

        self.assertEqual(api.calls_to("upload"), [("upload", "/api/archive/docs/bundle.zip", "bundle.zip")])

    def test_oversized_file_is_never_sent(self) -> None:
        api = _docs_api()
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")
        huge = UploadItem(name="huge.txt", size=MAX_FILE_UPLOAD + 1, source=self.root / "huge.txt")

        self.assertFalse(controller.upload([huge]))

        self.assertEqual(api.calls_to("upload"), [])
        self.assertEqual(len(sink.texts(NotifyLevel.DANGER)), 1)
        self.assertIs(controller.workflow.state, EditState.IDLE)

    def test_each_upload_reports_its_own_outcome(self) -> None:
        api = _docs_api()
        api.upload_failures["bad.txt"] = TransportError(500)
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")

        controller.upload([self._file("good.txt"), self._file("bad.txt")])

        self.assertEqual(sink.texts(NotifyLevel.SUCCESS), ["good.txt uploaded"])
        self.assertEqual(sink.texts(NotifyLevel.DANGER), ["bad.txt upload failed: Page is missing"])
        self.assertEqual(len(api.calls_to("upload")), 2)

    def test_failed_upload_still_returns_to_idle(self) -> None:
        api = _docs_api()
        api.upload_failures["bad.txt"] = TransportError(403)
        controller, _sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.begin_edit(EditState.UPLOADING)

        self.assertFalse(controller.upload([self._file("bad.txt")]))

        self.assertIs(controller.workflow.state, EditState.IDLE)


class PreviewTests(unittest.TestCase):
    def test_code_preview_fetches_text(self) -> None:
        api = _docs_api()
        api.texts["/docs/a.txt"] = "hello\n"
        controller, _sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.select("/docs/a.txt")

        preview = controller.preview()

        self.assertIsNotNone(preview)
        self.assertIs(preview.kind, PreviewClass.CODE)
        self.assertEqual(preview.text, "hello\n")
        self.assertEqual(preview.url, "/api/file/docs/a.txt")
        self.assertIn("hello", preview.highlighted())

    def test_unknown_extension_cannot_be_previewed(self) -> None:
        api = _docs_api()
        controller, sink, _history = make_controller(api)
        controller.navigate("/docs/")
        controller.select("/docs/x.xyz")

        self.assertEqual(controller.command_status(Command.PREVIEW), CommandStatus.DISABLED)
        self.assertFalse(controller.run(Command.PREVIEW))
        preview = controller.preview()

        self.assertFalse(preview.previewable)
        self.assertEqual(api.calls_to("fetch_text"), [])
        self.assertEqual(len(sink.texts(NotifyLevel.WARNING)), 1)


if __name__ == "__main__":
    unittest.main()
