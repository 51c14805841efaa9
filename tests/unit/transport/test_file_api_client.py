"""Tests for the requests-backed File API client and the error taxonomy."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

from dirbrowser.notify import CollectingSink, NotifyLevel
from dirbrowser.transport.client import FileApiClient
from dirbrowser.transport.downloads import BackgroundDownloader, target_name
from dirbrowser.transport.errors import (
    BadCredentials,
    CaptchaRequired,
    ErrorChannel,
    TransportError,
    error_for_status,
    status_message,
)


def _response(status: int = 200, payload: object = None, text: str = "", content: bytes | None = None) -> mock.Mock:
    response = mock.Mock()
    response.status_code = status
    response.text = text
    response.content = content if content is not None else (b"x" if payload is not None else b"")
    response.json.return_value = payload
    response.iter_content.return_value = iter([b"ab", b"cd"])
    return response


def _client(*responses: mock.Mock) -> tuple[FileApiClient, mock.Mock]:
    session = mock.Mock()
    session.cookies = requests.cookies.RequestsCookieJar()
    session.request.side_effect = list(responses)
    return FileApiClient("http://files.example/", session=session), session


class FileApiClientTests(unittest.TestCase):
    def test_list_dir_gets_dir_endpoint(self) -> None:
        client, session = _client(_response(payload=[{"Name": "a"}]))

        self.assertEqual(client.list_dir("/docs/"), [{"Name": "a"}])

        method, url = session.request.call_args.args
        self.assertEqual((method, url), ("GET", "http://files.example/api/dir/docs/"))

    def test_search_passes_expression(self) -> None:
        client, session = _client(_response(payload=[]))

        client.search("/docs/", "report")

        self.assertEqual(session.request.call_args.args[1], "http://files.example/api/files/docs/")
        self.assertEqual(session.request.call_args.kwargs["params"], {"Expr": "report"})

    def test_empty_body_decodes_to_none(self) -> None:
        client, _session = _client(_response(content=b""))

        self.assertIsNone(client.list_dir("/"))

    def test_csrf_cookie_is_sent_as_header(self) -> None:
        client, session = _client(_response(text="ok"))
        session.cookies.set("anti_csrf_token", "tok")

        client.rename("/docs/a.txt", "b.txt")

        kwargs = session.request.call_args.kwargs
        self.assertEqual(kwargs["headers"], {"anti_csrf_token": "tok"})
        self.assertEqual(kwargs["data"], {"NewName": "b.txt"})
        self.assertEqual(session.request.call_args.args, ("PUT", "http://files.example/api/file/docs/a.txt"))

    def test_non_200_raises_transport_error(self) -> None:
        client, _session = _client(_response(status=403))

        with self.assertRaises(TransportError) as caught:
            client.delete_file("/a.txt")

        self.assertEqual(caught.exception.status, 403)
        self.assertEqual(caught.exception.message, "Insufficient permission")
        self.assertEqual(caught.exception.url, "/api/file/a.txt")

    def test_connection_failure_is_status_zero(self) -> None:
        session = mock.Mock()
        session.cookies = requests.cookies.RequestsCookieJar()
        session.request.side_effect = requests.exceptions.ConnectionError("down")
        client = FileApiClient("http://files.example", session=session)

        with self.assertRaises(TransportError) as caught:
            client.list_dir("/")

        self.assertEqual(caught.exception.status, 0)

    def test_timeout_is_forwarded(self) -> None:
        session = mock.Mock()
        session.cookies = requests.cookies.RequestsCookieJar()
        session.request.return_value = _response(payload={})
        client = FileApiClient("http://files.example", session=session, timeout=3.0)

        client.get_config()

        self.assertEqual(session.request.call_args.kwargs["timeout"], 3.0)

    def test_upload_posts_multipart_file_and_name(self) -> None:
        client, session = _client(_response(text="done"))
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "a.txt"
            source.write_text("data", encoding="utf-8")

            self.assertEqual(client.upload("/api/file/docs/a.txt", source, "a.txt"), "done")

        kwargs = session.request.call_args.kwargs
        self.assertEqual(session.request.call_args.args[0], "POST")
        self.assertEqual(kwargs["data"], {"FileName": "a.txt"})
        self.assertEqual(kwargs["files"]["File"][0], "a.txt")

    def test_login_maps_captcha_statuses(self) -> None:
        client, _session = _client(_response(status=603), _response(status=601))

        with self.assertRaises(CaptchaRequired):
            client.login("user1", "secret")
        with self.assertRaises(BadCredentials):
            client.login("user1", "secret")

    def test_login_sends_captcha_only_when_given(self) -> None:
        client, session = _client(_response(text="ok"), _response(text="ok"))

        client.login("user1", "secret")
        self.assertNotIn("Captcha", session.request.call_args.kwargs["data"])
        client.login("user1", "secret", "abcd")
        self.assertEqual(session.request.call_args.kwargs["data"]["Captcha"], "abcd")


class ErrorTaxonomyTests(unittest.TestCase):
    def test_status_messages(self) -> None:
        self.assertEqual(status_message(400), "Invalid input parameters")
        self.assertEqual(status_message(401), "Not signed in or the session has expired")
        self.assertEqual(status_message(404), status_message(503))
        self.assertEqual(status_message(418), "Unknown error")

    def test_error_for_status_picks_subclass(self) -> None:
        self.assertIsInstance(error_for_status(600), CaptchaRequired)
        self.assertEqual(error_for_status(600).message, "Incorrect captcha")
        self.assertIsInstance(error_for_status(601), BadCredentials)
        self.assertIs(type(error_for_status(500)), TransportError)

    def test_error_channel_notifies_and_flags_unauthorized(self) -> None:
        sink = CollectingSink()
        calls: list[str] = []
        channel = ErrorChannel(sink, on_unauthorized=lambda: calls.append("login"))

        channel.report(TransportError(401), prefix="a.txt: ")
        channel.report(TransportError(500))

        self.assertEqual(
            sink.texts(NotifyLevel.DANGER),
            ["a.txt: Not signed in or the session has expired", "Page is missing"],
        )
        self.assertEqual(calls, ["login"])


class DownloaderTests(unittest.TestCase):
    def test_target_name_adds_zip_for_archives(self) -> None:
        self.assertEqual(target_name("/api/file/docs/a%20b.txt"), "a b.txt")
        self.assertEqual(target_name("/api/archive/docs/sub"), "sub.zip")

    def test_fetch_streams_body_to_file(self) -> None:
        client, session = _client(_response())
        with tempfile.TemporaryDirectory() as tmp:
            downloader = BackgroundDownloader(client, Path(tmp) / "out")

            target = downloader.fetch("/api/file/docs/a.txt")

            self.assertEqual(target.read_bytes(), b"abcd")
        self.assertEqual(session.request.call_args.kwargs["stream"], True)

    def test_failed_fetch_is_logged_not_raised(self) -> None:
        client, _session = _client(_response(status=404))
        with tempfile.TemporaryDirectory() as tmp:
            downloader = BackgroundDownloader(client, Path(tmp))

            with self.assertLogs("dirbrowser.transport.downloads", level="ERROR"):
                self.assertIsNone(downloader.fetch("/api/file/missing.txt"))

    def test_call_runs_on_background_thread(self) -> None:
        client, _session = _client(_response())
        with tempfile.TemporaryDirectory() as tmp:
            downloader = BackgroundDownloader(client, Path(tmp))

            downloader("/api/file/a.txt")
            downloader.join(1.0)

            self.assertEqual((Path(tmp) / "a.txt").read_bytes(), b"abcd")


if __name__ == "__main__":
    unittest.main()
