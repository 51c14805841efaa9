"""Tests for listing entries, the per-folder cache, and display helpers."""

from __future__ import annotations

import unittest

from dirbrowser.listing.cache import ListingCache
from dirbrowser.listing.format import (
    entry_row,
    format_file_size,
    format_ip,
    short_text,
    show_value,
    sort_entries,
)
from dirbrowser.listing.types import UNKNOWN_SIZE, Entry, Listing, parse_entries


class EntryTests(unittest.TestCase):
    def test_from_json_reads_listing_fields(self) -> None:
        entry = Entry.from_json({"Path": "/docs/", "Name": "a.txt", "IsDir": False, "FileSize": 12, "ModTime": 5})

        self.assertEqual(entry, Entry(path="/docs/", name="a.txt", is_dir=False, file_size=12, mod_time=5))
        self.assertEqual(entry.key, "/docs/a.txt")

    def test_missing_fields_fall_back(self) -> None:
        entry = Entry.from_json({"Name": "x"})

        self.assertEqual(entry.file_size, UNKNOWN_SIZE)
        self.assertEqual(entry.key, "/x")
        self.assertFalse(entry.is_dir)

    def test_folder_entry_target_path(self) -> None:
        entry = Entry(path="/docs", name="sub", is_dir=True)

        self.assertEqual(entry.folder, "/docs/")
        self.assertEqual(entry.target_path, "/docs/sub/")

    def test_parse_entries_handles_null_and_junk(self) -> None:
        self.assertEqual(parse_entries(None), ())
        self.assertEqual(parse_entries({"Name": "x"}), ())
        self.assertEqual(len(parse_entries([{"Path": "/", "Name": "a"}, "junk", 3])), 1)

    def test_listing_find_by_key(self) -> None:
        listing = Listing(path="/", entries=parse_entries([{"Path": "/", "Name": "a"}, {"Path": "/", "Name": "b"}]))

        self.assertEqual(listing.find("/b").name, "b")
        self.assertIsNone(listing.find("/c"))
        self.assertEqual(len(listing), 2)


class ListingCacheTests(unittest.TestCase):
    def test_keys_are_normalized(self) -> None:
        cache = ListingCache()
        listing = Listing(path="/a/")

        cache.put("a", listing)

        self.assertIs(cache.get("/a/"), listing)
        self.assertIn("/a", cache)

    def test_search_listings_are_not_stored(self) -> None:
        cache = ListingCache()

        cache.put("/", Listing(path="/", search_expr="x"))

        self.assertIsNone(cache.get("/"))

    def test_invalidate_all_empties_cache(self) -> None:
        cache = ListingCache()
        cache.put("/a/", Listing(path="/a/"))
        cache.put("/b/", Listing(path="/b/"))

        cache.invalidate_all()

        self.assertEqual(len(cache), 0)
        self.assertIsNone(cache.get("/a/"))


class FormatTests(unittest.TestCase):
    def test_file_sizes(self) -> None:
        self.assertEqual(format_file_size(-1), "")
        self.assertEqual(format_file_size(512), "512 bytes")
        self.assertEqual(format_file_size(2048), "2.0 Kb")
        self.assertEqual(format_file_size(3 * 1024 * 1024), "3.0 Mb")
        self.assertEqual(format_file_size(20 * 1024 * 1024 * 1024), "20.0 Gb")

    def test_short_text_keeps_tail(self) -> None:
        self.assertEqual(short_text("abc", 20), "abc")
        self.assertEqual(short_text("abcdefghij", 8), "...fghij")

    def test_ip_is_rendered_most_significant_octet_first(self) -> None:
        self.assertEqual(format_ip(0xC0A80001), "192.168.0.1")

    def test_show_value_passes_unknown_columns_through(self) -> None:
        self.assertEqual(show_value("Cnt", 4), "4")
        self.assertEqual(show_value("Path", "/a"), "/a/")

    def test_entry_row_formats_every_column(self) -> None:
        row = entry_row(Entry(path="/docs/", name="a.txt", file_size=10, mod_time=0))

        self.assertEqual(set(row), {"Path", "Name", "FileSize", "ModTime"})
        self.assertEqual(row["FileSize"], "10 bytes")

    def test_sort_entries(self) -> None:
        entries = [Entry(path="/", name="b", file_size=1), Entry(path="/", name="A", file_size=5)]

        self.assertEqual([e.name for e in sort_entries(entries)], ["A", "b"])
        self.assertEqual([e.name for e in sort_entries(entries, "FileSize", descending=True)], ["A", "b"])
        self.assertEqual([e.name for e in sort_entries(entries, "Nope")], ["b", "A"])


if __name__ == "__main__":
    unittest.main()
