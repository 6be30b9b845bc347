import tempfile
import unittest
from pathlib import Path

from vc_changelog.store.changelog_file import PREAMBLE, ChangelogFile, merge_changelog


FRAGMENT = "## [1.1.0] - January 5, 2024\n\n### Features\n\n- add login ([abc1234])\n\n"


class TestMergeChangelog(unittest.TestCase):
    def test_fragment_is_inserted_after_preamble(self) -> None:
        tail = "## [1.0.0] - January 1, 2024\n\n### Bug Fixes\n\n- old fix ([0000001])\n\n"
        merged = merge_changelog(PREAMBLE + tail, FRAGMENT)
        self.assertEqual(merged, PREAMBLE + FRAGMENT + tail)

    def test_only_first_preamble_is_used(self) -> None:
        existing = PREAMBLE + "quoted:\n\n# Changelog\n\nstays put\n"
        merged = merge_changelog(existing, FRAGMENT)
        self.assertEqual(merged, PREAMBLE + FRAGMENT + existing[len(PREAMBLE):])

    def test_text_before_preamble_is_kept(self) -> None:
        existing = "<!-- generated -->\n" + PREAMBLE + "rest\n"
        merged = merge_changelog(existing, FRAGMENT)
        self.assertEqual(merged, "<!-- generated -->\n" + PREAMBLE + FRAGMENT + "rest\n")

    def test_missing_preamble_is_added(self) -> None:
        merged = merge_changelog("Some notes\n", FRAGMENT)
        self.assertEqual(merged, PREAMBLE + FRAGMENT + "Some notes\n")


class TestChangelogFile(unittest.TestCase):
    def test_new_file_starts_with_preamble(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "CHANGELOG.md"
            store = ChangelogFile(path)
            self.assertFalse(store.exists())
            self.assertEqual(store.read(), PREAMBLE)

            store.prepend(FRAGMENT)

            self.assertEqual(path.read_text(encoding="utf-8"), PREAMBLE + FRAGMENT)

    def test_existing_content_is_preserved(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "CHANGELOG.md"
            old = PREAMBLE + "## [1.0.0] - January 1, 2024\n\n### ⚠ BREAKING CHANGES\n\n- x ([1])\n\n"
            path.write_text(old, encoding="utf-8")

            content = ChangelogFile(path).prepend(FRAGMENT)

            self.assertEqual(content, PREAMBLE + FRAGMENT + old[len(PREAMBLE):])
            self.assertEqual(path.read_text(encoding="utf-8"), content)

    def test_crlf_history_is_kept_byte_for_byte(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "CHANGELOG.md"
            old_tail = b"## [1.0.0] - January 1, 2024\r\n\r\n- old ([1])\r\n"
            path.write_bytes(PREAMBLE.encode("utf-8") + old_tail)

            ChangelogFile(path).prepend(FRAGMENT)

            data = path.read_bytes()
            self.assertEqual(data, PREAMBLE.encode("utf-8") + FRAGMENT.encode("utf-8") + old_tail)

    def test_parent_directories_are_created(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "docs" / "CHANGELOG.md"
            ChangelogFile(path).prepend(FRAGMENT)
            self.assertTrue(path.exists())


if __name__ == "__main__":
    unittest.main()
