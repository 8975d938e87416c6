import unittest

from git_semver.versioning.formatter import format_version, render
from git_semver.versioning.model import FormattedVersion, VersionState


class TestFormatter(unittest.TestCase):
    def test_default_templates(self) -> None:
        result = format_version(
            VersionState(1, 2, 3, 4), "${major}.${minor}.${patch}", "${increment}", "dev", "v"
        )
        self.assertEqual(
            result,
            FormattedVersion(
                version="1.2.3dev4",
                tag="v1.2.3dev4",
                release_version="1.2.3",
                release_tag="v1.2.3",
            ),
        )

    def test_custom_templates(self) -> None:
        result = format_version(VersionState(1, 2, 4, 0), "M${major}m${minor}p${patch}", "${increment}", "i", "")
        self.assertEqual(result.version, "M1m2p4i0")
        self.assertEqual(result.tag, "M1m2p4i0")
        self.assertEqual(result.release_version, "M1m2p4")

    def test_placeholder_replaced_once(self) -> None:
        self.assertEqual(render("${major}-${major}", {"major": 3}), "3-${major}")

    def test_unknown_placeholder_left_verbatim(self) -> None:
        self.assertEqual(render("${major}.${build}", {"major": 1}), "1.${build}")

    def test_release_state_has_no_increment(self) -> None:
        result = format_version(VersionState(2, 0, 0, None), "${major}.${minor}.${patch}", "${increment}", "+", "v")
        self.assertEqual(result.version, "2.0.0")
        self.assertEqual(result.tag, "v2.0.0")


if __name__ == "__main__":
    unittest.main()
