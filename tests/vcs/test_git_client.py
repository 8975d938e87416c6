import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock, patch

from git_semver.vcs.git_client import AmbiguousRefError, GitClient, GitError


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class TestGitClient(unittest.TestCase):
    def test_commit_subjects_oldest_first(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="third\nsecond\nfirst", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            subjects = client.commit_subjects("abc123", "main")

        self.assertEqual(subjects, ["first", "second", "third"])
        self.assertEqual(calls, [["log", "--pretty=format:%s", "--author-date-order", "abc123..main"]])

    def test_commit_subjects_without_root_uses_whole_branch(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(returncode=0, stdout="only\n", stderr="")
            subjects = GitClient(Path("/repo")).commit_subjects("", "main")
        self.assertEqual(subjects, ["only"])
        self.assertEqual(mock_run.call_args[0][1][-1], "main")

    def test_list_tags_orders_by_distance_not_name(self) -> None:
        # v1.0.0 is merged into the branch, v9.0.0 sits on a side branch,
        # vlatest shares the v2.0.0 commit and vother is unrelated.
        listing = (
            "v9.0.0 c9 \n"
            "v2.0.0 t2 c2\n"
            "vlatest c2 \n"
            "v1.0.0 c1 \n"
            "vother c0 \n"
        )
        distances = {"c2": 0, "c1": 1, "fork9": 4}
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            if args[0] == "tag" and "--merged" in args:
                return DummyProc(returncode=0, stdout="v2.0.0\nvlatest\nv1.0.0\n", stderr="")
            if args[0] == "tag":
                return DummyProc(returncode=0, stdout=listing, stderr="")
            if args[0] == "merge-base":
                if args[1] == "c0":
                    return DummyProc(returncode=1, stdout="", stderr="no merge base")
                return DummyProc(returncode=0, stdout="fork9\n", stderr="")
            if args[0] == "rev-list":
                base = args[2].split("..")[0]
                return DummyProc(returncode=0, stdout=f"{distances[base]}\n", stderr="")
            raise AssertionError(f"Unexpected git command: {args}")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            tags = GitClient(Path("/repo")).list_tags("v*", branch="main~1")

        self.assertEqual(tags, ["v2.0.0", "vlatest", "v1.0.0", "v9.0.0"])
        # Merged tags skip merge-base; shared commits are counted once.
        self.assertEqual([args[1] for args in calls if args[0] == "merge-base"], ["c9", "c0"])
        self.assertEqual(len([args for args in calls if args[0] == "rev-list"]), 3)

    def test_list_tags_excludes_commit(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(returncode=0, stdout="v2 tip \nv1 c1 \n", stderr="")
            tags = GitClient(Path("/repo")).list_tags("v*", exclude_commit="tip")
        self.assertEqual(tags, ["v1"])

    def test_list_tags_without_branch(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(returncode=0, stdout="v2 c2 \nv1 t1 c1\n", stderr="")
            self.assertEqual(GitClient(Path("/repo")).list_tags("v*"), ["v2", "v1"])
        self.assertEqual(mock_run.call_args[0][1][:4], ["tag", "--list", "v*", "--sort=-v:refname"])

    def test_has_any_commit(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(returncode=0, stdout="", stderr="")
            self.assertFalse(GitClient(Path("/repo")).has_any_commit())
            mock_run.return_value = DummyProc(returncode=0, stdout="deadbeef\n", stderr="")
            self.assertTrue(GitClient(Path("/repo")).has_any_commit())

    def test_require_ref_raises_for_unknown_ref(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(returncode=1, stdout="", stderr="")
            client = GitClient(Path("/repo"))
            self.assertIsNone(client.resolve_ref("nope"))
            with self.assertRaises(AmbiguousRefError):
                client.require_ref("nope")

    def test_merge_base_failure_raises(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(returncode=1, stdout="", stderr="fatal")
            with self.assertRaises(GitError):
                GitClient(Path("/repo")).merge_base("v1", "main")

    def test_changed_paths(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout="src/a.py\n\nsrc/b.py\nsrc/a.py\n", stderr="")

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            self.assertEqual(client.changed_paths("abc", "main", "src"), {"src/a.py", "src/b.py"})
            client.changed_paths("", "main", "src")

        self.assertEqual(calls[0], ["diff", "--name-only", "abc", "main", "--", "src"])
        self.assertEqual(calls[1][0], "log")

    @patch("subprocess.run")
    def test_run_raises_on_failure(self, mock_run) -> None:
        mock_run.return_value = Mock(returncode=128, stdout="", stderr="fatal: bad revision")
        with self.assertRaises(GitError) as ctx:
            GitClient(Path("/repo"))._run(["log", "nope"])
        self.assertIn("bad revision", str(ctx.exception))

    @patch("subprocess.run", side_effect=FileNotFoundError("git"))
    def test_run_without_git_binary(self, mock_run) -> None:
        with self.assertRaises(GitError):
            GitClient(Path("/repo"))._run(["status"])

    def test_find_repo_root(self) -> None:
        with patch("pathlib.Path.exists", lambda self: str(self) == str(Path("/repo/.git").resolve())):
            self.assertEqual(GitClient.find_repo_root(Path("/repo/sub/dir")), Path("/repo").resolve())


if __name__ == "__main__":
    unittest.main()
