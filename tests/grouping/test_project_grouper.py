import unittest
from datetime import datetime, timedelta, timezone

from vc_daily_report.grouping.group_model import ProjectGroup
from vc_daily_report.grouping.project_grouper import (
    collation,
    drop_merge_commits,
    group_by_project,
    is_pure_merge_title,
)
from vc_daily_report.vcs.commit_collector import Commit


BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_commit(title, project_id="1", project_name="alpha", minutes=0, message=None):
    return Commit(
        project_id=project_id,
        project_name=project_name,
        title=title,
        message=message if message is not None else title,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        short_id=f"{project_id}-{minutes}",
        url="",
    )


class TestPureMergeTitle(unittest.TestCase):
    def test_merge_titles(self) -> None:
        self.assertTrue(is_pure_merge_title("Merge branch 'dev' into 'main'"))
        self.assertTrue(is_pure_merge_title("Merge remote-tracking origin/dev into dev"))
        self.assertTrue(is_pure_merge_title("merge pull request #12 into main"))

    def test_titles_with_content_are_kept(self) -> None:
        self.assertFalse(is_pure_merge_title("Merge branch 'dev' into 'main' and fix login"))
        self.assertFalse(is_pure_merge_title("Merge branch 'a b' into 'main'"))
        self.assertFalse(is_pure_merge_title("feat: merge user accounts"))
        self.assertFalse(is_pure_merge_title(""))

    def test_drop_merge_commits(self) -> None:
        commits = [make_commit("feat: x"), make_commit("Merge branch 'b' into 'main'")]
        self.assertEqual([c.title for c in drop_merge_commits(commits)], ["feat: x"])


class TestGroupByProject(unittest.TestCase):
    def test_groups_and_orders(self) -> None:
        commits = [
            make_commit("fix: late", "2", "beta", minutes=30),
            make_commit("feat: b-early", "2", "beta", minutes=5),
            make_commit("feat: a", "1", "Alpha", minutes=10),
            make_commit("docs: a-first", "1", "Alpha", minutes=1),
        ]

        groups = group_by_project(commits)

        self.assertEqual([g.project_name for g in groups], ["Alpha", "beta"])
        self.assertEqual([c.title for c in groups[0].commits], ["docs: a-first", "feat: a"])
        self.assertEqual([c.title for c in groups[1].commits], ["feat: b-early", "fix: late"])
        for group in groups:
            self.assertIsInstance(group, ProjectGroup)
            times = [c.created_at for c in group.commits]
            self.assertEqual(times, sorted(times))

    def test_groups_are_never_empty(self) -> None:
        commits = [
            make_commit("Merge branch 'x' into 'main'", "1", "alpha"),
            make_commit("feat: y", "2", "beta"),
        ]
        groups = group_by_project(commits)
        self.assertEqual([g.project_id for g in groups], ["2"])

    def test_empty_input(self) -> None:
        self.assertEqual(group_by_project([]), [])

    def test_result_independent_of_input_order(self) -> None:
        commits = [
            make_commit("feat: 1", "1", "alpha", minutes=1),
            make_commit("feat: 2", "2", "beta", minutes=2),
            make_commit("feat: 3", "1", "alpha", minutes=3),
        ]
        forward = group_by_project(commits)
        backward = group_by_project(list(reversed(commits)))
        self.assertEqual(forward, backward)


class TestCollation(unittest.TestCase):
    def test_missing_locale_falls_back_to_casefold(self) -> None:
        with self.assertLogs("vc_daily_report.grouping.project_grouper", level="WARNING") as logs:
            with collation("xx_NOT_A_LOCALE") as key:
                self.assertIs(key, str.casefold)
        self.assertIn("xx_NOT_A_LOCALE", logs.output[0])

    def test_locale_is_restored(self) -> None:
        import locale

        before = locale.setlocale(locale.LC_COLLATE)
        with collation("C") as key:
            self.assertEqual(sorted(["b", "a"], key=key), ["a", "b"])
        self.assertEqual(locale.setlocale(locale.LC_COLLATE), before)


if __name__ == "__main__":
    unittest.main()
