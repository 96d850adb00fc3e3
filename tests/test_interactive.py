"""Tests for the branch picker choices."""

from __future__ import annotations

import unittest

from git_repo_status.interactive import build_branch_choices


class BuildBranchChoicesTests(unittest.TestCase):
    def test_values_are_plain_names_and_labels_keep_annotation(self) -> None:
        choices = build_branch_choices(["feature-x (r)", "main", "wip (l)"], exclude="main")

        self.assertEqual([choice.value for choice in choices], ["feature-x", "wip"])
        self.assertEqual([choice.name for choice in choices], ["feature-x (r)", "wip (l)"])

    def test_deduplicates_names(self) -> None:
        choices = build_branch_choices(["x (r)", "x (l)"])

        self.assertEqual(len(choices), 1)


if __name__ == "__main__":
    unittest.main()
