"""Tests for checkout resolution and the command-runner operations."""

from __future__ import annotations

import unittest
from pathlib import Path

from fakes import FakeBackend, FakeRepository, RecordingRunner
from git_repo_status.exceptions import CheckoutPreconditionError, GitCommandError
from git_repo_status.models import BranchRef, HeadKind, HeadRef, RepositorySnapshot
from git_repo_status.writer import RepositoryWriter, find_upstream_candidate

MAIN_SHA = "1" * 40
FEATURE_SHA = "2" * 40
SNAPSHOT = RepositorySnapshot(name="project", path="/work/project", location="/work", current_branch="main")


def _repository() -> FakeRepository:
    return FakeRepository(
        branch_refs=[
            BranchRef(name="main", is_remote=False, tip_sha=MAIN_SHA),
            BranchRef(name="develop", is_remote=False, tip_sha=MAIN_SHA),
            BranchRef(name="origin/HEAD", is_remote=True, tip_sha=MAIN_SHA),
            BranchRef(name="origin/main", is_remote=True, tip_sha=MAIN_SHA),
            BranchRef(name="origin/feature-x", is_remote=True, tip_sha=FEATURE_SHA),
        ],
        head_ref=HeadRef(kind=HeadKind.BRANCH, friendly_name="main", tip_sha=MAIN_SHA),
    )


class CheckoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = _repository()
        self.runner = RecordingRunner()
        self.writer = RepositoryWriter(backend=FakeBackend(self.repository), runner=self.runner)

    def test_existing_local_branch_switches_directly(self) -> None:
        self.assertTrue(self.writer.checkout(SNAPSHOT, "develop"))

        self.assertEqual(self.repository.head_ref.friendly_name, "develop")
        self.assertEqual(self.runner.calls, [])
        self.assertTrue(self.repository.closed)

    def test_remote_only_branch_is_created_and_tracked(self) -> None:
        self.assertTrue(self.writer.checkout(SNAPSHOT, "feature-x"))

        created = [b for b in self.repository.branch_refs if b.name == "feature-x"]
        self.assertEqual(created, [BranchRef(name="feature-x", is_remote=False, tip_sha=FEATURE_SHA)])
        self.assertEqual(
            self.runner.calls,
            [(Path("/work/project"), ["branch", "--set-upstream-to=origin/feature-x", "feature-x"])],
        )
        self.assertEqual(self.repository.head_ref.friendly_name, "feature-x")

    def test_unknown_branch_is_a_precondition_error(self) -> None:
        with self.assertRaises(CheckoutPreconditionError) as caught:
            self.writer.checkout(SNAPSHOT, "does-not-exist")

        self.assertEqual(caught.exception.branch, "does-not-exist")
        self.assertEqual(self.runner.calls, [])
        self.assertTrue(self.repository.closed)

    def test_reports_false_when_head_lands_elsewhere(self) -> None:
        class StubbornRepository(FakeRepository):
            def checkout(self, name: str) -> HeadRef:
                return self.head_ref

        repository = StubbornRepository(branch_refs=_repository().branch_refs, head_ref=_repository().head_ref)
        writer = RepositoryWriter(backend=FakeBackend(repository), runner=self.runner)

        self.assertFalse(writer.checkout(SNAPSHOT, "develop"))

    def test_upstream_failure_propagates(self) -> None:
        self.runner.fail_with = GitCommandError(["git", "branch"], 128, stderr="fatal: no such branch")

        with self.assertRaises(GitCommandError):
            self.writer.checkout(SNAPSHOT, "feature-x")


class FindUpstreamCandidateTests(unittest.TestCase):
    def test_prefers_whole_segment_match(self) -> None:
        branches = [
            BranchRef(name="origin/my-feature-x", is_remote=True),
            BranchRef(name="origin/feature-x", is_remote=True),
        ]

        self.assertEqual(find_upstream_candidate(branches, "feature-x").name, "origin/feature-x")

    def test_falls_back_to_suffix_match(self) -> None:
        branches = [BranchRef(name="origin/my-feature-x", is_remote=True)]

        self.assertEqual(find_upstream_candidate(branches, "feature-x").name, "origin/my-feature-x")

    def test_ignores_local_branches_and_head_pointer(self) -> None:
        branches = [BranchRef(name="feature-x", is_remote=False), BranchRef(name="origin/HEAD", is_remote=True)]

        self.assertIsNone(find_upstream_candidate(branches, "feature-x"))
        self.assertIsNone(find_upstream_candidate(branches, "HEAD"))


class CommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = RecordingRunner()
        self.writer = RepositoryWriter(backend=FakeBackend(None), runner=self.runner)

    def test_fetch_without_prune(self) -> None:
        self.writer.fetch(SNAPSHOT)

        self.assertEqual(self.runner.calls, [(Path("/work/project"), ["fetch", "--all"])])

    def test_fetch_with_prune(self) -> None:
        self.writer.fetch(SNAPSHOT, prune=True)

        self.assertEqual(self.runner.calls[0][1], ["fetch", "--all", "--prune"])

    def test_pull_and_push(self) -> None:
        self.writer.pull(SNAPSHOT)
        self.writer.push(SNAPSHOT)

        self.assertEqual([args for _, args in self.runner.calls], [["pull"], ["push"]])

    def test_command_failure_propagates_unchanged(self) -> None:
        error = GitCommandError(["git", "push"], 1, stderr="rejected")
        self.runner.fail_with = error

        with self.assertRaises(GitCommandError) as caught:
            self.writer.push(SNAPSHOT)

        self.assertIs(caught.exception, error)


if __name__ == "__main__":
    unittest.main()
