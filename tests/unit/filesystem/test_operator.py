"""Unit tests for SafeRemover.

Tests the gate sequence applied to every target: protected paths,
root preservation, missing targets, interactive confirmation,
directory handling, trash diversion and dry-run mode.
"""

import io
import json
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from betterrm.core.audit import AuditLogger
from betterrm.filesystem.operator import SafeRemover, ask_confirmation
from betterrm.filesystem.protected import ProtectedPathSet
from betterrm.filesystem.remover import RecursiveRemover
from betterrm.filesystem.trash import ensure_trash_dir
from betterrm.models.options import RemoveOptions


class TestProtectedGate:
    """Tests for protected path refusal."""

    def test_protected_directory_refused(
        self, workdir: Path, audit: AuditLogger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A protected directory is refused and left untouched."""
        important = workdir / "important"
        important.mkdir()
        (important / "data.txt").write_text("data")
        registry = ProtectedPathSet().extend([str(important)])

        remover = SafeRemover(registry, RemoveOptions(recursive=True, force=True), audit=audit)

        assert remover.safe_remove(str(important)) == 1
        assert (important / "data.txt").read_text() == "data"
        assert (
            f"better-rm: cannot remove '{important}': Protected system directory"
            in capsys.readouterr().err
        )

    def test_builtin_defaults_refused(
        self, audit: AuditLogger, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Built-in system directories are refused before touching them."""
        remover = SafeRemover(
            ProtectedPathSet.with_defaults(), RemoveOptions(recursive=True), audit=audit
        )

        assert remover.safe_remove("/etc") == 1
        assert "Protected system directory" in capsys.readouterr().err

    def test_descendant_not_refused(self, workdir: Path, audit: AuditLogger) -> None:
        """Only exact matches are protected; children may be removed."""
        important = workdir / "important"
        important.mkdir()
        child = important / "child.txt"
        child.write_text("x")
        registry = ProtectedPathSet().extend([str(important)])

        remover = SafeRemover(registry, RemoveOptions(), audit=audit)

        assert remover.safe_remove(str(child)) == 0
        assert not child.exists()

    def test_not_audited(self, workdir: Path, tmp_path: Path) -> None:
        """Refused targets produce no audit record."""
        important = workdir / "important"
        important.mkdir()
        log_path = tmp_path / "audit.jsonl"
        registry = ProtectedPathSet().extend([str(important)])

        remover = SafeRemover(
            registry, RemoveOptions(recursive=True), audit=AuditLogger(log_path=log_path)
        )
        remover.safe_remove(str(important))

        assert not log_path.exists()


class TestRootGate:
    """Tests for root preservation."""

    @pytest.mark.parametrize("target", ["/", "//", "/tmp/.."])
    def test_root_refused(
        self,
        target: str,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Paths resolving to / are refused while preserve-root is active."""
        remover = SafeRemover(
            empty_registry, RemoveOptions(recursive=True, force=True), audit=audit
        )

        with patch.object(RecursiveRemover, "remove_tree") as remove_tree:
            assert remover.safe_remove(target) == 1

        remove_tree.assert_not_called()
        assert "--preserve-root is active" in capsys.readouterr().err

    def test_no_preserve_root_allows_root(
        self, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """With --no-preserve-root the root reaches the recursive remover."""
        options = RemoveOptions(
            recursive=True, preserve_root=False, no_preserve_root=True, dry_run=True
        )
        remover = SafeRemover(empty_registry, options, audit=audit)

        with patch.object(RecursiveRemover, "remove_tree", return_value=True) as remove_tree:
            assert remover.safe_remove("/") == 0

        remove_tree.assert_called_once_with("/")


class TestMissingTarget:
    """Tests for nonexistent targets."""

    def test_missing_reported(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A missing target fails with the OS reason."""
        missing = workdir / "missing.txt"
        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)

        assert remover.safe_remove(str(missing)) == 1
        assert (
            f"better-rm: cannot remove '{missing}': No such file or directory"
            in capsys.readouterr().err
        )

    def test_missing_ignored_with_force(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """With force a missing target is a silent success."""
        remover = SafeRemover(empty_registry, RemoveOptions(force=True), audit=audit)

        assert remover.safe_remove(str(workdir / "missing.txt")) == 0
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_dry_run_diagnostic_prefix(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Diagnostics in dry-run mode carry the dry-run marker."""
        missing = workdir / "missing.txt"
        remover = SafeRemover(empty_registry, RemoveOptions(dry_run=True), audit=audit)

        assert remover.safe_remove(str(missing)) == 1
        assert f"[DRY-RUN] better-rm: cannot remove '{missing}'" in capsys.readouterr().err


class TestInteractiveGate:
    """Tests for interactive confirmation."""

    def test_accepted(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """A confirmed target is removed."""
        target = workdir / "a.txt"
        target.write_text("a")
        asked: list[str] = []

        def confirm(path: str) -> bool:
            asked.append(path)
            return True

        remover = SafeRemover(
            empty_registry, RemoveOptions(interactive=True), audit=audit, confirm=confirm
        )

        assert remover.safe_remove(str(target)) == 0
        assert asked == [str(target)]
        assert not target.exists()

    def test_declined(
        self, workdir: Path, empty_registry: ProtectedPathSet, tmp_path: Path
    ) -> None:
        """A declined target is kept, counts as success and is not audited."""
        target = workdir / "a.txt"
        target.write_text("a")
        log_path = tmp_path / "audit.jsonl"

        remover = SafeRemover(
            empty_registry,
            RemoveOptions(interactive=True),
            audit=AuditLogger(log_path=log_path),
            confirm=lambda _: False,
        )

        assert remover.safe_remove(str(target)) == 0
        assert target.exists()
        assert not log_path.exists()

    def test_not_asked_in_dry_run(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """Dry-run never prompts."""
        target = workdir / "a.txt"
        target.write_text("a")

        def confirm(path: str) -> bool:
            pytest.fail(f"unexpected prompt for {path}")

        remover = SafeRemover(
            empty_registry,
            RemoveOptions(interactive=True, dry_run=True),
            audit=audit,
            confirm=confirm,
        )

        assert remover.safe_remove(str(target)) == 0
        assert target.exists()

    def test_not_asked_for_missing(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """Missing targets fail before the prompt."""

        def confirm(path: str) -> bool:
            pytest.fail(f"unexpected prompt for {path}")

        remover = SafeRemover(
            empty_registry, RemoveOptions(interactive=True), audit=audit, confirm=confirm
        )

        assert remover.safe_remove(str(workdir / "missing")) == 1


class TestAskConfirmation:
    """Tests for ask_confirmation."""

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("y\n", True),
            ("Y\n", True),
            ("yes\n", True),
            ("   y\n", True),
            ("n\n", False),
            ("no\n", False),
            ("\n", False),
            ("", False),
            ("x y\n", False),
        ],
    )
    def test_answers(self, answer: str, expected: bool) -> None:
        """Only a first non-blank y or Y confirms."""
        assert ask_confirmation("a.txt", io.StringIO(answer)) is expected

    def test_prompt_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The prompt names the target."""
        ask_confirmation("a.txt", io.StringIO("n\n"))

        assert "remove 'a.txt'? " in capsys.readouterr().out

    def test_prompt_shows_exact_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Emoji codes and markup in the name are shown as typed."""
        ask_confirmation("report:fire:[b].txt", io.StringIO("n\n"))

        assert "remove 'report:fire:[b].txt'? " in capsys.readouterr().out

    def test_closed_stream_declines(self) -> None:
        """A read error declines."""
        stream = io.StringIO("y\n")
        stream.close()

        assert ask_confirmation("a.txt", stream) is False


class TestDirectoryGate:
    """Tests for directory targets."""

    def test_directory_without_recursive(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Directories need the recursive flag."""
        target = workdir / "dir"
        target.mkdir()

        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)

        assert remover.safe_remove(str(target)) == 1
        assert target.is_dir()
        assert f"cannot remove '{target}': Is a directory" in capsys.readouterr().err

    def test_directory_recursive(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Recursive removal announces the tree and removes it."""
        target = workdir / "dir"
        target.mkdir()
        (target / "f.txt").write_text("f")

        remover = SafeRemover(
            empty_registry, RemoveOptions(recursive=True, verbose=True), audit=audit
        )

        assert remover.safe_remove(str(target)) == 0
        assert not target.exists()
        assert f"removing directory '{target}' recursively" in capsys.readouterr().out

    def test_symlink_to_directory_removed_as_link(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """A symlink is unlinked and its target directory survives."""
        real = workdir / "real"
        real.mkdir()
        (real / "keep.txt").write_text("keep")
        link = workdir / "link"
        link.symlink_to(real)

        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)

        assert remover.safe_remove(str(link)) == 0
        assert not link.is_symlink()
        assert (real / "keep.txt").read_text() == "keep"

    def test_dangling_symlink_removed(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """A dangling symlink exists for lstat and is removed."""
        link = workdir / "dangling"
        link.symlink_to(workdir / "nowhere")

        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)

        assert remover.safe_remove(str(link)) == 0
        assert not os.path.lexists(link)


class TestTrashMode:
    """Tests for trash diversion of top-level targets."""

    def test_file_moved_to_trash(
        self, workdir: Path, empty_registry: ProtectedPathSet, tmp_path: Path
    ) -> None:
        """The file is renamed into the trash with a timestamped name."""
        trash = ensure_trash_dir(tmp_path / "trash")
        target = workdir / "a.txt"
        target.write_text("hello")
        log_path = tmp_path / "audit.jsonl"

        options = RemoveOptions(use_trash=True, trash_dir=str(trash))
        remover = SafeRemover(empty_registry, options, audit=AuditLogger(log_path=log_path))

        assert remover.safe_remove(str(target)) == 0
        assert not target.exists()

        entries = list(trash.iterdir())
        assert len(entries) == 1
        assert re.fullmatch(rf"a\.txt\.\d{{8}}_\d{{6}}\.{os.getpid()}", entries[0].name)
        assert entries[0].read_text() == "hello"

        record = json.loads(log_path.read_text())
        assert record["action"] == "TRASH"
        assert record["trash_path"] == str(entries[0])


class TestDryRun:
    """Tests for dry-run mode across the gate sequence."""

    def test_nothing_changes(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        snapshot: Callable[[Path], dict[str, Any]],
    ) -> None:
        """Files, trees and the trash are left exactly as they were."""
        (workdir / "a.txt").write_text("a")
        (workdir / "tree" / "sub").mkdir(parents=True)
        (workdir / "tree" / "sub" / "b.txt").write_text("b")
        before = snapshot(workdir)
        trash = tmp_path / "trash"
        log_path = tmp_path / "audit.jsonl"

        options = RemoveOptions(
            recursive=True, dry_run=True, use_trash=True, trash_dir=str(trash)
        )
        remover = SafeRemover(empty_registry, options, audit=AuditLogger(log_path=log_path))

        status = remover.remove_all([str(workdir / "a.txt"), str(workdir / "tree")])

        assert status == 0
        assert snapshot(workdir) == before
        assert not trash.exists()
        assert not log_path.exists()

        out = capsys.readouterr().out
        assert f"[DRY-RUN] would be trashing '{workdir / 'a.txt'}'" in out
        assert f"[DRY-RUN] would be trashing directory '{workdir / 'tree'}' recursively" in out


class TestRemoveAll:
    """Tests for SafeRemover.remove_all."""

    def test_continues_past_failures(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """Later targets are processed after a failing one."""
        first = workdir / "first.txt"
        last = workdir / "last.txt"
        first.write_text("1")
        last.write_text("2")

        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)
        status = remover.remove_all([str(first), str(workdir / "missing"), str(last)])

        assert status == 1
        assert not first.exists()
        assert not last.exists()

    def test_all_succeed(
        self, workdir: Path, empty_registry: ProtectedPathSet, audit: AuditLogger
    ) -> None:
        """Status is zero when every target succeeds."""
        targets = [workdir / f"{i}.txt" for i in range(3)]
        for target in targets:
            target.write_text("x")

        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)

        assert remover.remove_all([str(t) for t in targets]) == 0

    def test_deep_tree_then_next_target(
        self,
        workdir: Path,
        empty_registry: ProtectedPathSet,
        audit: AuditLogger,
        make_deep_tree: Callable[[Path, int], Path],
    ) -> None:
        """A tree deeper than the interpreter stack is removed; later targets still run."""
        deep = workdir / "deep"
        make_deep_tree(deep, 1300)
        last = workdir / "last.txt"
        last.write_text("x")

        remover = SafeRemover(empty_registry, RemoveOptions(recursive=True), audit=audit)

        assert remover.remove_all([str(deep), str(last)]) == 0
        assert not deep.exists()
        assert not last.exists()

    def test_empty_input(self, empty_registry: ProtectedPathSet, audit: AuditLogger) -> None:
        """No targets means success."""
        remover = SafeRemover(empty_registry, RemoveOptions(), audit=audit)

        assert remover.remove_all([]) == 0
