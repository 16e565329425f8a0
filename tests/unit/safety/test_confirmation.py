"""Unit tests for confirmation prompt rendering."""

from cleansafe.core.config import GIB
from cleansafe.safety.confirmation import build_prompt, detail_lines, headline
from cleansafe.safety.models import DeletionMethod


class TestHeadline:
    """Tests for headline."""

    def test_zero_items(self) -> None:
        """No paths yields the fixed message without a method suffix."""
        assert headline([], 0, DeletionMethod.TRASH) == "No valid items to delete."

    def test_single_item_trash(self) -> None:
        """One path names the item and its size."""
        message = headline(["/home/a/cache.bin"], 1536, DeletionMethod.TRASH)

        assert message == (
            'Delete "cache.bin" (1.5 KB)? Items will be moved to trash and can be restored from there.'
        )

    def test_many_items_quarantine(self) -> None:
        """Several paths show a count and total size."""
        message = headline(["/a", "/b"], 2 * 1024 * 1024, DeletionMethod.QUARANTINE)

        assert message == (
            "Delete 2 items (2 MB total)? Items will be quarantined and can be restored using cleansafe."
        )


class TestDetailLines:
    """Tests for detail_lines."""

    def test_short_batch_lists_everything(self) -> None:
        """Up to ten paths are listed in full."""
        paths = [f"/p{i}" for i in range(10)]

        assert detail_lines(paths) == [f"• /p{i}" for i in range(10)]

    def test_long_batch_truncates(self) -> None:
        """More than ten paths show the first eight and a remainder line."""
        paths = [f"/p{i}" for i in range(11)]

        lines = detail_lines(paths)

        assert lines[:8] == [f"• /p{i}" for i in range(8)]
        assert lines[8] == "... and 3 more items"
        assert len(lines) == 9


class TestBuildPrompt:
    """Tests for build_prompt."""

    def test_system_path_and_size_warnings(self) -> None:
        """Skipped system paths and large totals add warnings."""
        prompt = build_prompt(
            ["/home/a/big.iso"],
            GIB + 1,
            DeletionMethod.TRASH,
            ["Critical directory detected: /home/a/big.iso"],
            system_path_count=2,
        )

        assert prompt.warnings == [
            "Critical directory detected: /home/a/big.iso",
            "2 system paths will be skipped for safety",
            "This operation will free more than 1GB of space",
        ]
        assert prompt.item_count == 1
        assert prompt.total_size == GIB + 1
        assert prompt.method is DeletionMethod.TRASH

    def test_exactly_threshold_has_no_size_warning(self) -> None:
        """The size warning needs a total strictly above the threshold."""
        prompt = build_prompt(["/a"], GIB, DeletionMethod.TRASH, [])

        assert prompt.warnings == []

    def test_empty_prompt(self) -> None:
        """An empty batch has no details."""
        prompt = build_prompt([], 0, DeletionMethod.QUARANTINE, [], system_path_count=1)

        assert prompt.item_count == 0
        assert prompt.details == []
        assert prompt.warnings == ["1 system paths will be skipped for safety"]
