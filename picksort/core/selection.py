from pathlib import Path

from .transfer import BatchResult, TransferMode

DEFAULT_PAGE_SIZE = 60


class SelectionModel:
    """
    State behind the image grid: the listed images, which of them are
    selected, the chosen transfer mode and how many grid items have been
    revealed so far (the grid grows one page at a time while scrolling).
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = max(1, page_size)
        self.images: list[Path] = []
        self.selected: set[Path] = set()
        self.mode: TransferMode = TransferMode.COPY
        self.loaded_count: int = 0

    def set_images(self, images: list[Path]) -> None:
        self.images = list(images)
        self.selected.clear()
        self.loaded_count = 0

    # --- Selection ---
    def is_selected(self, path: Path) -> bool:
        return path in self.selected

    def toggle(self, path: Path) -> bool:
        """Flip selection of ``path``; returns the new state."""
        if path in self.selected:
            self.selected.discard(path)
            return False
        if path in self.images:
            self.selected.add(path)
            return True
        return False

    def select(self, path: Path) -> None:
        if path in self.images:
            self.selected.add(path)

    def deselect(self, path: Path) -> None:
        self.selected.discard(path)

    def select_all(self) -> None:
        self.selected = set(self.images)

    def clear_selection(self) -> None:
        self.selected.clear()

    def selected_paths(self) -> list[Path]:
        """Selected images in display order."""
        return [p for p in self.images if p in self.selected]

    def stats(self) -> tuple[int, int, int]:
        total = len(self.images)
        selected = len(self.selected)
        return total, selected, total - selected

    def can_execute(self, target: Path | None) -> bool:
        return target is not None and bool(self.selected)

    # --- Pagination ---
    @property
    def has_more(self) -> bool:
        return self.loaded_count < len(self.images)

    def load_next_page(self) -> list[Path]:
        """Reveal the next page of images and return the newly revealed ones."""
        start = self.loaded_count
        end = min(len(self.images), start + self.page_size)
        self.loaded_count = end
        return self.images[start:end]

    def loaded_images(self) -> list[Path]:
        return self.images[:self.loaded_count]

    # --- Results ---
    def apply_result(self, result: BatchResult) -> list[Path]:
        """
        Update state after a batch. Moved files leave the image list;
        transferred files are deselected, failed ones stay selected for a
        retry. Returns the paths removed from the list.
        """
        for outcome in result.succeeded:
            self.selected.discard(outcome.source)

        if result.mode != TransferMode.MOVE:
            return []

        moved = set(result.moved_sources)
        if not moved:
            return []
        removed_before_window = sum(1 for p in self.images[:self.loaded_count] if p in moved)
        removed = [p for p in self.images if p in moved]
        self.images = [p for p in self.images if p not in moved]
        self.loaded_count = max(0, self.loaded_count - removed_before_window)
        return removed
