"""
Test destination path building and directory creation.
"""

import threading
from datetime import datetime

import pytest

from photosorter.exceptions import FileOperationError
from photosorter.models import Category, DateSource, ResolvedDate
from photosorter.paths import build_destination, destination_for, ensure_directory


@pytest.fixture
def june_15():
    return ResolvedDate(moment=datetime(2023, 6, 15, 14, 30, 0), source=DateSource.METADATA)


class TestDestinationPaths:
    """Test the <out>/<YYYY-MM>/[<category>/]<name> layout."""

    def test_categorized_picture(self, tmp_path, june_15):
        dest = build_destination(tmp_path, june_15, "IMG_1.jpg", Category.PICTURE, True)
        assert dest == tmp_path / "2023-06" / "pictures" / "IMG_1.jpg"
        assert dest.parent.is_dir()
        assert not dest.exists()

    def test_categorization_disabled(self, tmp_path, june_15):
        dest = build_destination(tmp_path, june_15, "IMG_1.jpg", Category.PICTURE, False)
        assert dest == tmp_path / "2023-06" / "IMG_1.jpg"
        assert not (tmp_path / "2023-06" / "pictures").exists()

    @pytest.mark.parametrize("category,dir_name", [
        (Category.VIDEO, "videos"),
        (Category.GIF, "gifs"),
    ])
    def test_other_categories(self, tmp_path, june_15, category, dir_name):
        dest = build_destination(tmp_path, june_15, "clip", category, True)
        assert dest == tmp_path / "2023-06" / dir_name / "clip"

    def test_uncategorized_goes_in_month_dir(self, tmp_path, june_15):
        dest = build_destination(tmp_path, june_15, "note.txt", Category.UNCATEGORIZED, True)
        assert dest == tmp_path / "2023-06" / "note.txt"

    def test_month_is_zero_padded(self, tmp_path):
        resolved = ResolvedDate(moment=datetime(987, 1, 2), source=DateSource.FILESYSTEM)
        dest = destination_for(tmp_path, resolved, "old.jpg", Category.PICTURE, True)
        assert dest == tmp_path / "0987-01" / "pictures" / "old.jpg"

    def test_file_name_kept_verbatim(self, tmp_path, june_15):
        dest = destination_for(tmp_path, june_15, "Mixed Case NAME.JPG", Category.PICTURE, True)
        assert dest.name == "Mixed Case NAME.JPG"

    def test_destination_for_does_not_create(self, tmp_path, june_15):
        destination_for(tmp_path, june_15, "IMG_1.jpg", Category.PICTURE, True)
        assert list(tmp_path.iterdir()) == []


class TestEnsureDirectory:
    """Test idempotent, race tolerant directory creation."""

    def test_twice_is_not_an_error(self, tmp_path):
        target = tmp_path / "2023-06" / "pictures"
        ensure_directory(target)
        ensure_directory(target)
        assert target.is_dir()

    def test_file_in_the_way(self, tmp_path, june_15):
        (tmp_path / "2023-06").write_text("not a directory")
        with pytest.raises(FileOperationError):
            build_destination(tmp_path, june_15, "IMG_1.jpg", Category.PICTURE, False)

    def test_file_in_the_way_of_category(self, tmp_path, june_15):
        (tmp_path / "2023-06").mkdir()
        (tmp_path / "2023-06" / "pictures").write_text("not a directory")
        with pytest.raises(FileOperationError) as exc_info:
            build_destination(tmp_path, june_15, "IMG_1.jpg", Category.PICTURE, True)
        assert "pictures" in str(exc_info.value)

    def test_concurrent_creation(self, tmp_path):
        target = tmp_path / "2023-06" / "videos"
        errors = []
        barrier = threading.Barrier(16)

        def create():
            barrier.wait()
            try:
                ensure_directory(target)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=create) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert target.is_dir()
