import pytest

from ghsnap.errors import ListLoadError
from ghsnap.repo_list import load_repo_list


def test_load_repo_list(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text(
        "acme/widget\r\n\n# old ones\nacme/gadget  \nacme/widget\n", encoding="utf-8"
    )

    # order kept, duplicates kept
    assert load_repo_list(path) == ["acme/widget", "acme/gadget", "acme/widget"]


def test_load_repo_list_missing(tmp_path):
    with pytest.raises(ListLoadError):
        load_repo_list(tmp_path / "nope.txt")
