import io
import logging

import pytest

from blog_api.services.image_store import ImageStore


@pytest.fixture
def store(tmp_path):
    image_store = ImageStore(str(tmp_path / "uploads"))
    image_store.ensure_directory()
    return image_store


def test_filename_for_uses_image_name_and_extension(store):
    assert store.filename_for("cover", "IMG_001.JPG") == "cover.JPG"
    assert store.filename_for(None, "photo.png") == "default.png"
    assert store.filename_for("", "photo.tar.gz") == "default.gz"
    assert store.filename_for("cover", "noextension") == "cover"


def test_base_name_cannot_escape_upload_dir(store):
    assert store.base_name("../../etc/passwd") == "passwd"
    assert store.base_name("..\\secret") == "secret"
    assert store.base_name("..") == "default"


def test_local_path_maps_public_paths(store):
    assert store.local_path("/uploads/cover.jpg") == store.upload_dir / "cover.jpg"
    assert store.local_path("") is None
    assert store.local_path(None) is None
    assert store.local_path("https://cdn.example.com/cover.jpg") is None


def test_save_writes_file(store):
    path = store.save(io.BytesIO(b"png-bytes"), "cover", "original.png")

    assert path == "/uploads/cover.png"
    assert (store.upload_dir / "cover.png").read_bytes() == b"png-bytes"


def test_replace_removes_old_file(store):
    old = store.save(io.BytesIO(b"old"), "cover", "a.jpg")

    new = store.replace(old, io.BytesIO(b"new"), "cover", "b.png")

    assert new == "/uploads/cover.png"
    assert not (store.upload_dir / "cover.jpg").exists()
    assert (store.upload_dir / "cover.png").read_bytes() == b"new"


def test_replace_same_path_keeps_new_file(store):
    old = store.save(io.BytesIO(b"old"), "cover", "a.jpg")

    new = store.replace(old, io.BytesIO(b"new"), "cover", "b.jpg")

    assert new == old
    assert (store.upload_dir / "cover.jpg").read_bytes() == b"new"


def test_replace_tolerates_missing_old_file(store):
    new = store.replace("/uploads/gone.jpg", io.BytesIO(b"new"), "fresh", "x.jpg")

    assert new == "/uploads/fresh.jpg"
    assert (store.upload_dir / "fresh.jpg").exists()


def test_rename_moves_file_and_keeps_extension(store):
    old = store.save(io.BytesIO(b"content"), "cover", "a.jpg")

    new = store.rename(old, "cover2")

    assert new == "/uploads/cover2.jpg"
    assert not (store.upload_dir / "cover.jpg").exists()
    assert (store.upload_dir / "cover2.jpg").read_bytes() == b"content"


def test_rename_to_same_name_is_noop(store):
    old = store.save(io.BytesIO(b"content"), "cover", "a.jpg")

    assert store.rename(old, "cover") == old
    assert (store.upload_dir / "cover.jpg").exists()


def test_rename_without_image_returns_empty(store):
    assert store.rename("", "cover2") == ""


def test_rename_missing_source_clears_reference(store):
    assert store.rename("/uploads/gone.jpg", "cover2") == ""
    assert not (store.upload_dir / "cover2.jpg").exists()


def test_delete(store):
    path = store.save(io.BytesIO(b"x"), "cover", "a.jpg")

    assert store.delete(path) is True
    assert store.delete(path) is False
    assert store.delete("") is False


def test_save_over_existing_file_logs_warning(store, caplog):
    store.save(io.BytesIO(b"first"), "cover", "a.png")

    with caplog.at_level(logging.WARNING, logger="blog_api.services.image_store"):
        store.save(io.BytesIO(b"second"), "cover", "b.png")

    assert "Overwriting existing image" in caplog.text
    assert (store.upload_dir / "cover.png").read_bytes() == b"second"


def test_rename_onto_existing_file_logs_warning(store, caplog):
    old = store.save(io.BytesIO(b"mine"), "cover", "a.jpg")
    store.save(io.BytesIO(b"theirs"), "other", "b.jpg")

    with caplog.at_level(logging.WARNING, logger="blog_api.services.image_store"):
        new = store.rename(old, "other")

    assert new == "/uploads/other.jpg"
    assert "already exists and will be overwritten" in caplog.text
    assert (store.upload_dir / "other.jpg").read_bytes() == b"mine"


def test_exists_reports_target_file(store):
    assert store.exists("cover", "a.png") is False
    store.save(io.BytesIO(b"x"), "cover", "a.png")
    assert store.exists("cover", "other.png") is True
    assert store.exists("cover", "a.jpg") is False
