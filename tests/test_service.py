import pytest

from srcsetter import service
from srcsetter.config.settings import ImagesSettings
from srcsetter.config.sizes import ViewportSizes
from srcsetter.service import Images


@pytest.fixture
def default_images(images):
    service.set_images(images)
    yield images
    service.set_images(None)


def test_configure_merges_sizes_and_settings(images):
    images.configure({"image-sizes": {"card": {"w": 400}}, "base_path": "media", "cache": "/var/cache"})
    assert images.get_url(42, images.resolve_size("card").params) == "https://site/media/x.jpg?w=400"
    assert images.settings.cache_dir == "/var/cache"
    assert isinstance(images.resolve_size("thumbnail"), ViewportSizes)


def test_configure_keeps_previous_snapshot(images):
    before = images.settings
    images.configure({"public_base": "https://cdn.site"})
    assert before.public_base == "https://site"
    assert images.get_url(42) == "https://cdn.site/img/x.jpg"


def test_configure_swaps_settings_and_builders_together(images):
    old = images._snapshot
    images.configure({"base_path": "media"})
    new = images._snapshot
    assert new is not old
    assert new.settings is images.settings
    assert new.urls.settings is new.settings
    assert old.urls.settings is old.settings
    assert old.settings.base_path == "img"
    images.configure({"unknown": 1})
    assert images._snapshot is new


def test_url_for_size_and_viewport(images):
    assert images.get_url_for_size(42, "thumbnail", "mobile") == "https://site/img/x.jpg?w=150&h=150&fit=crop"
    assert images.get_url_for_size(42, "poster") == "https://site/img/x.jpg"


def test_module_helpers_use_default_instance(default_images):
    assert service.get_images() is default_images
    assert service.image_url(42, {"w": 300}) == "https://site/img/x.jpg?w=300"
    assert service.image_tag(42, widths=[375]).startswith('<img src="https://site/img/x.jpg?w=375"')
    assert service.picture_tag(9, 8).startswith("<picture>")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("IMAGES_PUBLIC_BASE", "https://example.org/")
    monkeypatch.setenv("IMAGES_BASE_PATH", "/thumbs/")
    monkeypatch.delenv("IMAGES_SOURCE_ROOT", raising=False)
    settings = ImagesSettings.from_env()
    assert settings.public_base == "https://example.org"
    assert settings.base_path == "thumbs"
    assert settings.source_root == "https://example.org/uploads"


def test_from_settings_loads_manifest(tmp_path):
    path = tmp_path / "media.json"
    path.write_text('{"3": {"url": "http://localhost:8000/uploads/a.png"}}')
    images = Images.from_settings(ImagesSettings(media_manifest=str(path)))
    assert images.get_url(3, {"w": 10}) == "http://localhost:8000/img/a.png?w=10"
