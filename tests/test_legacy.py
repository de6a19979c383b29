import pytest

from srcsetter.compat.legacy import LegacyImages
from srcsetter.errors import UnsupportedOperationError


@pytest.fixture
def legacy(images):
    return LegacyImages(images)


class TestGet:
    def test_output_has_exactly_three_viewports(self, legacy):
        for size in ("thumbnail", "hero.mobile", "missing"):
            assert set(legacy.get(42, size)) == {"desktop", "mobile", "tablet"}

    def test_per_viewport_records(self, legacy):
        result = legacy.get(42, "thumbnail")
        assert result["desktop"] == {
            "url": "https://site/img/x.jpg?w=300&h=300&fit=crop",
            "webp": "https://site/img/x.jpg?w=300&h=300&fit=crop&fm=webp",
            "alt": "A cat",
            "width": 300,
            "height": 300,
        }
        assert result["mobile"]["url"] == "https://site/img/x.jpg?w=150&h=150&fit=crop"
        assert result["tablet"]["width"] == 225

    def test_viewport_images_override_primary(self, legacy):
        result = legacy.get(42, "thumbnail", mobile_image=9)
        assert result["mobile"]["url"].startswith("https://site/img/mob.jpg")
        assert result["mobile"]["alt"] == "Mobile alt"
        assert result["tablet"]["url"].startswith("https://site/img/x.jpg")

    def test_legacy_unset_marker(self, legacy):
        assert legacy.get(42, "thumbnail", -1, -1) == legacy.get(42, "thumbnail")

    def test_single_size_is_desktop_only(self, legacy):
        legacy.config({"image-sizes": {"square": {"w": 100, "h": 100}}})
        result = legacy.get(42, "square")
        assert result["desktop"]["url"] == "https://site/img/x.jpg?w=100&h=100"
        assert result["mobile"] == ""
        assert result["tablet"] == ""

    def test_dotted_size_is_single(self, legacy):
        result = legacy.get(42, "hero.mobile")
        assert result["desktop"]["width"] == 768
        assert result["mobile"] == ""

    def test_missing_viewport_is_empty_string(self, legacy):
        legacy.config({"image-sizes": {"banner": {"desktop": {"w": 1200}}}})
        result = legacy.get(42, "banner")
        assert result["desktop"]["width"] == 1200
        assert "height" not in result["desktop"]
        assert result["mobile"] == ""
        assert result["tablet"] == ""

    def test_missing_size_is_all_empty(self, legacy):
        assert legacy.get(42, "poster") == {"desktop": "", "mobile": "", "tablet": ""}

    def test_explicit_size_mapping(self, legacy):
        result = legacy.get(42, {"desktop": {"w": 10}, "mobile": {"w": 5}})
        assert result["desktop"]["width"] == 10
        assert result["mobile"]["width"] == 5
        assert result["tablet"] == ""

    def test_unresolvable_image(self, legacy):
        assert legacy.get(999, "thumbnail") == {"desktop": "", "mobile": "", "tablet": ""}


class TestGetImage:
    def test_default_params(self, legacy):
        record = legacy.get_image(42)
        assert record["url"] == "https://site/img/x.jpg?w=500&h=500&fit=crop"
        assert record["width"] == 500
        assert record["height"] == 500

    def test_get_images_specs(self, legacy):
        result = legacy.get_images({"id": 42, "params": {"w": 100}}, {"image": 9, "params": {"w": 50}})
        assert result["desktop"]["url"] == "https://site/img/x.jpg?w=100"
        assert result["mobile"]["url"] == "https://site/img/mob.jpg?w=50"
        assert result["tablet"] == ""

    def test_get_images_bare_reference(self, legacy):
        result = legacy.get_images("https://site/uploads/x.jpg")
        assert result["desktop"]["url"] == "https://site/img/x.jpg"
        assert "width" not in result["desktop"]

    def test_url_for_size(self, legacy):
        assert legacy.get_image_url_for_size(42, "thumbnail") == "https://site/img/x.jpg?w=300&h=300&fit=crop"
        assert legacy.get_image_url_for_size({"id": 42}, "hero.mobile") == "https://site/img/x.jpg?w=768&h=432&fit=crop"
        assert legacy.get_image_url_for_size(42, "poster") == "https://site/img/x.jpg"

    def test_glide_url_alias(self, legacy):
        assert legacy.get_glide_image_url(42, {"w": 1}) == "https://site/img/x.jpg?w=1"


class TestForwarding:
    def test_modern_operations_are_forwarded(self, legacy):
        assert legacy.get_url(42, {"w": 1}) == "https://site/img/x.jpg?w=1"
        assert legacy.create_image_tag(42).startswith("<img")

    def test_unknown_operation_fails(self, legacy):
        with pytest.raises(UnsupportedOperationError, match="does_not_exist"):
            legacy.does_not_exist(1)
        assert not hasattr(legacy, "nope")

    def test_call_by_name(self, legacy):
        assert legacy.call("get", 42, "thumbnail") == legacy.get(42, "thumbnail")
        assert legacy.call("get_url", 42) == "https://site/img/x.jpg"
        with pytest.raises(UnsupportedOperationError):
            legacy.call("explode")

    def test_config_passes_settings_through(self, legacy):
        legacy.config({"source": "https://cdn.site/media"})
        assert legacy.get_url("https://cdn.site/media/a.jpg") == "https://site/img/a.jpg"
