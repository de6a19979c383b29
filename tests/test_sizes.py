import json
import logging

from srcsetter.config.sizes import SingleSize, SizeResolver, ViewportSizes, parse_size_config
from srcsetter.config.store import DictConfigStore, JsonConfigStore


class TestBuiltInSizes:
    def test_thumbnail_preset(self):
        config = SizeResolver().resolve("thumbnail")
        assert isinstance(config, ViewportSizes)
        assert config.desktop == {"w": 300, "h": 300, "fit": "crop"}
        assert config.mobile == {"w": 150, "h": 150, "fit": "crop"}
        assert config.tablet == {"w": 225, "h": 225, "fit": "crop"}

    def test_four_presets_available(self):
        assert SizeResolver().names() == ["hero", "large", "medium", "thumbnail"]

    def test_dotted_key_indexes_viewport(self):
        resolver = SizeResolver()
        assert resolver.resolve("hero.mobile") == SingleSize(resolver.resolve("hero").mobile)
        assert resolver.resolve("hero.mobile").params == {"w": 768, "h": 432, "fit": "crop"}


class TestMissingSizes:
    def test_unknown_key_logs_and_returns_empty(self, caplog):
        with caplog.at_level(logging.WARNING, logger="srcsetter.config.sizes"):
            config = SizeResolver().resolve("poster")
        assert config.is_empty
        assert config == SingleSize()
        assert "poster" in caplog.text

    def test_unknown_nested_viewport_is_empty(self, caplog):
        with caplog.at_level(logging.WARNING, logger="srcsetter.config.sizes"):
            assert SizeResolver().resolve("hero.watch").is_empty
            assert SizeResolver().resolve("nothing.mobile").is_empty
        assert "hero.watch" in caplog.text


class TestShapes:
    def test_mapping_without_desktop_is_single(self):
        config = parse_size_config({"w": 400, "h": 300})
        assert config == SingleSize({"w": 400, "h": 300})

    def test_mapping_with_desktop_is_per_viewport(self):
        config = parse_size_config({"desktop": {"w": 1200}, "mobile": {"w": 600}})
        assert isinstance(config, ViewportSizes)
        assert config.tablet is None
        assert config.for_viewport("tablet") == {}
        assert config.for_viewport("mobile") == {"w": 600}

    def test_grouped_single_sizes_stay_single(self):
        resolver = SizeResolver(sizes={"cards": {"small": {"w": 100}, "large": {"w": 200}}})
        assert isinstance(resolver.resolve("cards"), SingleSize)
        assert resolver.resolve("cards.small") == SingleSize({"w": 100})

    def test_dotted_lookup_bypasses_shape_detection(self):
        resolver = SizeResolver(sizes={"promo": {"wide": {"desktop": {"w": 10}}}})
        assert resolver.resolve("promo.wide") == SingleSize({"desktop": {"w": 10}})

    def test_explicit_mapping_is_parsed(self):
        config = SizeResolver().resolve({"desktop": {"w": 10}})
        assert isinstance(config, ViewportSizes)


class TestMerging:
    def test_config_store_merges_into_defaults(self):
        store = DictConfigStore({"image-sizes": {"banner": {"desktop": {"w": 1600}, "mobile": {"w": 800}}}})
        resolver = SizeResolver(store)
        assert resolver.resolve("banner").desktop == {"w": 1600}
        assert resolver.resolve("thumbnail").desktop["w"] == 300

    def test_merge_last_writer_wins(self):
        resolver = SizeResolver()
        before = resolver.table
        resolver.merge({"thumbnail": {"w": 64, "h": 64}})
        assert resolver.resolve("thumbnail") == SingleSize({"w": 64, "h": 64})
        assert resolver.resolve("medium").desktop["w"] == 600
        # Earlier snapshots are never mutated.
        assert isinstance(before["thumbnail"], ViewportSizes)

    def test_json_config_store(self, tmp_path):
        path = tmp_path / "sizes.json"
        path.write_text(json.dumps({"image-sizes": {"avatar": {"w": 48, "h": 48, "fit": "crop"}}}))
        resolver = SizeResolver(JsonConfigStore(str(path)))
        assert resolver.resolve("avatar").params == {"w": 48, "h": 48, "fit": "crop"}

    def test_missing_json_file_falls_back_to_defaults(self, tmp_path):
        resolver = SizeResolver(JsonConfigStore(str(tmp_path / "absent.json")))
        assert resolver.names() == ["hero", "large", "medium", "thumbnail"]
