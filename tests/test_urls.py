from srcsetter.images.urls import UrlBuilder, build_query, is_vector_url


def make_builder(settings, media_store):
    return UrlBuilder(settings, media_store)


def test_media_id_builds_transformation_url(settings, media_store):
    builder = make_builder(settings, media_store)
    assert builder.build_url(42, {"w": 300}) == "https://site/img/x.jpg?w=300"


def test_literal_url_is_used_verbatim(settings, media_store):
    builder = make_builder(settings, media_store)
    url = builder.build_url("https://site/uploads/2024/05/photo.png", {"w": 640, "fm": "webp"})
    assert url == "https://site/img/2024/05/photo.png?w=640&fm=webp"


def test_svg_is_returned_unchanged(settings, media_store):
    builder = make_builder(settings, media_store)
    assert builder.build_url(7, {"w": 300, "fm": "webp"}) == "https://site/uploads/2024/05/logo.svg"
    assert builder.build_url("https://site/uploads/a.SVG?v=2", {"w": 1}) == "https://site/uploads/a.SVG?v=2"


def test_unresolvable_references_yield_empty_string(settings, media_store):
    builder = make_builder(settings, media_store)
    assert builder.build_url(999, {"w": 300}) == ""
    assert builder.build_url(None, {"w": 300}) == ""
    assert builder.build_url("", {"w": 300}) == ""
    assert builder.build_url(True, {"w": 300}) == ""


def test_query_preserves_insertion_order(settings, media_store):
    builder = make_builder(settings, media_store)
    first = builder.build_url(42, {"w": 300, "h": 200, "fit": "crop"})
    assert first == "https://site/img/x.jpg?w=300&h=200&fit=crop"
    assert builder.build_url(42, {"w": 300, "h": 200, "fit": "crop"}) == first
    assert builder.build_url(42, {"fit": "crop", "w": 300, "h": 200}) != first


def test_empty_params_have_no_query(settings, media_store):
    builder = make_builder(settings, media_store)
    assert builder.build_url(42) == "https://site/img/x.jpg"


def test_url_outside_source_root_uses_its_path(settings, media_store):
    builder = make_builder(settings, media_store)
    assert builder.build_url("https://cdn.other/foo/bar.png", {"w": 1}) == "https://site/img/foo/bar.png?w=1"
    assert builder.relative_path("https://site/uploads2/a.jpg") == "/uploads2/a.jpg"


def test_booleans_serialize_as_integers():
    assert build_query({"crop": True, "flip": False}) == "crop=1&flip=0"


def test_unknown_keys_pass_through():
    assert build_query({"blur": 5, "custom-key": "x y"}) == "blur=5&custom-key=x+y"


def test_is_vector_url():
    assert is_vector_url("https://site/a/b.svg")
    assert not is_vector_url("https://site/a/svg.png")
