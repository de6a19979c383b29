from __future__ import annotations

import pytest

from srcsetter.config.settings import ImagesSettings
from srcsetter.media.store import MediaItem, StaticMediaStore
from srcsetter.service import Images


@pytest.fixture
def settings():
    return ImagesSettings(
        base_path="img",
        public_base="https://site",
        source_root="https://site/uploads",
        cache_dir="/tmp/cache",
    )


@pytest.fixture
def media_store():
    return StaticMediaStore({
        42: MediaItem("https://site/uploads/x.jpg", width=1000, height=800, alt="A cat"),
        7: MediaItem("https://site/uploads/2024/05/logo.svg", alt="Logo"),
        8: MediaItem("https://site/uploads/desk.jpg", width=2400, height=1200),
        9: MediaItem("https://site/uploads/mob.jpg", width=800, height=1200, alt="Mobile alt"),
    })


@pytest.fixture
def images(settings, media_store):
    return Images(settings=settings, media_store=media_store)
