import pytest

from meli_listing.extraction.images import ImageResolver, canonicalize_image_url, is_absolute_url
from meli_listing.extraction.profiles import FULL_PROFILE

BASE = "https://http2.mlstatic.com/D_NQ_NP_2X_987"


@pytest.mark.parametrize("url, expected", [
    (f"{BASE}-MLA1-I.webp", f"{BASE}-MLA1-O.webp"),
    (f"{BASE}-MLA1-F.webp", f"{BASE}-MLA1-O.webp"),
    (f"{BASE}-MLA1-F-null.jpg", f"{BASE}-MLA1-O.jpg"),
    (f"{BASE}-MLA1-O.webp", f"{BASE}-MLA1-O.webp"),
    (f"{BASE}-MLA1-V.webp", f"{BASE}-MLA1-V.webp"),
])
def test_canonicalize(url, expected):
    assert canonicalize_image_url(url) == expected


def test_canonicalize_is_idempotent():
    for url in (f"{BASE}-MLA1-I.webp", f"{BASE}-MLA1-F.webp", f"{BASE}-MLA1-F-null.jpg"):
        once = canonicalize_image_url(url)
        assert canonicalize_image_url(once) == once


def test_canonicalize_only_touches_filename():
    url = "https://cdn-I.example.com/img-F./photo-I.jpg?v=1"
    assert canonicalize_image_url(url) == "https://cdn-I.example.com/img-F./photo-O.jpg?v=1"


def test_is_absolute_url():
    assert is_absolute_url("https://http2.mlstatic.com/a.jpg")
    assert is_absolute_url("http://http2.mlstatic.com/a.jpg")
    assert not is_absolute_url("/static/a.jpg")
    assert not is_absolute_url("data:image/gif;base64,R0lGOD")
    assert not is_absolute_url("")
    assert not is_absolute_url(None)


def test_collect_dedups_and_keeps_discovery_order(listing_page):
    resolver = ImageResolver(listing_page, FULL_PROFILE.image_selectors, FULL_PROFILE.image_attributes)

    assert resolver.collect() == [
        "https://http2.mlstatic.com/D_NQ_NP_2X_111-MLA2402497778-O.webp",
        "https://http2.mlstatic.com/D_NQ_NP_222-MLA2402497778-O.webp",
    ]


def test_attribute_priority(make_page):
    page = make_page("""
      <figure class="ui-pdp-gallery__figure">
        <img data-zoom="" data-src="https://http2.mlstatic.com/lazy-I.jpg" src="https://http2.mlstatic.com/small-I.jpg">
      </figure>
    """)
    resolver = ImageResolver(page, FULL_PROFILE.image_selectors, FULL_PROFILE.image_attributes)

    assert resolver.collect() == ["https://http2.mlstatic.com/lazy-O.jpg"]


def test_two_groups_same_image_give_one_entry(make_page):
    page = make_page("""
      <figure class="ui-pdp-gallery__figure"><img src="https://http2.mlstatic.com/x-F.jpg"></figure>
      <div class="ui-pdp-image"><img src="https://http2.mlstatic.com/x-I.jpg"></div>
    """)
    resolver = ImageResolver(page, FULL_PROFILE.image_selectors, FULL_PROFILE.image_attributes)

    assert resolver.collect() == ["https://http2.mlstatic.com/x-O.jpg"]


def test_no_images(make_page):
    resolver = ImageResolver(make_page("<p>sin fotos</p>"), FULL_PROFILE.image_selectors,
                             FULL_PROFILE.image_attributes)
    assert resolver.collect() == []
