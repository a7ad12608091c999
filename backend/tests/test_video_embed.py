"""Tests for video URL normalization."""
from storefront.utils.video_embed import get_embed_url, iframe_src, normalize_external_url


def test_normalize_external_url():
    assert normalize_external_url("") == ""
    assert normalize_external_url("www.facebook.com/x") == "https://www.facebook.com/x"
    assert normalize_external_url("//vimeo.com/1") == "https://vimeo.com/1"
    assert normalize_external_url("http://a.b") == "http://a.b"


def test_youtube_watch_and_short_links():
    expected = "https://www.youtube.com/embed/dQw4w9WgXcQ?rel=0"
    assert get_embed_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == expected
    assert get_embed_url("youtu.be/dQw4w9WgXcQ") == expected


def test_facebook_reel_becomes_plugin_url():
    url = get_embed_url("https://www.facebook.com/reel/1525868642033344")
    assert url.startswith("https://www.facebook.com/plugins/video.php?href=")
    assert "https%3A%2F%2Fwww.facebook.com%2Fwatch%2F%3Fv%3D1525868642033344" in url


def test_plugin_and_other_urls_pass_through():
    plugin = "https://www.facebook.com/plugins/video.php?href=x"
    assert get_embed_url(plugin) == plugin
    assert get_embed_url("https://vimeo.com/76979871") == "https://vimeo.com/76979871"


def test_iframe_snippets_only_from_known_hosts():
    good = '<iframe src="https://player.vimeo.com/video/1" width="640"></iframe>'
    bad = '<iframe src="https://evil.example/video"></iframe>'
    assert iframe_src(good) == "https://player.vimeo.com/video/1"
    assert iframe_src(bad) is None
    assert iframe_src("https://vimeo.com/1") is None
