import re
from urllib.parse import quote, urlparse

ALLOWED_IFRAME_HOSTS = (
    "youtube.com",
    "youtube-nocookie.com",
    "youtu.be",
    "facebook.com",
    "fb.watch",
    "vimeo.com",
    "dailymotion.com",
)

_YOUTUBE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})"
)
_FB_REEL = re.compile(r"facebook\.com/(?:reel|reels)/(\d+)", re.IGNORECASE)
_FB_VIDEO = re.compile(r"facebook\.com/(?:watch/\?v=|videos/)(\d+)", re.IGNORECASE)
_IFRAME_SRC = re.compile(r"src\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)


def normalize_external_url(raw: str) -> str:
    raw = (raw or "").strip()
    if not raw:
        return ""
    if re.match(r"^https?://", raw, re.IGNORECASE):
        return raw
    if raw.startswith("//"):
        return f"https:{raw}"
    return f"https://{raw}"


def iframe_src(raw: str):
    """
    Extract the src of a pasted <iframe> snippet from a known video host.
    Returns None for anything else.
    """
    raw = (raw or "").strip()
    if not re.match(r"^<iframe\s", raw, re.IGNORECASE):
        return None

    match = _IFRAME_SRC.search(raw)
    if not match:
        return None

    src = match.group(1)
    host = urlparse(normalize_external_url(src)).hostname or ""
    if not any(allowed in host for allowed in ALLOWED_IFRAME_HOSTS):
        return None
    return src


def get_embed_url(raw: str) -> str:
    url = normalize_external_url(raw)
    if not url:
        return ""

    yt = _YOUTUBE.search(url)
    if yt:
        return f"https://www.youtube.com/embed/{yt.group(1)}?rel=0"

    if "facebook.com" in url or "fb.watch" in url:
        if "facebook.com/plugins/video.php" in url:
            return url
        reel = _FB_REEL.search(url) or _FB_VIDEO.search(url)
        canonical = f"https://www.facebook.com/watch/?v={reel.group(1)}" if reel else url
        return (
            "https://www.facebook.com/plugins/video.php?href="
            f"{quote(canonical, safe='')}&show_text=false&lazy=true"
        )

    return url
