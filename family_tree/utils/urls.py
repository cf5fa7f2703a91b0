def absolute_media_url(path: str | None, base_url: str) -> str | None:
    if not path:
        return None

    # already absolute → leave it
    if path.startswith("http://") or path.startswith("https://"):
        return path

    return f"{base_url.rstrip('/')}{path}"
