"""HTML path-prefix rewriting for proxy (X-Forwarded-Prefix). No app imports to avoid circular deps."""


def inject_forwarded_prefix_into_html(html: str, path_prefix: str) -> str:
    """Rewrite relative form/nav URLs to absolute ones under path_prefix.

    Use when X-Forwarded-Prefix is set (e.g. /s) and the proxy strips it.
    Prefix should be normalized (leading slash, no trailing).
    """
    if not path_prefix:
        return html
    html = html.replace('action="create"', f'action="{path_prefix}/create"')
    html = html.replace('href=".."', f'href="{path_prefix}/"')
    return html
