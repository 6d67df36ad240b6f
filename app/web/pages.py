from html import escape

from fastapi.responses import HTMLResponse

from app.oauth.registry import OAuthProviderRegistry
from app.oauth.types import OAuthUserInfo


def _layout(title: str, body: str) -> str:
    return (
        "<!doctype html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{escape(title)}</title>"
        "</head><body>"
        f"<main>{body}</main>"
        "</body></html>"
    )


def _user_details(user: OAuthUserInfo) -> str:
    rows = [
        ("Provider", user.provider),
        ("UID", user.uid),
        ("Name", user.name),
        ("Nickname", user.nickname),
        ("Email", user.email),
    ]
    items = "".join(
        f"<dt>{label}</dt><dd>{escape(value)}</dd>"
        for label, value in rows
        if value
    )
    avatar = (
        f'<img src="{escape(user.image)}" alt="avatar" width="64" height="64">'
        if user.image
        else ""
    )
    return f"{avatar}<dl>{items}</dl>"


def render_home_page(
    registry: OAuthProviderRegistry, user: OAuthUserInfo | None
) -> HTMLResponse:
    if user is not None:
        body = (
            "<h1>Signed in</h1>"
            f"{_user_details(user)}"
            '<form method="post" action="/logout">'
            '<button type="submit">Sign out</button></form>'
        )
    else:
        links = "".join(
            f'<li><a href="/auth/{escape(entry.provider_slug)}">'
            f"Sign in with {escape(entry.strategy.display_name)}</a></li>"
            for entry in registry.entries()
        )
        body = f"<h1>Vestibule example</h1><ul>{links}</ul>"
    return HTMLResponse(_layout("Vestibule example", body))


def render_error_page(code: str, message: str, status_code: int = 400) -> HTMLResponse:
    body = (
        "<h1>Sign-in failed</h1>"
        f"<p>{escape(message)}</p>"
        f"<p><code>{escape(code)}</code></p>"
        '<p><a href="/">Back to start</a></p>'
    )
    return HTMLResponse(_layout("Sign-in failed", body), status_code=status_code)
