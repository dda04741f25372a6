"""HTML wrapper for transactional emails."""

EMAIL_STYLE = (
    "border: 1px solid black; padding: 20px; font-family: sans-serif; "
    "line-height: 2; font-size: 20px;"
)


def make_nice_email(text: str) -> str:
    """Wrap an HTML fragment in the site's email shell.

    ``text`` is inserted as-is so it may carry links.
    """
    return (
        f'<div class="email" style="{EMAIL_STYLE}">'
        "<h2>Hello There!</h2>"
        f"<p>{text}</p>"
        "<p>The Qanda Team</p>"
        "</div>"
    )
