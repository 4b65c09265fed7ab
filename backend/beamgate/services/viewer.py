from html import escape

# Browser features the remote desktop may request through the iframe.
IFRAME_PERMISSIONS = (
    "clipboard-read",
    "clipboard-write",
    "fullscreen",
    "microphone",
    "camera",
    "autoplay",
    "display-capture",
)

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
  html, body {{ margin: 0; padding: 0; height: 100%; overflow: hidden; background: #000; }}
  iframe {{ position: fixed; inset: 0; width: 100vw; height: 100vh; border: 0; }}
</style>
</head>
<body>
<iframe src="{embed_url}" allow="{allow}" allowfullscreen></iframe>
</body>
</html>
"""


def render_viewer_page(embed_url: str, session_id: str) -> str:
    """Full-viewport page embedding a Hyperbeam session."""
    return _PAGE.format(
        title=escape(f"Session {session_id}"),
        embed_url=escape(embed_url, quote=True),
        allow="; ".join(IFRAME_PERMISSIONS),
    )
