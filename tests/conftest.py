import pytest
import requests

ARTICLE_URL = "https://www.archdaily.com/1002775/casa-example-studio"
SLIDESHOW_URL = "https://www.archdaily.com/1002775/0/6492388b5921185aa0184e61"
NONCE = "6492388b5921185aa0184e61"

ARTICLE_HTML = """<html><head><style>
  #newsroom-picture-att-id-6492388b5921185aa0184e61 { display: none; }
</style></head><body>Casa Example</body></html>
"""

SLIDESHOW_HTML = """<!doctype html>
<html>
<head><title>Gallery of Casa Example / Studio - 3</title></head>
<body>
<div class="gallery"
  data-images="[{&quot;url_large&quot;:&quot;http://x/a.jpg&quot;,&quot;url_medium&quot;:&quot;http://x/b.jpg&quot;,&quot;image_alt&quot;:&quot;Alt&quot;,&quot;caption&quot;:&quot;Cap &amp; more&quot;},{&quot;url_large&quot;:&quot;http://x/c.jpg&quot;,&quot;url_medium&quot;:&quot;http://x/d.jpg&quot;,&quot;image_alt&quot;:&quot;Alt 2&quot;,&quot;caption&quot;:&quot;Caf&#233;&quot;}]"
  data-other="1">
</div>
</body>
</html>
"""


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Serves canned pages by URL and records every request."""

    def __init__(self, pages: dict | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []

    def get(self, url: str, timeout: float | None = None):
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            return FakeResponse("not found", status_code=404)
        if isinstance(page, Exception):
            raise page
        if isinstance(page, FakeResponse):
            return page
        return FakeResponse(page)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession({ARTICLE_URL: ARTICLE_HTML, SLIDESHOW_URL: SLIDESHOW_HTML})
