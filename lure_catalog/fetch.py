from __future__ import annotations
import asyncio
import time
from typing import Any, Dict

import requests
from curl_cffi import requests as curl_requests
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .models import FetchError

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "ja-JP,ja;q=0.9,en-US;q=0.8,en;q=0.7",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

RETRY_STATUS = (429, 500, 502, 503, 504)
IMPERSONATE = ("chrome124", "chrome120")


def _log(prefix: str | None, message: str) -> None:
    print(f"[{prefix or 'fetch'}] {message}", flush=True)


def _decode(resp: requests.Response) -> str:
    # shift_jis pages without a charset header come back as ISO-8859-1
    if (resp.encoding or "").lower() in ("iso-8859-1", "ascii") and resp.apparent_encoding:
        resp.encoding = resp.apparent_encoding
    return resp.text


def _impersonate(url: str, headers: Dict[str, str], timeout: float) -> str:
    for imp in IMPERSONATE:
        try:
            alt = curl_requests.get(url, headers=headers, impersonate=imp, timeout=timeout)
        except Exception as exc:
            _log("fetch", f"curl_cffi {imp} failed for {url}: {exc}")
            continue
        if alt.status_code == 200 and (alt.text or "").strip():
            return alt.text
    return ""


def fetch_html(
    url: str,
    session: requests.Session | None = None,
    timeout: float = 30,
    retries: int = 3,
    backoff: float = 2.0,
    referer: str | None = None,
) -> str:
    """GET a page as text.

    Network errors and 429/5xx are retried with linear backoff. 403/503 get
    one retry with tweaked headers, then Chrome TLS impersonation. Other
    error statuses raise FetchError at once.
    """
    s = session or requests.Session()
    h = dict(HEADERS)
    if referer:
        h["Referer"] = referer
    last = ""
    for attempt in range(1, retries + 1):
        try:
            resp = s.get(url, headers=h, timeout=timeout, allow_redirects=True)
        except requests.RequestException as exc:
            last = str(exc)
            _log("fetch", f"attempt {attempt}/{retries} failed for {url}: {exc}")
        else:
            if resp.status_code in (403, 503):
                h2 = dict(h)
                h2["User-Agent"] = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"
                h2["Cache-Control"] = "no-cache"
                h2.setdefault("Pragma", "no-cache")
                try:
                    resp = s.get(url, headers=h2, timeout=timeout, allow_redirects=True)
                except requests.RequestException as exc:
                    _log("fetch", f"header retry failed for {url}: {exc}")
            if resp.status_code == 403:
                text = _impersonate(url, h, timeout)
                if text:
                    return text
            if resp.ok:
                return _decode(resp)
            if resp.status_code not in RETRY_STATUS and resp.status_code != 403:
                raise FetchError(f"HTTP {resp.status_code}", url, status=resp.status_code)
            last = f"HTTP {resp.status_code}"
            _log("fetch", f"attempt {attempt}/{retries} got {last} for {url}")
        if attempt < retries:
            time.sleep(backoff * attempt)
    raise FetchError(f"unreachable after {retries} attempt(s) ({last})", url)


class _RetryableStatus(Exception):
    pass


class BrowserSession:
    """A Playwright Chromium session driven from synchronous code.

    Navigation is async under the hood; fetch() blocks until the rendered
    HTML is available. Use as a context manager so the browser is always
    closed.
    """

    def __init__(self, headless: bool = True, timeout: float = 30, retries: int = 3,
                 backoff: float = 2.0, settle_ms: int = 1500):
        self.headless = headless
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self.settle_ms = settle_ms
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pw: Any = None
        self._browser: Any = None
        self._context: Any = None

    def __enter__(self) -> "BrowserSession":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def start(self) -> None:
        if self._browser is not None:
            return
        self._loop = asyncio.new_event_loop()
        try:
            self._loop.run_until_complete(self._start())
        except Exception:
            self.close()
            raise
        _log("browser", f"launched chromium (headless={self.headless})")

    async def _start(self) -> None:
        self._pw = await async_playwright().start()
        self._browser = await self._pw.chromium.launch(headless=self.headless)
        self._context = await self._browser.new_context(
            user_agent=HEADERS["User-Agent"],
            locale="ja-JP",
            extra_http_headers={"Accept-Language": HEADERS["Accept-Language"]},
        )

    async def _fetch(self, url: str, wait_selector: str) -> str:
        page = await self._context.new_page()
        try:
            resp = await page.goto(url, wait_until="domcontentloaded", timeout=self.timeout * 1000)
            if resp is not None and resp.status >= 400:
                if resp.status in RETRY_STATUS:
                    raise _RetryableStatus(f"HTTP {resp.status}")
                raise FetchError(f"HTTP {resp.status}", url, status=resp.status)
            if wait_selector:
                try:
                    await page.wait_for_selector(wait_selector, timeout=10000)
                except PlaywrightTimeoutError:
                    _log("browser", f"'{wait_selector}' did not appear on {url}")
            await page.wait_for_timeout(self.settle_ms)
            return await page.content()
        finally:
            await page.close()

    def fetch(self, url: str, wait_selector: str = "") -> str:
        self.start()
        last = ""
        for attempt in range(1, self.retries + 1):
            try:
                return self._loop.run_until_complete(self._fetch(url, wait_selector))
            except (PlaywrightError, _RetryableStatus) as exc:
                last = str(exc).splitlines()[0] if str(exc) else type(exc).__name__
                _log("browser", f"attempt {attempt}/{self.retries} failed for {url}: {last}")
            if attempt < self.retries:
                time.sleep(self.backoff * attempt)
        raise FetchError(f"unreachable after {self.retries} attempt(s) ({last})", url)

    async def _close(self) -> None:
        try:
            if self._context is not None:
                await self._context.close()
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._pw is not None:
                await self._pw.stop()

    def close(self) -> None:
        if self._loop is None:
            return
        try:
            self._loop.run_until_complete(self._close())
        finally:
            self._loop.close()
            self._loop = None
            self._pw = self._browser = self._context = None


class Fetcher:
    """Fetch resources for one source run: a requests session plus lazily
    launched headless / visible browser sessions, all released by close()."""

    def __init__(self, timeout: float = 30, retries: int = 3, backoff: float = 2.0,
                 session: requests.Session | None = None):
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self.session = session or requests.Session()
        self._browsers: Dict[bool, BrowserSession] = {}

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "Fetcher":
        return cls(
            timeout=float(settings.get("fetch_timeout_s", 30)),
            retries=int(settings.get("fetch_retries", 3)),
            backoff=float(settings.get("retry_backoff_s", 2)),
        )

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def browser(self, visible: bool = False) -> BrowserSession:
        bs = self._browsers.get(visible)
        if bs is None:
            bs = BrowserSession(headless=not visible, timeout=self.timeout,
                                retries=self.retries, backoff=self.backoff)
            self._browsers[visible] = bs
        return bs

    def get(self, url: str, browser: bool = False, visible: bool = False,
            wait_selector: str = "", referer: str | None = None) -> str:
        if browser or visible:
            return self.browser(visible).fetch(url, wait_selector)
        return fetch_html(url, self.session, timeout=self.timeout,
                          retries=self.retries, backoff=self.backoff, referer=referer)

    def close(self) -> None:
        browsers = list(self._browsers.values())
        self._browsers.clear()
        try:
            for bs in browsers:
                try:
                    bs.close()
                except Exception as exc:
                    _log("browser", f"close failed: {exc}")
        finally:
            self.session.close()
