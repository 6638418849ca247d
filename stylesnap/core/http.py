import httpx


def make_httpx_client(timeout: httpx.Timeout, proxy_url: str = "") -> httpx.AsyncClient:
    if not proxy_url:
        return httpx.AsyncClient(timeout=timeout, trust_env=False, follow_redirects=True)
    return httpx.AsyncClient(timeout=timeout, trust_env=False, follow_redirects=True, proxy=proxy_url)


def generation_timeout() -> httpx.Timeout:
    return httpx.Timeout(connect=30.0, read=300.0, write=60.0, pool=60.0)


def fetch_timeout() -> httpx.Timeout:
    return httpx.Timeout(connect=10.0, read=30.0, write=30.0, pool=30.0)
