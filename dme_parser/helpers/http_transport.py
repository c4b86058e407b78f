import asyncio

import aiohttp

from dme_parser.commons.logger import logger

JSON_CONTENT_TYPE = "application/json"


class HttpSender:
    """POST de la orden serializada al API externo. Sin reintentos."""

    def __init__(self, endpoint: str, timeout: float = 10.0):
        self.endpoint = endpoint
        self.timeout = timeout

    async def post_json(self, body: str, url: str | None = None) -> bool:
        url = url or self.endpoint
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    url, data=body.encode("utf-8"), headers={"Content-Type": JSON_CONTENT_TYPE}
                ) as resp:
                    if 200 <= resp.status < 300:
                        logger.info(f"Orden enviada a {url} ({resp.status})")
                        return True
                    text = await resp.text()
                    logger.error(f"{url} respondió {resp.status}: {text[:200]}")
                    return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as ex:
            logger.error(f"Error enviando la orden a {url}: {ex!r}")
            return False
