import asyncio
import logging

import aiohttp

from .models import ExchangeResult, Failure, FailureReason, Success, WorkUnit
from .template import RequestTemplate
from .utils import decode_body, elapsed_ms, now, truncate

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class RequestExecutor:
    """Runs one HTTP exchange per call against a fixed template.

    One executor belongs to one worker; its body buffer is cleared, not
    reallocated, between requests.
    """

    def __init__(self, session: aiohttp.ClientSession, template: RequestTemplate) -> None:
        self.session = session
        self.template = template
        self._buf = bytearray()

    async def execute(self, unit: WorkUnit) -> ExchangeResult:
        t = self.template
        start = now()
        try:
            async with self.session.request(
                t.method, t.url, headers=t.headers, data=t.body
            ) as resp:
                if not 200 <= resp.status < 300:
                    detail = (
                        f"HTTP status {resp.status} {resp.reason or ''}".rstrip()
                        + f" for url ({resp.url})"
                    )
                    return Failure(
                        unit,
                        elapsed_ms(start),
                        FailureReason("status", detail, resp.status),
                    )

                if resp.content_length == 0:
                    return Success(unit, resp.status, elapsed_ms(start))

                self._buf.clear()
                async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                    self._buf.extend(chunk)
                latency = elapsed_ms(start)
                return Success(
                    unit,
                    resp.status,
                    latency,
                    decode_body(self._buf, resp.charset or "utf-8"),
                )
        except asyncio.TimeoutError:
            return Failure(
                unit,
                elapsed_ms(start),
                FailureReason("transport", f"request to {t.url} timed out"),
            )
        except aiohttp.ClientError as e:
            return Failure(
                unit,
                elapsed_ms(start),
                FailureReason("transport", f"{type(e).__name__}: {e}"),
            )


def log_result(result: ExchangeResult, total: int, preview_limit: int = 200) -> None:
    prefix = f"[{result.unit}/{total}]"
    if isinstance(result, Success):
        if result.body:
            logger.info(
                f"{prefix} [{result.status}] in {result.elapsed_ms:.02f}ms: "
                f"{truncate(result.body, preview_limit)}"
            )
        else:
            logger.info(f"{prefix} [{result.status}] in {result.elapsed_ms:.02f}ms")
        return

    status = result.reason.status if result.reason.status is not None else "N/A"
    logger.error(f"{prefix} [{status}] in {result.elapsed_ms:.02f}ms: {result.reason}")
