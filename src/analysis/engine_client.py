"""HTTP client for the external analysis engine."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from exceptions import UpstreamFailureError
from settings import settings
from utils.logging import logger
from workflow.models import AnalysisOption


class AnalysisResponse(BaseModel):
    """Validated engine answer. Image entries are still raw ``[payload, category(, filterNumber)]`` lists."""

    images: List[List[Any]] = Field(default_factory=list)
    cleaned_csv: Optional[str] = None


class AnalysisEngineClient:
    """Calls the engine once per request with a hard deadline. Nothing is retried."""

    ANALYZE_PATH: str = "/analyze-data"
    CLEAN_PATH: str = "/clean-data"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.analysis_engine_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.analysis_timeout_seconds
        self.transport = transport

    async def run(self, option: AnalysisOption, source_url: str, domain_type: Optional[str]) -> AnalysisResponse:
        if option is AnalysisOption.CLEAN_AND_GENERATE:
            path = self.ANALYZE_PATH
            payload = {"cloudinary_url": source_url, "domainType": domain_type}
        else:
            path = self.CLEAN_PATH
            payload = {"cloudinary_url": source_url}

        logger.info(f"Calling analysis engine {path} for {source_url}")
        try:
            # Per-operation httpx timeouts restart on every chunk, so bound the whole exchange
            response = await asyncio.wait_for(self._post(path, payload), timeout=self.timeout_seconds)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.error(f"Analysis engine timed out after {self.timeout_seconds}s")
            raise UpstreamFailureError(f"Analysis engine timed out after {self.timeout_seconds} seconds")
        except httpx.HTTPStatusError as e:
            logger.error(f"Analysis engine returned status {e.response.status_code}")
            raise UpstreamFailureError(f"Analysis engine returned status {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Analysis engine request failed: {str(e)}")
            raise UpstreamFailureError(f"Analysis engine request failed: {str(e)}")

        return self._parse(response, option)

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout_seconds),
            transport=self.transport,
        ) as client:
            response = await client.post(path, json=payload)
            response.raise_for_status()
            return response

    @staticmethod
    def _parse(response: httpx.Response, option: AnalysisOption) -> AnalysisResponse:
        try:
            body = response.json()
        except ValueError:
            raise UpstreamFailureError("Analysis engine returned a non-JSON response")

        if not isinstance(body, dict):
            raise UpstreamFailureError("Analysis engine response must be a JSON object")

        cleaned_csv = body.get("cleaned_csv")
        if cleaned_csv is not None and not isinstance(cleaned_csv, str):
            raise UpstreamFailureError("Analysis engine returned an invalid cleaned_csv")

        if option is AnalysisOption.CLEAN_ONLY:
            if not cleaned_csv:
                raise UpstreamFailureError("Analysis engine response is missing cleaned_csv")
            return AnalysisResponse(cleaned_csv=cleaned_csv)

        images = body.get("images")
        if not isinstance(images, list):
            raise UpstreamFailureError("Analysis engine response is missing images")

        for index, entry in enumerate(images):
            if not isinstance(entry, list) or len(entry) not in (2, 3) or not isinstance(entry[1], str):
                raise UpstreamFailureError(f"Analysis engine returned a malformed image entry at position {index}")

        logger.info(f"Analysis engine returned {len(images)} artifacts")
        return AnalysisResponse(images=images, cleaned_csv=cleaned_csv)
