"""
Travel Crew Backend — Cloudinary Asset Store
==============================================

What:  AssetStore implementation backed by the Cloudinary Python SDK.
How:   cloudinary.uploader.upload / destroy and cloudinary.api.ping, run in
       a worker thread with asyncio.to_thread since the SDK is blocking.
       Images travel as base64 data URIs (data:<mime>;base64,<payload>),
       with the kind's folder as the Cloudinary folder. Credentials are
       passed on every call instead of through the global cloudinary.config.

Resilience:
    The SDK raises GeneralError when the request never got an answer
    (connection refused, DNS, timeouts). Those are retried by tenacity with
    exponential backoff and jitter. Any other cloudinary Error (bad
    credentials, invalid image, quota) is final and becomes AssetStoreError
    straight away.
"""

import asyncio
import base64
import logging
import time
from typing import Any, Callable, Dict

import cloudinary
import cloudinary.api
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.exceptions import GeneralError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from travelcrew.exceptions import AssetStoreError
from travelcrew.services.asset_base import AssetStore, DestroyResult, UploadedAsset

logger = logging.getLogger(__name__)


def to_data_uri(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


class CloudinaryAssetStore(AssetStore):
    """
    Cloudinary-hosted images.

    One instance is created at startup and shared by every request.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
        retry_max_attempts: int = 3,
        retry_min_wait: float = 1,
        retry_max_wait: float = 8,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.retry_max_attempts = retry_max_attempts
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait
        self._options = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "timeout": timeout,
        }

        logger.info(
            "CloudinaryAssetStore initialized for cloud=%s (retries=%d)",
            cloud_name,
            retry_max_attempts,
        )

    @classmethod
    def from_settings(cls, settings) -> "CloudinaryAssetStore":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            timeout=settings.cloudinary_timeout,
            retry_max_attempts=settings.retry_max_attempts,
            retry_min_wait=settings.retry_min_wait,
            retry_max_wait=settings.retry_max_wait,
        )

    async def _call(self, func: Callable[..., Dict[str, Any]], *args, **kwargs) -> Dict[str, Any]:
        """Run a blocking SDK call off the event loop, retrying GeneralError only."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(GeneralError),
            stop=stop_after_attempt(self.retry_max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry_min_wait,
                max=self.retry_max_wait,
                jitter=1,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(asyncio.to_thread, func, *args, **kwargs, **self._options)

    async def upload(self, content: bytes, mime_type: str, folder: str) -> UploadedAsset:
        """
        Upload an image into `folder`.

        Returns:
            UploadedAsset(url=secure_url, asset_id=public_id)

        Raises:
            AssetStoreError when the request cannot be delivered after all
            retries, or Cloudinary answers with an error.
        """
        start_time = time.time()

        try:
            payload = await self._call(
                cloudinary.uploader.upload,
                to_data_uri(content, mime_type),
                folder=folder,
            )
        except GeneralError as e:
            logger.error("Cloudinary upload to folder=%s failed: %s", folder, str(e))
            raise AssetStoreError(
                message="Image host is unreachable. Please try again later.",
                context={"folder": folder, "error_type": type(e).__name__},
            )
        except CloudinaryError as e:
            logger.error("Cloudinary rejected upload to folder=%s: %s", folder, str(e))
            raise AssetStoreError(
                message=f"Image upload failed: {e}",
                context={"folder": folder, "error_type": type(e).__name__},
            )

        try:
            asset = UploadedAsset(url=payload["secure_url"], asset_id=payload["public_id"])
        except KeyError as e:
            raise AssetStoreError(
                message="Image host returned an incomplete response",
                context={"folder": folder, "missing": str(e)},
            )

        logger.info(
            "Uploaded %d bytes to %s as %s in %.0fms",
            len(content),
            folder,
            asset.asset_id,
            (time.time() - start_time) * 1000,
        )
        return asset

    async def destroy(self, asset_id: str) -> DestroyResult:
        """
        Ask Cloudinary to delete an image.

        Any failure, including exhausted retries, is reported in the result
        instead of raised.
        """
        try:
            payload = await self._call(cloudinary.uploader.destroy, asset_id)
        except Exception as e:
            return DestroyResult(asset_id=asset_id, released=False, detail=str(e))

        result = payload.get("result")
        if result != "ok":
            return DestroyResult(asset_id=asset_id, released=False, detail=str(result))

        logger.info("Destroyed asset %s", asset_id)
        return DestroyResult(asset_id=asset_id, released=True)

    async def health_check(self) -> bool:
        """Calls the Admin API ping endpoint."""
        try:
            response = await asyncio.to_thread(cloudinary.api.ping, **self._options)
            return response.get("status") == "ok"
        except CloudinaryError as e:
            logger.warning("Cloudinary health check failed: %s", str(e))
            return False
