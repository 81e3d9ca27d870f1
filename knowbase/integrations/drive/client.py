"""Google Drive v3 REST client authenticated as a service account."""

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Any

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from knowbase.integrations.drive.config import DriveSettings, get_drive_settings
from knowbase.integrations.drive.exceptions import DriveConfigurationError, DriveError
from knowbase.integrations.drive.schemas import CopyTemplateResponse
from knowbase.utils.logger import logger

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
COPY_SUFFIX = "（コピー）"
DEFAULT_DOWNLOAD_NAME = "download"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
DOWNLOAD_HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "*/*"}

_CONFIRM_TOKEN = re.compile(r"confirm=([0-9A-Za-z_-]+)")
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')

_EXTENSIONS_BY_TYPE = [
    ("pdf", ".pdf"),
    ("msword", ".doc"),
    ("officedocument.wordprocessingml", ".docx"),
    ("officedocument.spreadsheetml", ".xlsx"),
    ("officedocument.presentationml", ".pptx"),
    ("powerpoint", ".ppt"),
    ("zip", ".zip"),
    ("mp4", ".mp4"),
    ("mpeg", ".mpg"),
    ("png", ".png"),
    ("jpeg", ".jpg"),
]


def safe_filename(name: str | None) -> str:
    """Replace characters that are not allowed in file names."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name or "").strip() or DEFAULT_DOWNLOAD_NAME


def guess_extension(content_type: str) -> str:
    """File extension for a content type, or "" when unknown."""
    lowered = content_type.lower()
    for fragment, extension in _EXTENSIONS_BY_TYPE:
        if fragment in lowered:
            return extension
    return ""


def download_filename(name: str | None, content_type: str) -> str:
    """Safe attachment name, with an extension added from the content type."""
    base = safe_filename(name)
    extension = guess_extension(content_type)
    return base if base.endswith(extension) else f"{base}{extension}"


@dataclass(frozen=True)
class DownloadedFile:
    """A downloaded file body with its content type."""

    content: bytes
    content_type: str


def load_service_account_info(raw: str | None) -> dict[str, Any]:
    """
    Parse service account JSON, restoring escaped newlines in the private key.

    Raises:
        DriveConfigurationError: If the JSON is missing or incomplete
    """
    if not raw:
        raise DriveConfigurationError("DRIVE_SERVICE_ACCOUNT_JSON is not configured")
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DriveConfigurationError(f"Invalid service account JSON: {e}") from e

    if isinstance(info.get("private_key"), str):
        info["private_key"] = info["private_key"].replace("\\n", "\n")
    if not info.get("client_email") or not info.get("private_key"):
        raise DriveConfigurationError(
            "Service account JSON is missing client_email or private_key"
        )
    return info


class DriveClient:
    """Async client for the Drive files API."""

    def __init__(
        self,
        settings: DriveSettings | None = None,
        credentials: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Drive client.

        Args:
            settings: Drive settings (global settings when None)
            credentials: google-auth credentials (built from settings when None)
            transport: Optional httpx transport (tests)
        """
        self.settings = settings or get_drive_settings()
        self._credentials = credentials
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _access_token(self) -> str:
        if self._credentials is None:
            info = load_service_account_info(self.settings.service_account_json)
            self._credentials = service_account.Credentials.from_service_account_info(
                info, scopes=DRIVE_SCOPES
            )
        if not self._credentials.valid:
            try:
                await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
            except GoogleAuthError as e:
                logger.error("[DriveClient] Token refresh failed", error=str(e))
                raise DriveError(
                    f"Failed to obtain Drive access token: {e}",
                    status_code=500,
                    original_error=e,
                ) from e
        return self._credentials.token

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        client = await self._ensure_client()
        token = await self._access_token()
        try:
            response = await client.request(
                method,
                path,
                params={"supportsAllDrives": "true", **(params or {})},
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.RequestError as e:
            logger.error("[DriveClient] Request failed", path=path, error=str(e))
            raise DriveError(f"Drive request failed: {e}", original_error=e) from e

        if response.status_code >= 400:
            try:
                details: Any = response.json()
            except ValueError:
                details = response.text
            logger.error(
                "[DriveClient] Drive API error",
                path=path,
                status_code=response.status_code,
            )
            raise DriveError(
                f"Drive API error ({response.status_code})",
                status_code=response.status_code,
                details=details,
            )
        return response.json() if response.content else {}

    async def copy_template(self, title: str) -> CopyTemplateResponse:
        """
        Copy the template document as "<title>（コピー）".

        Returns:
            CopyTemplateResponse: New file id and its edit URL

        Raises:
            DriveConfigurationError: If no template is configured
            DriveError: If the template is not accessible or the copy fails
        """
        template_id = self.settings.template_file_id
        if not template_id:
            raise DriveConfigurationError("DRIVE_TEMPLATE_FILE_ID is not configured")

        await self._request("GET", f"/files/{template_id}", params={"fields": "id,name"})

        body: dict[str, Any] = {"name": f"{title}{COPY_SUFFIX}"}
        if self.settings.copy_parent_folder_id:
            body["parents"] = [self.settings.copy_parent_folder_id]
        copied = await self._request(
            "POST",
            f"/files/{template_id}/copy",
            params={"fields": "id,webViewLink"},
            body=body,
        )

        file_id = copied.get("id")
        if not file_id:
            raise DriveError("Copy did not return a file id", status_code=502)
        logger.info("[DriveClient] Template copied", file_id=file_id)
        return CopyTemplateResponse(file_id=file_id, edit_url=copied.get("webViewLink"))

    async def trash_file(self, file_id: str) -> None:
        """Move a file to the trash."""
        await self._request("PATCH", f"/files/{file_id}", body={"trashed": True})
        logger.info("[DriveClient] File trashed", file_id=file_id)

    async def _fetch(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        client = await self._ensure_client()
        try:
            return await client.get(
                url, params=params, headers=DOWNLOAD_HEADERS, follow_redirects=True
            )
        except httpx.RequestError as e:
            logger.error("[DriveClient] Download request failed", url=url, error=str(e))
            raise DriveError(f"Download request failed: {e}", original_error=e) from e

    async def download_shared_file(self, file_id: str) -> DownloadedFile:
        """
        Download a link-shared Drive file.

        Large files answer the first request with an HTML warning page; the
        confirm token on that page is sent back on a second request.

        Raises:
            DriveError: If the file is not shared or no file body is returned
        """
        params = {"export": "download", "id": file_id}
        response = await self._fetch(self.settings.download_url, params)
        content_type = response.headers.get("content-type", "")
        if response.is_success and "text/html" not in content_type:
            return DownloadedFile(response.content, content_type or DEFAULT_CONTENT_TYPE)

        match = _CONFIRM_TOKEN.search(response.text)
        if not match:
            logger.warning("[DriveClient] No confirm token in download page", file_id=file_id)
            raise DriveError(
                "Google Drive Error: the file is not shared with anyone who has the "
                "link, or the download confirmation token could not be read.",
                status_code=500,
            )

        response = await self._fetch(
            self.settings.download_url, {**params, "confirm": match.group(1)}
        )
        content_type = response.headers.get("content-type", "")
        if not response.is_success or "text/html" in content_type:
            raise DriveError(
                "Google Drive Error: the download failed (sharing settings, "
                "restrictions or file type).",
                status_code=500,
            )
        logger.info("[DriveClient] File downloaded after confirmation", file_id=file_id)
        return DownloadedFile(response.content, content_type or DEFAULT_CONTENT_TYPE)

    async def download_external(self, url: str) -> DownloadedFile:
        """
        Download a file from an external link.

        Raises:
            DriveError: 403 if the link does not return a file
        """
        response = await self._fetch(url)
        content_type = response.headers.get("content-type", "")
        if not response.is_success or "text/html" in content_type:
            raise DriveError("External Link Error", status_code=403)
        return DownloadedFile(response.content, content_type or DEFAULT_CONTENT_TYPE)


_drive_client: DriveClient | None = None


def get_drive_client() -> DriveClient:
    """Get or create the Drive client singleton."""
    global _drive_client
    if _drive_client is None:
        _drive_client = DriveClient()
    return _drive_client
