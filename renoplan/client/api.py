"""
Typed async client for the Renoplan API.

Each entity has its own group of methods (`api.conversations`, `api.projects`,
`api.boms`, `api.vendors`, `api.admin`); the AI and storage functions live on
the client itself.

Usage:
    async with RenoplanAPI(access_token=token) as api:
        conversation = await api.conversations.create(title="Kitchen")
        await api.conversations.add_message(conversation.id, "user", "Hi")
"""

from typing import Any

import httpx

from renoplan.admin.schemas import AdminStatsResponse, AdminUserResponse, RoleChangeResponse
from renoplan.ai.base import ChatMessage
from renoplan.ai.images.schemas import GenerateImageRequest, GenerateImageResponse
from renoplan.bom.schemas import GenerateBOMResponse
from renoplan.client.config import ClientSettings, get_client_settings
from renoplan.client.exceptions import APIClientError
from renoplan.db.boms.schemas import (
    BOMDetailResponse,
    BOMResponse,
    BOMStatsResponse,
    BOMStatus,
    ProductMatchResponse,
    ShoppingListResponse,
)
from renoplan.db.conversations.schemas import ConversationResponse, MessageResponse
from renoplan.db.projects.schemas import (
    ExtractedProjectData,
    ProjectResponse,
    ProjectStatsResponse,
)
from renoplan.db.vendors.schemas import VendorResponse
from renoplan.products.schemas import ProductSearchResponse
from renoplan.storage.router import UploadImageResponse
from renoplan.utils.logger import logger


class _Group:
    def __init__(self, api: "RenoplanAPI"):
        self._api = api


class ConversationsAPI(_Group):
    async def create(
        self, title: str = "New conversation", project_id: str | None = None
    ) -> ConversationResponse:
        data = await self._api.request(
            "POST", "/conversations", json={"title": title, "project_id": project_id}
        )
        return ConversationResponse.model_validate(data)

    async def list_all(self, project_id: str | None = None) -> list[ConversationResponse]:
        params = {"project_id": project_id} if project_id else None
        data = await self._api.request("GET", "/conversations", params=params)
        return [ConversationResponse.model_validate(c) for c in data["conversations"]]

    async def get(self, conversation_id: str) -> ConversationResponse:
        data = await self._api.request("GET", f"/conversations/{conversation_id}")
        return ConversationResponse.model_validate(data)

    async def update(
        self, conversation_id: str, title: str | None = None, summary: str | None = None
    ) -> ConversationResponse:
        body = {k: v for k, v in {"title": title, "summary": summary}.items() if v is not None}
        data = await self._api.request("PATCH", f"/conversations/{conversation_id}", json=body)
        return ConversationResponse.model_validate(data)

    async def delete(self, conversation_id: str) -> None:
        await self._api.request("DELETE", f"/conversations/{conversation_id}")

    async def list_messages(self, conversation_id: str) -> list[MessageResponse]:
        data = await self._api.request("GET", f"/conversations/{conversation_id}/messages")
        return [MessageResponse.model_validate(m) for m in data["messages"]]

    async def add_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        image_url: str | None = None,
    ) -> MessageResponse:
        data = await self._api.request(
            "POST",
            f"/conversations/{conversation_id}/messages",
            json={"role": role, "content": content, "image_url": image_url},
        )
        return MessageResponse.model_validate(data)


class ProjectsAPI(_Group):
    async def create(
        self, name: str, description: str = "", budget: float | None = None
    ) -> ProjectResponse:
        data = await self._api.request(
            "POST",
            "/projects",
            json={"name": name, "description": description, "budget": budget},
        )
        return ProjectResponse.model_validate(data)

    async def list_all(self) -> list[ProjectResponse]:
        data = await self._api.request("GET", "/projects")
        return [ProjectResponse.model_validate(p) for p in data["projects"]]

    async def get(self, project_id: str) -> ProjectResponse:
        return ProjectResponse.model_validate(
            await self._api.request("GET", f"/projects/{project_id}")
        )

    async def update(self, project_id: str, **changes: Any) -> ProjectResponse:
        """Send only the given fields, e.g. `update(pid, status="in_progress")`."""
        data = await self._api.request("PATCH", f"/projects/{project_id}", json=changes)
        return ProjectResponse.model_validate(data)

    async def delete(self, project_id: str) -> None:
        await self._api.request("DELETE", f"/projects/{project_id}")

    async def stats(self) -> ProjectStatsResponse:
        return ProjectStatsResponse.model_validate(
            await self._api.request("GET", "/projects/stats")
        )

    async def list_boms(self, project_id: str) -> list[BOMResponse]:
        data = await self._api.request("GET", f"/projects/{project_id}/boms")
        return [BOMResponse.model_validate(b) for b in data["boms"]]

    async def bom_stats(self, project_id: str) -> BOMStatsResponse:
        return BOMStatsResponse.model_validate(
            await self._api.request("GET", f"/projects/{project_id}/bom-stats")
        )


class BOMsAPI(_Group):
    async def generate(
        self, project_id: str, conversation_id: str | None = None
    ) -> GenerateBOMResponse:
        data = await self._api.request(
            "POST",
            "/boms/generate",
            json={"projectId": project_id, "conversationId": conversation_id},
        )
        return GenerateBOMResponse.model_validate(data)

    async def get(self, bom_id: str) -> BOMDetailResponse:
        return BOMDetailResponse.model_validate(await self._api.request("GET", f"/boms/{bom_id}"))

    async def update_status(self, bom_id: str, status: BOMStatus) -> BOMResponse:
        data = await self._api.request(
            "PATCH", f"/boms/{bom_id}/status", json={"status": BOMStatus(status).value}
        )
        return BOMResponse.model_validate(data)

    async def list_matches(self, item_id: str) -> list[ProductMatchResponse]:
        data = await self._api.request("GET", f"/boms/items/{item_id}/matches")
        return [ProductMatchResponse.model_validate(m) for m in data["matches"]]

    async def select_match(self, match_id: str) -> ProductMatchResponse:
        data = await self._api.request("POST", f"/boms/matches/{match_id}/select")
        return ProductMatchResponse.model_validate(data)

    async def unselect_match(self, match_id: str) -> ProductMatchResponse:
        data = await self._api.request("DELETE", f"/boms/matches/{match_id}/select")
        return ProductMatchResponse.model_validate(data)

    async def shopping_list(self, bom_id: str) -> ShoppingListResponse:
        return ShoppingListResponse.model_validate(
            await self._api.request("GET", f"/boms/{bom_id}/shopping-list")
        )


class VendorsAPI(_Group):
    """Vendor administration; every call needs an admin token."""

    async def list_all(self) -> list[VendorResponse]:
        data = await self._api.request("GET", "/vendors")
        return [VendorResponse.model_validate(v) for v in data["vendors"]]

    async def create(
        self, name: str, website_url: str, search_url_template: str, **extra: Any
    ) -> VendorResponse:
        body = {
            "name": name,
            "website_url": website_url,
            "search_url_template": search_url_template,
            **extra,
        }
        return VendorResponse.model_validate(await self._api.request("POST", "/vendors", json=body))

    async def update(self, vendor_id: str, **changes: Any) -> VendorResponse:
        data = await self._api.request("PATCH", f"/vendors/{vendor_id}", json=changes)
        return VendorResponse.model_validate(data)

    async def toggle(self, vendor_id: str) -> VendorResponse:
        data = await self._api.request("POST", f"/vendors/{vendor_id}/toggle")
        return VendorResponse.model_validate(data)

    async def delete(self, vendor_id: str) -> None:
        await self._api.request("DELETE", f"/vendors/{vendor_id}")


class AdminAPI(_Group):
    async def stats(self) -> AdminStatsResponse:
        return AdminStatsResponse.model_validate(await self._api.request("GET", "/admin/stats"))

    async def users(self) -> list[AdminUserResponse]:
        data = await self._api.request("GET", "/admin/users")
        return [AdminUserResponse.model_validate(u) for u in data["users"]]

    async def grant_admin(self, user_id: str) -> RoleChangeResponse:
        data = await self._api.request("POST", f"/admin/users/{user_id}/admin")
        return RoleChangeResponse.model_validate(data)

    async def revoke_admin(self, user_id: str) -> RoleChangeResponse:
        data = await self._api.request("DELETE", f"/admin/users/{user_id}/admin")
        return RoleChangeResponse.model_validate(data)


def _error_message(response: httpx.Response) -> tuple[str, dict]:
    """Pull `detail` (CRUD routes) or `error` (AI routes) out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase, {}

    if isinstance(body, dict):
        message = body.get("detail") or body.get("error")
        if isinstance(message, str):
            return message, body
        if message is not None:
            return str(message), body
        return response.reason_phrase, body
    return response.reason_phrase, {}


class RenoplanAPI:
    """Async client for the Renoplan API."""

    def __init__(
        self,
        settings: ClientSettings | None = None,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Client settings; the global settings when omitted
            access_token: Bearer token; anonymous when omitted
            transport: Optional httpx transport (tests)
        """
        self.settings = settings or get_client_settings()
        self.access_token = access_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self.conversations = ConversationsAPI(self)
        self.projects = ProjectsAPI(self)
        self.boms = BOMsAPI(self)
        self.vendors = VendorsAPI(self)
        self.admin = AdminAPI(self)

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    async def __aenter__(self) -> "RenoplanAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {}
            if self.access_token:
                headers["Authorization"] = f"Bearer {self.access_token}"
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_url,
                headers=headers,
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        params: dict | None = None,
        files: dict | None = None,
    ) -> Any:
        """Make a request and return the decoded JSON body (None for 204).

        Raises:
            APIClientError: For non-2xx responses and transport errors
        """
        client = self._ensure_client()
        try:
            response = await client.request(method, path, json=json, params=params, files=files)
        except httpx.RequestError as e:
            raise APIClientError(f"Request error: {e}") from e

        if response.is_error:
            message, data = _error_message(response)
            logger.warning(
                "API request failed",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise APIClientError(message, status_code=response.status_code, response_data=data)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def open_chat_stream(
        self,
        messages: list[ChatMessage],
        conversation_id: str | None = None,
        project_id: str | None = None,
        is_anonymous: bool = False,
    ) -> httpx.Response:
        """
        Start a chat turn and return the open streaming response.

        The response is returned whatever its status; the caller inspects the
        status and must close it.

        Raises:
            httpx.RequestError: If the API cannot be reached
        """
        client = self._ensure_client()
        body = {
            "messages": [
                {"role": m.role, "content": m.content, "imageUrl": m.image_url}
                for m in messages
            ],
            "conversationId": conversation_id,
            "projectId": project_id,
            "isAnonymous": is_anonymous,
        }
        request = client.build_request("POST", "/ai/chat", json=body)
        return await client.send(request, stream=True)

    async def extract_project_info(
        self, messages: list[ChatMessage]
    ) -> ExtractedProjectData | None:
        """Extracted project details, or None when the AI found nothing."""
        data = await self.request(
            "POST",
            "/ai/extract-project-info",
            json={"messages": [m.model_dump() for m in messages]},
        )
        if "projectData" not in data:
            return None
        return ExtractedProjectData.model_validate(data["projectData"])

    async def generate_image(self, request: GenerateImageRequest) -> GenerateImageResponse:
        data = await self.request(
            "POST",
            "/ai/generate-image",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        return GenerateImageResponse.model_validate(data)

    async def search_products(
        self,
        bom_item_id: str,
        search_query: str,
        vendors: list[str] | None = None,
        language: str = "en",
    ) -> ProductSearchResponse:
        body: dict[str, Any] = {
            "bomItemId": bom_item_id,
            "searchQuery": search_query,
            "language": language,
        }
        if vendors:
            body["vendors"] = vendors
        return ProductSearchResponse.model_validate(
            await self.request("POST", "/products/search", json=body)
        )

    async def upload_image(
        self, data: bytes, content_type: str, filename: str = "photo"
    ) -> UploadImageResponse:
        """Upload a chat photo; returns its storage path and a signed URL."""
        body = await self.request(
            "POST", "/storage/images", files={"file": (filename, data, content_type)}
        )
        return UploadImageResponse.model_validate(body)

