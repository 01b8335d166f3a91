from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

import httpx

from app.core.content_rules import UploadRuleError, check_upload
from app.editor.lifecycle import (
    ClearFailed,
    ClearStarted,
    ClearSucceeded,
    Close,
    EditForm,
    EditorState,
    Event,
    OpenSlot,
    RemoveImage,
    SaveFailed,
    SaveStarted,
    SaveSucceeded,
    SlotForm,
    UploadFailed,
    UploadStarted,
    UploadSucceeded,
    reduce,
)

logger = logging.getLogger(__name__)

Uploader = Callable[[str, bytes, str], None]


class UploadError(Exception):
    pass


def put_to_presigned_url(presigned_url: str, data: bytes, content_type: str) -> None:
    """Send the file body straight to object storage."""
    try:
        response = httpx.put(presigned_url, content=data, headers={"Content-Type": content_type}, timeout=60.0)
    except httpx.HTTPError as exc:
        raise UploadError(f"Upload to storage failed: {exc}") from exc
    if response.status_code == 403:
        raise UploadError(
            "Upload rejected by storage: check the bucket CORS policy and that the URL has not expired."
        )
    if response.is_error:
        raise UploadError(f"Upload to storage failed: {response.status_code} {response.reason_phrase}")


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    return detail if isinstance(detail, str) and detail else fallback


class SubmissionEditor:
    """Drives the slot editor for one prompt against the HTTP API.

    ``client`` must already carry the caller's credentials (session cookie or
    dev header) and point at the API host.
    """

    def __init__(
        self,
        client: httpx.Client,
        prompt_id: str,
        existing: Mapping[int, SlotForm] | None = None,
        uploader: Uploader = put_to_presigned_url,
        api_prefix: str = "/v1",
    ) -> None:
        self.client = client
        self.prompt_id = prompt_id
        self.existing: dict[int, SlotForm] = dict(existing or {})
        self.uploader = uploader
        self.api_prefix = api_prefix.rstrip("/")
        self.state = EditorState()

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    def _dispatch(self, event: Event) -> EditorState:
        transition = reduce(self.state, event)
        self.state = transition.state
        for image_url in transition.deletions:
            self.delete_image(image_url)
        return self.state

    def delete_image(self, image_url: str) -> None:
        """Fire-and-forget removal of an uploaded object."""
        try:
            response = self.client.post(self._url("/upload/delete"), json={"imageUrl": image_url})
        except httpx.HTTPError:
            logger.warning("Failed to delete image %s", image_url, exc_info=True)
            return
        if response.is_error:
            logger.warning("Failed to delete image %s: %s", image_url, response.status_code)

    def open(self, word_index: int) -> EditorState:
        return self._dispatch(OpenSlot(word_index, self.existing.get(word_index)))

    def edit(self, title: str | None = None, text: str | None = None) -> EditorState:
        return self._dispatch(EditForm(title=title, text=text))

    def upload(self, data: bytes, content_type: str) -> EditorState:
        self._dispatch(UploadStarted())
        try:
            check_upload(content_type, len(data))
        except UploadRuleError as exc:
            return self._dispatch(UploadFailed(str(exc)))

        try:
            response = self.client.post(
                self._url("/upload/presign"),
                json={"fileType": content_type, "fileSize": len(data)},
            )
            if response.is_error:
                raise UploadError(_error_message(response, "Failed to get upload URL"))
            payload = response.json()
            self.uploader(payload["presignedUrl"], data, content_type)
        except (UploadError, httpx.HTTPError) as exc:
            return self._dispatch(UploadFailed(str(exc) or "Upload failed"))

        return self._dispatch(UploadSucceeded(payload["publicUrl"]))

    def remove_image(self) -> EditorState:
        return self._dispatch(RemoveImage())

    def close(self) -> EditorState:
        return self._dispatch(Close())

    def save(self) -> EditorState:
        self._dispatch(SaveStarted())
        form = self.state.form
        slot = self.state.slot
        try:
            response = self.client.post(
                self._url("/submissions"),
                json={
                    "promptId": self.prompt_id,
                    "wordIndex": slot,
                    "title": form.title,
                    "text": form.text,
                    "imageUrl": form.image_url,
                },
            )
        except httpx.HTTPError as exc:
            return self._dispatch(SaveFailed(f"Failed to save: {exc}"))
        if response.is_error:
            return self._dispatch(SaveFailed(_error_message(response, "Failed to save")))

        self.existing[slot] = form
        return self._dispatch(SaveSucceeded())

    def clear_all(self) -> EditorState:
        self._dispatch(ClearStarted())
        try:
            response = self.client.request(
                "DELETE", self._url("/submissions"), params={"promptId": self.prompt_id}
            )
        except httpx.HTTPError as exc:
            return self._dispatch(ClearFailed(f"Failed to clear submissions: {exc}"))
        if response.is_error:
            return self._dispatch(ClearFailed(_error_message(response, "Failed to clear submissions")))

        self.existing.clear()
        return self._dispatch(ClearSucceeded())
