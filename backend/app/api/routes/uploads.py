from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import get_current_user
from app.schemas.uploads import DeleteUploadRequest, DeleteUploadResponse, PresignRequest, PresignResponse
from app.services.storage_service import StorageClient, StorageError, get_storage_client
from app.services.upload_service import create_presigned_upload, delete_upload

router = APIRouter(prefix="/upload")


@router.post("/presign", response_model=PresignResponse)
def presign(
    payload: PresignRequest,
    user=Depends(get_current_user),
    storage: StorageClient = Depends(get_storage_client),
) -> PresignResponse:
    try:
        upload = create_presigned_upload(storage, user.id, payload.file_type, payload.file_size)
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate upload URL"
        ) from exc

    return PresignResponse(
        presignedUrl=upload.presigned_url,
        publicUrl=upload.public_url,
        expiresIn=upload.expires_in,
    )


@router.post("/delete", response_model=DeleteUploadResponse)
def delete(
    payload: DeleteUploadRequest,
    user=Depends(get_current_user),
    storage: StorageClient = Depends(get_storage_client),
) -> DeleteUploadResponse:
    try:
        delete_upload(storage, user.id, payload.image_url)
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete file"
        ) from exc
    return DeleteUploadResponse(success=True)
