from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field

from buildmarket.dependencies import get_current_user
from buildmarket.uploads.storage import UploadError, UploadTooLarge, save_upload, resolve_upload
from buildmarket.users.models import User

router = APIRouter(tags=["uploads"])


class UploadRequest(BaseModel):
    image: str = Field(min_length=1)
    filename: str = Field(min_length=1)


class UploadResponse(BaseModel):
    url: str


@router.post("/upload", response_model=UploadResponse)
def upload_image(payload: UploadRequest, current_user: User = Depends(get_current_user)):
    try:
        name = save_upload(payload.image, payload.filename)
    except UploadTooLarge as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc))
    except UploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return {"url": f"/api/files/{name}"}


@router.get("/files/{filename}")
def download_file(filename: str, current_user: User = Depends(get_current_user)):
    path = resolve_upload(filename)
    if not path:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(path)
