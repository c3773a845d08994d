import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from PIL import Image, UnidentifiedImageError

from kisanai.config import MAX_UPLOAD_SIZE, RATE_LIMIT
from kisanai.dependencies import get_disease_service, get_result_cache, limiter
from kisanai.models import DiseaseAnalysisRequest, SeverityLevel
from kisanai.services.cache import ResultCache
from kisanai.services.disease.detection import DiseaseDetectionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/disease", tags=["disease"])

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
PIL_FORMAT_TO_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


def sniff_image_mime(image_bytes: bytes) -> str:
    """Detect the real image format with Pillow; only the header is read."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            image_format = img.format
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Unreadable image upload: {e}")
        raise HTTPException(status_code=400, detail="Uploaded file is not a readable image")

    mime_type = PIL_FORMAT_TO_MIME.get(image_format)
    if not mime_type:
        raise HTTPException(status_code=415, detail=f"Unsupported image format: {image_format}")
    return mime_type


@router.post("/analyze")
@limiter.limit(RATE_LIMIT)
async def analyze_disease(
    request: Request,
    file: UploadFile = File(...),
    crop_type: Optional[str] = Form(None),
    severity_level: Optional[SeverityLevel] = Form(None),
    service: DiseaseDetectionService = Depends(get_disease_service),
    cache: ResultCache = Depends(get_result_cache),
):
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=415,
            detail="Please upload a JPEG, PNG or WEBP image",
        )

    image_bytes = await file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(image_bytes) > MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"Image exceeds {MAX_UPLOAD_SIZE // (1024 * 1024)} MB limit",
        )

    mime_type = sniff_image_mime(image_bytes)
    logger.info(f"📷 Disease analysis request: {file.filename} ({len(image_bytes)} bytes, {mime_type})")

    analysis_request = DiseaseAnalysisRequest(
        image_bytes=image_bytes,
        mime_type=mime_type,
        crop_type=crop_type or None,
        severity_level=severity_level,
    )
    result = await service.analyze(analysis_request)

    payload = result.model_dump(by_alias=True)
    payload["isPlantImage"] = result.is_plant_image
    cache.save_result(
        "disease",
        request={
            "filename": file.filename,
            "mimeType": mime_type,
            "size": len(image_bytes),
            "cropType": analysis_request.crop_type,
            "severityLevel": analysis_request.severity_level,
        },
        result=payload,
    )
    return payload
