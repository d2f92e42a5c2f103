
from fastapi import APIRouter, Depends, File, UploadFile

from ..config import Settings
from ..engine.analyzer import analyze_intake
from ..engine.attachments import ingest_uploads
from ..engine.llm import GatewayConfig, ModelGateway
from ..engine.segmenter import segment
from ..errors import EmptyResultError
from ..schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    Attachment,
    AttachmentUploadResponse,
    ErrorResponse,
    SectionsResponse,
)

router = APIRouter(prefix="/api", tags=["analysis"])

ERROR_RESPONSES = {500: {"model": ErrorResponse}}


def get_settings() -> Settings:
    # Read per request so a rotated key or edited prompt file is picked up.
    return Settings()


def get_gateway(settings: Settings = Depends(get_settings)) -> ModelGateway:
    return ModelGateway(GatewayConfig.from_settings(settings))


@router.post("/analyze", response_model=AnalyzeResponse, responses=ERROR_RESPONSES)
async def analyze(req: AnalyzeRequest, gateway: ModelGateway = Depends(get_gateway)):
    text = await analyze_intake(req, gateway)
    return AnalyzeResponse(response=text)


@router.post(
    "/analyze/sections", response_model=SectionsResponse, responses=ERROR_RESPONSES
)
async def analyze_sections(
    req: AnalyzeRequest, gateway: ModelGateway = Depends(get_gateway)
):
    text = await analyze_intake(req, gateway)
    if not text.strip():
        raise EmptyResultError()
    return SectionsResponse(response=text, sections=segment(text))


@router.post("/attachments", response_model=AttachmentUploadResponse)
async def upload_attachments(
    files: list[UploadFile] = File(...),
    settings: Settings = Depends(get_settings),
):
    attachments: list[Attachment] = []
    errors = await ingest_uploads(files, attachments, settings.max_attachment_bytes)
    return AttachmentUploadResponse(
        attachments=attachments, errors=[e.message for e in errors]
    )
