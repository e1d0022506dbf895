"""Stories endpoints."""

import json
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from app_state import Services, get_services
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from spooky.engine.story_generator import DEFAULT_TOPIC
from spooky.models.api import (
    GenerateStoryRequest,
    GenerateStoryResponse,
    StoryDetailResponse,
    StoryListResponse,
)
from utils.documents import extract_text
from utils.validators import validate_content, validate_entity_id, validate_upload

router = APIRouter(prefix="/stories", tags=["Stories"])
logger = get_logger("stories")

MAX_LIST_LIMIT = 100


async def _read_json_body(request: Request) -> GenerateStoryRequest:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(
            "Invalid request body",
            suggested_action="Please send JSON with a 'content' field, or upload a file!",
        )
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body", suggested_action="Please send a JSON object!")
    try:
        return GenerateStoryRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Invalid request body", details={"errors": e.errors(include_url=False)})


async def _read_upload(upload: UploadFile, services: Services) -> str:
    data = await upload.read()
    kind = validate_upload(
        upload.filename,
        upload.content_type,
        len(data),
        services.config.max_file_size,
    )
    return extract_text(data, kind)


@router.post("/generate", response_model=GenerateStoryResponse)
async def generate_story(request: Request, services: Services = Depends(get_services)):
    """Turn pasted text or an uploaded .txt/.md/.pdf file into a spooky story."""
    content: Optional[str] = None
    file_name = DEFAULT_TOPIC

    if request.headers.get("content-type", "").startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        text = form.get("content")
        if isinstance(upload, UploadFile) and upload.filename:
            content = await _read_upload(upload, services)
            file_name = upload.filename
        elif isinstance(text, str):
            content = text
    else:
        body = await _read_json_body(request)
        content = body.content
        file_name = body.file_name or DEFAULT_TOPIC

    if content is None:
        raise ValidationError(
            "No content provided",
            suggested_action="Please upload a file or paste some text to transform into a spooky story!",
        )

    content = validate_content(
        content,
        min_length=services.config.min_content_length,
        max_length=services.config.max_content_length,
    )

    start = time.perf_counter()
    story = await services.story_generator.generate(content, file_name)
    processing_time = time.perf_counter() - start
    story = await services.stories.save(story)

    logger.info(
        "Story generated",
        story_id=story.id,
        topic=story.original_topic,
        chars=len(content),
        seconds=round(processing_time, 3),
    )
    return GenerateStoryResponse(
        story=story,
        processing_time=round(processing_time, 3),
        message="👻 Your spooky story has been conjured by the spirits!",
    )


@router.get("/{story_id}", response_model=StoryDetailResponse)
async def get_story(story_id: str, services: Services = Depends(get_services)):
    """Get a story by id or shareable link."""
    validate_entity_id(story_id, "storyId")
    story = await services.stories.get(story_id)
    if story is None:
        raise NotFoundError(
            "Story not found",
            suggested_action="This story seems to have vanished into the spirit realm! "
            "It may have expired or never existed.",
        )
    return StoryDetailResponse(data=story)


@router.get("", response_model=StoryListResponse)
async def list_stories(
    limit: int = Query(20, ge=1, le=MAX_LIST_LIMIT),
    services: Services = Depends(get_services),
):
    """List stored stories, newest first."""
    stories = await services.stories.list(limit=limit)
    if stories:
        message = f"📚 Found {len(stories)} spooky stories in the grimoire!"
    else:
        message = "📚 No stories in the grimoire yet! Upload some content to get started."
    return StoryListResponse(stories=stories, count=len(stories), message=message)
