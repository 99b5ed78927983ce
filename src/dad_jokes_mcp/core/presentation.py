"""Display fields for exercise records, as the exercise widget renders them."""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence
from urllib.parse import quote, urlparse

from .config import DEFAULT_IMAGE_HOSTS
from .fields import absolute_url, first_match, first_string, string_array
from .models import ExerciseCard

IMAGE_PROXY_PATH = "/api/image-proxy"

IMAGE_FIELDS = (
    "imageUrl",
    "image_url",
    "image",
    "thumbnail",
    "thumbnail_url",
    "gif_url",
    "video_url",
    "url",
)
NAME_FIELDS = ("name", "title", "exercise")
DESCRIPTION_FIELDS = ("description", "instructions", "notes")
MUSCLE_FIELDS = (
    "muscles",
    "muscle_groups",
    "primary_muscles",
    "secondary_muscles",
    "target",
    "body_part",
)

_TAG_RE = re.compile(r"<[^>]*>?")


def proxy_path(url: str) -> str:
    return f"{IMAGE_PROXY_PATH}?url={quote(url, safe='')}"


def _video_image(videos: Any) -> str:
    if not isinstance(videos, list) or not videos or not isinstance(videos[0], dict):
        return ""
    best = next(
        (v for v in videos if isinstance(v, dict) and v.get("gender") == "male" and v.get("angle") == "front"),
        videos[0],
    )
    return absolute_url(best.get("og_image"))


def resolve_image(record: Mapping[str, Any], proxy_hosts: Sequence[str] = DEFAULT_IMAGE_HOSTS) -> str:
    """Image URL for an exercise, or ``""`` when none qualifies.

    Direct image fields win over the preview image of the ``videos`` list,
    where the male/front-angle video is preferred. URLs on ``proxy_hosts``
    need the RapidAPI key and are routed through the image proxy; any other
    host is returned as-is for the browser to load directly.
    """
    url = first_match(record, IMAGE_FIELDS, absolute_url) or _video_image(record.get("videos"))
    if not url:
        return ""
    return proxy_path(url) if urlparse(url).hostname in proxy_hosts else url


def exercise_name(record: Mapping[str, Any]) -> str:
    return first_match(record, NAME_FIELDS, first_string) or "Untitled exercise"


def exercise_description(record: Mapping[str, Any]) -> str:
    # API descriptions are usually HTML
    raw = first_match(record, DESCRIPTION_FIELDS, first_string) or ""
    text = _TAG_RE.sub("", raw)
    if text:
        return text
    steps = record.get("steps")
    if isinstance(steps, list):
        return "\n".join(s for s in steps if isinstance(s, str))
    return ""


def exercise_meta(record: Mapping[str, Any]) -> dict[str, Any]:
    muscles: list[str] = []
    for field in MUSCLE_FIELDS:
        for muscle in string_array(record.get(field)):
            if muscle and muscle not in muscles:
                muscles.append(muscle)
    return {
        "equipment": first_match(record, ("equipment", "category"), first_string) or "",
        "level": first_match(record, ("level", "difficulty"), first_string) or "",
        "muscles": muscles,
    }


def exercise_card(record: Any, proxy_hosts: Sequence[str] = DEFAULT_IMAGE_HOSTS) -> ExerciseCard:
    if not isinstance(record, Mapping):
        return ExerciseCard(name="Untitled exercise")
    return ExerciseCard(
        name=exercise_name(record),
        description=exercise_description(record),
        image=resolve_image(record, proxy_hosts),
        **exercise_meta(record),
    )
