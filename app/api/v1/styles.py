"""Styles API: list the headshot presets a job can request."""

from dataclasses import asdict, dataclass
from typing import List

from fastapi import APIRouter

from app.jobs.models import HeadshotStyle

router = APIRouter()


@dataclass
class StyleInfo:
    id: HeadshotStyle
    name: str
    description: str


STYLE_CATALOG: List[StyleInfo] = [
    StyleInfo(
        id=HeadshotStyle.CORPORATE,
        name="Corporate Classic",
        description=(
            "Traditional business attire with neutral background and formal lighting. "
            "Perfect for LinkedIn profiles and corporate websites."
        ),
    ),
    StyleInfo(
        id=HeadshotStyle.CREATIVE,
        name="Creative Professional",
        description=(
            "Modern business casual with subtle creative elements and professional lighting. "
            "Ideal for creative professionals and modern companies."
        ),
    ),
    StyleInfo(
        id=HeadshotStyle.EXECUTIVE,
        name="Executive Portrait",
        description=(
            "Premium executive look with sophisticated background and high-end lighting. "
            "Perfect for C-level executives and high-profile professionals."
        ),
    ),
]


@router.get("/styles")
async def list_styles():
    styles = [{**asdict(s), "id": s.id.value} for s in STYLE_CATALOG]
    return {"styles": styles, "count": len(styles)}
