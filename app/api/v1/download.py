"""Download API: resolve a result id to its (placeholder) image."""

from xml.sax.saxutils import escape

from fastapi import APIRouter
from fastapi.responses import Response

router = APIRouter()

_PLACEHOLDER_SVG = """<svg width="400" height="400" xmlns="http://www.w3.org/2000/svg">
  <rect width="400" height="400" fill="#f0f0f0"/>
  <text x="200" y="200" text-anchor="middle" font-family="Arial" font-size="16" fill="#666">
    Generated Headshot
  </text>
  <text x="200" y="220" text-anchor="middle" font-family="Arial" font-size="12" fill="#999">
    {result_id}
  </text>
</svg>
"""


def render_placeholder(result_id: str) -> str:
    """Placeholder headshot: a grey square stamped with the result id."""
    return _PLACEHOLDER_SVG.format(result_id=escape(result_id))


@router.get("/download/{result_id}")
async def download(result_id: str):
    return {
        "success": True,
        "imageUrl": f"/api/download/mock-image/{result_id}",
        "message": "Image ready for download",
    }


@router.get("/download/mock-image/{result_id}")
async def mock_image(result_id: str):
    return Response(content=render_placeholder(result_id), media_type="image/svg+xml")
