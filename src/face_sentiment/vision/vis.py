"""Visualization helpers."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from .types import FaceSentimentResult, SentimentLabel

# One color per SentimentLabel, in label order.
_COLORS: tuple[tuple[int, int, int], ...] = (
    (200, 200, 200),  # neutral
    (255, 215, 0),  # happiness
    (255, 140, 0),  # surprise
    (66, 135, 245),  # sadness
    (220, 20, 60),  # anger
    (60, 179, 113),  # disgust
    (148, 0, 211),  # fear
    (139, 69, 19),  # contempt
)

EMOJIS: dict[SentimentLabel, str] = {
    SentimentLabel.NEUTRAL: "\N{UNAMUSED FACE}",
    SentimentLabel.HAPPINESS: "\N{SMILING FACE WITH OPEN MOUTH AND SMILING EYES}",
    SentimentLabel.SURPRISE: "\N{ASTONISHED FACE}",
    SentimentLabel.SADNESS: "\N{CRYING FACE}",
    SentimentLabel.ANGER: "\N{POUTING FACE}",
    SentimentLabel.DISGUST: "\N{FACE WITH STUCK-OUT TONGUE AND TIGHTLY-CLOSED EYES}",
    SentimentLabel.FEAR: "\N{FACE SCREAMING IN FEAR}",
    SentimentLabel.CONTEMPT: "\N{FACE WITH LOOK OF TRIUMPH}",
}


def emoji_for(label: int) -> str:
    """Glyph shown for a sentiment label."""
    return EMOJIS[SentimentLabel(label)]


def draw_result(img: Image.Image, result: FaceSentimentResult, out_path: Path) -> None:
    """Draw the face box and predominant sentiment on an image and save to disk."""
    vis = img.copy()
    if result.face is None:
        vis.save(out_path)
        return

    dr = ImageDraw.Draw(vis)
    w, h = vis.size
    thickness = max(2, round(min(w, h) / 200))
    font_size = max(12, round(min(w, h) / 30))
    try:
        font = ImageFont.truetype("DejaVuSans.ttf", font_size)
    except OSError:  # pragma: no cover
        font = ImageFont.load_default()

    top = result.predominant
    color = _COLORS[top]
    b = result.face
    dr.rectangle([b.x1, b.y1, b.x2, b.y2], width=thickness, outline=color)
    txt = f"{top.label} {result.scores[top]:.2f}"
    tx, ty = b.x1 + thickness, b.y1 + thickness
    bbox = dr.textbbox((tx, ty), txt, font=font)
    dr.rectangle(bbox, fill=(0, 0, 0))
    dr.text((tx, ty), txt, fill=(255, 255, 255), font=font)
    vis.save(out_path)
