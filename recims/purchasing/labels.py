"""
Skid label rendering with Pillow and python-barcode

Layout (4x2 in at 100 DPI):
    vendor + date
    Code128 of the line barcode
    barcode text
    category + skid code
"""
import base64
import io
import logging
from typing import Optional

import barcode
from barcode.writer import ImageWriter
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

MAX_VENDOR_LENGTH = 20
MAX_BOTTOM_LENGTH = 40


def _load_fonts():
    try:
        return (
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 14),
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 12),
        )
    except (OSError, IOError):
        try:
            return ImageFont.truetype('arial.ttf', 14), ImageFont.truetype('arial.ttf', 12)
        except (OSError, IOError):
            return ImageFont.load_default(), ImageFont.load_default()


def _draw_centered(draw, text, y, font, width):
    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = bbox[2] - bbox[0]
    draw.text(((width - text_width) // 2, y), text, fill='black', font=font)


def _render_barcode(value):
    code128 = barcode.get_barcode_class('code128')
    return code128(value, writer=ImageWriter()).render({
        'write_text': False,
        'module_width': 0.3,
        'module_height': 20.0,
        'quiet_zone': 2.0,
        'font_size': 0,
        'text_distance': 0,
        'background': 'white',
        'foreground': 'black',
    })


def generate_skid_label(
    barcode_value: str,
    category: Optional[str] = None,
    skid_number: Optional[str] = None,
    vendor_name: Optional[str] = None,
    label_date: Optional[str] = None,
    width: int = 400,
    height: int = 200,
) -> str:
    """
    Render the label for one PO line.

    Returns a base64 PNG data URL.
    """
    font_medium, font_small = _load_fonts()
    img = Image.new('RGB', (width, height), color='white')
    draw = ImageDraw.Draw(img)

    margin = 10
    top_y = 8
    barcode_y = top_y + 18
    available_height = height - 12 - barcode_y - 20

    top_line = ' '.join(part for part in ((vendor_name or '')[:MAX_VENDOR_LENGTH], label_date or '') if part)
    if top_line:
        _draw_centered(draw, top_line, top_y, font_medium, width)

    bottom_line = ' | '.join(part for part in (category or '', skid_number or '') if part)[:MAX_BOTTOM_LENGTH]

    try:
        barcode_img = _render_barcode(barcode_value)
        source_width, source_height = barcode_img.size
        target_width = width - 2 * margin
        scale = target_width / source_width
        target_height = int(source_height * scale)
        if target_height > available_height:
            scale = available_height / source_height
            target_height = available_height
            target_width = int(source_width * scale)
        barcode_img = barcode_img.resize((target_width, target_height), Image.Resampling.BILINEAR)
        img.paste(barcode_img, ((width - target_width) // 2, barcode_y))

        text_y = barcode_y + target_height + 5
        _draw_centered(draw, barcode_value, text_y, font_small, width)
        if bottom_line:
            _draw_centered(draw, bottom_line, text_y + 16, font_medium, width)
    except Exception as e:
        # Still print a readable label when the symbology rejects the value
        logger.error(f"Barcode generation failed for '{barcode_value}': {str(e)}")
        _draw_centered(draw, f'BARCODE: {barcode_value}', barcode_y, font_small, width)
        if bottom_line:
            _draw_centered(draw, bottom_line, barcode_y + 20, font_medium, width)

    buffer = io.BytesIO()
    img.save(buffer, format='PNG', optimize=False, compress_level=1)
    image_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')
    buffer.close()
    img.close()
    return f'data:image/png;base64,{image_base64}'
