"""
Storage Utility
===============

Image uploads for articles: one file per request, images only, size-capped,
written to the public uploads folder under a collision-resistant name.
"""

import os
import random
import time

from flask import current_app
from werkzeug.exceptions import RequestEntityTooLarge, UnsupportedMediaType
from werkzeug.utils import secure_filename

from .logging_service import logger


def _stream_size(file):
    """Size in bytes of an uploaded file, leaving the stream rewound."""
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def generate_filename(original):
    """timestamp + random suffix + sanitised original name"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
    safe_name = secure_filename(original or '') or 'upload'
    return f"{unique_suffix}-{safe_name}"


def save_image(file):
    """Validate and persist an uploaded image.

    Args:
        file: werkzeug FileStorage, or None when nothing was uploaded.

    Returns:
        Relative URL like "/uploads/1700000000000-123-photo.jpg", or None
        when no file was supplied.

    Raises:
        UnsupportedMediaType: declared content type is not image/*.
        RequestEntityTooLarge: file exceeds MAX_IMAGE_SIZE.
        OSError: the file could not be written.
    """
    if file is None or not file.filename:
        return None

    mimetype = (file.mimetype or '').lower()
    if not mimetype.startswith('image/'):
        logger.warning('uploads', 'Rejected non-image upload', {
            'filename': file.filename, 'mimetype': mimetype
        })
        raise UnsupportedMediaType('Only image files are allowed.')

    max_size = current_app.config['MAX_IMAGE_SIZE']
    size = _stream_size(file)
    if size > max_size:
        logger.warning('uploads', 'Rejected oversized upload', {
            'filename': file.filename, 'size': size, 'limit': max_size
        })
        raise RequestEntityTooLarge(f'Images must be at most {max_size // (1024 * 1024)} MB.')

    upload_dir = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_dir, exist_ok=True)

    filename = generate_filename(file.filename)
    file.save(os.path.join(upload_dir, filename))

    prefix = current_app.config['UPLOAD_URL_PREFIX'].rstrip('/')
    logger.info('uploads', f"Saved image {filename}", {'size': size})
    return f"{prefix}/{filename}"


def image_from_request(request, fallback=''):
    """Resolve the image_url for a form submission.

    An uploaded file wins, then a typed-in URL, then ``fallback`` (the
    article's current image when editing). Only the first file under the
    upload field is considered.
    """
    field = current_app.config['UPLOAD_FIELD_NAME']
    uploaded = save_image(request.files.get(field))
    if uploaded:
        return uploaded

    submitted_url = (request.form.get('image_url') or '').strip()
    return submitted_url or fallback or ''


def has_upload(request):
    """True if the request carries a file under the upload field"""
    file = request.files.get(current_app.config['UPLOAD_FIELD_NAME'])
    return file is not None and bool(file.filename)


def discard_image(url):
    """Remove a file saved by save_image() that ended up unused"""
    prefix = current_app.config['UPLOAD_URL_PREFIX'].rstrip('/') + '/'
    if not url or not url.startswith(prefix):
        return

    filename = os.path.basename(url[len(prefix):])
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], filename)
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning('uploads', f"Could not remove unused image {filename}", {'error': str(e)})
        return
    logger.info('uploads', f"Discarded unused image {filename}")
