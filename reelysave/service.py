import logging
import os
import re

from .errors import UnsupportedMediaForAudio
from .instagram import extract_shortcode
from .models import AUDIO, ResolutionResult

logger = logging.getLogger(__name__)

READY_MESSAGE = 'Download ready!'
# Audio is never extracted: the video itself is handed back with this advisory
AUDIO_ADVISORY = 'Video download ready! Use a video-to-audio converter for audio extraction.'

MAX_FILE_NAME_LENGTH = 150


def sanitize_filename(filename):
    """Removes or replaces characters invalid for typical filesystems."""
    sanitized = re.sub(r'[\\/*?:"<>|\x00-\x1f]', '_', filename)
    sanitized = re.sub(r'\.+', '.', sanitized)
    sanitized = sanitized.strip().strip('.')
    if len(sanitized) > MAX_FILE_NAME_LENGTH:
        name, ext = os.path.splitext(sanitized)
        sanitized = name[:MAX_FILE_NAME_LENGTH - len(ext)] + ext
    return sanitized


def file_extension(save_type, is_video):
    if save_type == AUDIO or is_video:
        return 'mp4'
    return 'jpg'


def build_file_name(shortcode, extension, requested=None):
    """Client supplied name (sanitised, extension appended) or instagram_<shortcode>.<ext>"""
    if requested:
        name = sanitize_filename(requested)
        if name:
            if not name.lower().endswith(f'.{extension}'):
                name = f'{name}.{extension}'
            return name
    return f'instagram_{shortcode}.{extension}'


class DownloadService:
    """Turns a DownloadRequest into a ResolutionResult."""

    def __init__(self, resolver):
        self.resolver = resolver

    def handle(self, download_request):
        logger.info(f"Processing Instagram URL: {download_request.url}")

        # Raises before any network call
        shortcode = extract_shortcode(download_request.url)
        logger.info(f"Extracted shortcode: {shortcode}")

        candidate = self.resolver.resolve(shortcode)

        if download_request.save_type == AUDIO and not candidate.is_video:
            raise UnsupportedMediaForAudio()

        extension = file_extension(download_request.save_type, candidate.is_video)
        message = AUDIO_ADVISORY if download_request.save_type == AUDIO else READY_MESSAGE

        return ResolutionResult(
            success=True,
            file_name=build_file_name(shortcode, extension, download_request.file_name),
            download_url=candidate.download_url,
            message=message,
            media_type='video' if candidate.is_video else 'image',
            shortcode=shortcode,
            method=candidate.source,
        )
