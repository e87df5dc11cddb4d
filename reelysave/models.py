from dataclasses import dataclass
from typing import Optional

from .errors import InvalidSaveType, MissingURL

VIDEO = 'video'
AUDIO = 'audio'

# Wire values accepted for ``saveType``
SAVE_TYPES = {
    'reel': VIDEO,
    'video': VIDEO,
    'audio': AUDIO,
}


@dataclass
class DownloadRequest:
    url: str
    save_type: str = VIDEO
    file_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload):
        """Build a request from a JSON body or query-string mapping"""
        # request.args is a dict subclass too
        if not isinstance(payload, dict):
            payload = {}

        url = payload.get('url')
        if not isinstance(url, str) or not url.strip():
            raise MissingURL()

        raw_type = payload.get('saveType') or 'reel'
        save_type = SAVE_TYPES.get(str(raw_type).strip().lower())
        if save_type is None:
            raise InvalidSaveType(details=f'Got {raw_type!r}')

        file_name = payload.get('fileName')
        if not isinstance(file_name, str) or not file_name.strip():
            file_name = None

        return cls(url=url.strip(), save_type=save_type, file_name=file_name)


@dataclass
class MediaCandidate:
    video_url: Optional[str] = None
    display_url: Optional[str] = None
    is_video: bool = False
    source: Optional[str] = None

    def __post_init__(self):
        if self.video_url:
            self.is_video = True

    @property
    def download_url(self):
        # a video node without its video URL only offers the thumbnail
        if self.is_video:
            return self.video_url
        return self.display_url

    @property
    def usable(self):
        return bool(self.download_url)


@dataclass
class ResolutionResult:
    success: bool
    file_name: str
    download_url: Optional[str] = None
    message: str = ''
    media_type: Optional[str] = None
    shortcode: Optional[str] = None
    method: Optional[str] = None

    def __post_init__(self):
        if self.success and not self.download_url:
            raise ValueError('a successful result needs a download URL')

    def to_dict(self):
        return {
            'success': self.success,
            'fileName': self.file_name,
            'downloadUrl': self.download_url,
            'message': self.message,
            'mediaType': self.media_type,
            'shortcode': self.shortcode,
            'method': self.method,
        }
