"""Errors surfaced to API clients.

Each error carries a stable ``code`` for machines, an HTTP ``status`` and a
human readable message.
"""


class DownloadError(Exception):
    code = 'download_error'
    status = 400
    message = 'Download failed'

    def __init__(self, message=None, details=None):
        super().__init__(message or self.message)
        self.details = details

    def to_dict(self):
        body = {
            'success': False,
            'error': str(self),
            'code': self.code,
        }
        if self.details:
            body['details'] = self.details
        return body


class MissingURL(DownloadError):
    code = 'missing_url'
    message = 'No URL provided'


class InvalidSaveType(DownloadError):
    code = 'invalid_save_type'
    message = "Invalid save type. Use 'reel' or 'audio'."


class InvalidURL(DownloadError):
    code = 'invalid_url'
    message = 'Invalid Instagram URL. Please provide a valid Instagram post, reel, or TV URL.'


class ResolutionFailed(DownloadError):
    code = 'resolution_failed'
    status = 404
    message = ('Could not extract media information from Instagram. '
               'The post might be private or unavailable.')


class UnsupportedMediaForAudio(DownloadError):
    code = 'unsupported_media_for_audio'
    message = ('Audio extraction unsupported for images. This post contains only images; '
               'audio is only available for videos.')


class UpstreamError(DownloadError):
    code = 'upstream_error'
    status = 500
    message = 'Failed to process Instagram URL'
