import html
import json
import logging
import re

import requests

from .errors import InvalidURL
from .models import MediaCandidate
from .resolver import Strategy

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                      '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36')

SHORTCODE_PATTERN = re.compile(
    r'^(?:https?://)?(?:www\.)?instagram\.com/(?:p|reel|tv)/([A-Za-z0-9_-]+)(?=$|[/?#])',
    re.IGNORECASE,
)

GRAPHQL_URL = 'https://www.instagram.com/graphql/query/'
# Instagram rotates this hash from time to time
GRAPHQL_QUERY_HASH = 'b3055c01b4b222b8a47dc12b090e4e64'
EMBED_URL = 'https://www.instagram.com/p/{shortcode}/embed/captioned/'
POST_URL = 'https://www.instagram.com/p/{shortcode}/'

ADDITIONAL_DATA_PATTERN = re.compile(r'window\.__additionalDataLoaded\([^,]+,\s*(\{.+\})\);')
SHARED_DATA_PATTERN = re.compile(r'window\._sharedData\s*=\s*(\{.+?\});')
LD_JSON_PATTERN = re.compile(r'<script type="application/ld\+json"[^>]*>(.*?)</script>', re.DOTALL)
OG_VIDEO_PATTERN = re.compile(r'<meta property="og:video" content="([^"]+)"')
OG_IMAGE_PATTERN = re.compile(r'<meta property="og:image" content="([^"]+)"')


def extract_shortcode(url):
    """Return the post/reel/tv shortcode of an Instagram URL.

    Raises InvalidURL when the URL is not an instagram.com post, reel or tv link.
    """
    match = SHORTCODE_PATTERN.match((url or '').strip())
    if not match:
        raise InvalidURL()
    return match.group(1)


def clean_url(url):
    """Undo the JSON and HTML escaping Instagram applies to media URLs"""
    if not url:
        return None
    url = url.replace('\\/', '/').replace('\\u0026', '&')
    return html.unescape(url)


def first_url(value):
    # ld+json fields can be a string, an object with "url" or a list of either
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get('url') or value.get('contentUrl')
    if isinstance(value, list):
        for item in value:
            url = first_url(item)
            if url:
                return url
    return None


class InstagramScraper:
    """Resolves media URLs from Instagram's public page and API surface.

    Each ``fetch_*`` method is one independent strategy. A strategy returns a
    MediaCandidate, returns None when the response holds no media, and raises
    on network or parse errors.
    """

    def __init__(self, timeout=5, user_agent=DEFAULT_USER_AGENT, session=None):
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.setup_headers()

    def setup_headers(self):
        """Set up realistic browser headers"""
        self.session.headers.update({
            'User-Agent': self.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
            'DNT': '1',
            'Connection': 'keep-alive',
        })

    def strategies(self):
        """Strategies in priority order"""
        return [
            Strategy('graphql', self.fetch_graphql),
            Strategy('embed', self.fetch_embed),
            Strategy('page', self.fetch_page),
        ]

    def get(self, url, **kwargs):
        logger.debug(f"GET {url}")
        response = self.session.get(url, timeout=self.timeout, **kwargs)
        response.raise_for_status()
        return response

    def fetch_graphql(self, shortcode):
        """Query Instagram's GraphQL endpoint for the shortcode"""
        variables = {
            'shortcode': shortcode,
            'child_comment_count': 3,
            'fetch_comment_count': 40,
            'parent_comment_count': 24,
            'has_threaded_comments': True,
        }
        headers = {
            'Accept': '*/*',
            'X-Requested-With': 'XMLHttpRequest',
            'Referer': 'https://www.instagram.com/',
        }
        response = self.get(GRAPHQL_URL, headers=headers, params={
            'query_hash': GRAPHQL_QUERY_HASH,
            'variables': json.dumps(variables),
        })
        data = response.json()
        media = (data.get('data') or {}).get('shortcode_media')
        return self.candidate_from_graphql(media)

    def fetch_embed(self, shortcode):
        """Read the JSON the captioned embed page bootstraps itself with"""
        page = self.get(EMBED_URL.format(shortcode=shortcode)).text

        match = ADDITIONAL_DATA_PATTERN.search(page)
        if match:
            try:
                data = json.loads(match.group(1))
            except ValueError as e:
                logger.debug(f"Unreadable __additionalDataLoaded payload: {e}")
                data = {}
            candidate = self.candidate_from_graphql((data.get('graphql') or {}).get('shortcode_media'))
            if candidate and candidate.usable:
                return candidate

        match = SHARED_DATA_PATTERN.search(page)
        if match:
            data = json.loads(match.group(1))
            post_pages = (data.get('entry_data') or {}).get('PostPage') or [{}]
            return self.candidate_from_graphql((post_pages[0].get('graphql') or {}).get('shortcode_media'))

        return None

    def fetch_page(self, shortcode):
        """Scrape the public post page: JSON-LD first, then Open Graph tags"""
        page = self.get(POST_URL.format(shortcode=shortcode), headers={
            'Referer': 'https://www.google.com/',
        }).text

        for block in LD_JSON_PATTERN.findall(page):
            try:
                data = json.loads(block)
            except ValueError:
                continue
            candidate = self.candidate_from_ld_json(data)
            if candidate and candidate.usable:
                return candidate

        video_match = OG_VIDEO_PATTERN.search(page)
        image_match = OG_IMAGE_PATTERN.search(page)
        if video_match or image_match:
            video_url = clean_url(video_match.group(1)) if video_match else None
            display_url = clean_url(image_match.group(1)) if image_match else video_url
            return MediaCandidate(video_url=video_url, display_url=display_url)

        return None

    def candidate_from_graphql(self, media):
        """Map a GraphQL ``shortcode_media`` node to a candidate"""
        if not isinstance(media, dict):
            return None

        video_url = media.get('video_url')
        display_url = media.get('display_url')

        if not video_url and not display_url and media.get('__typename') == 'GraphSidecar':
            edges = (media.get('edge_sidecar_to_children') or {}).get('edges') or []
            for edge in edges:
                candidate = self.candidate_from_graphql(edge.get('node'))
                if candidate and candidate.usable:
                    return candidate
            return None

        if not video_url and not display_url:
            return None

        return MediaCandidate(
            video_url=clean_url(video_url),
            display_url=clean_url(display_url),
            is_video=bool(media.get('is_video')),
        )

    def candidate_from_ld_json(self, data):
        if isinstance(data, list):
            for item in data:
                candidate = self.candidate_from_ld_json(item)
                if candidate and candidate.usable:
                    return candidate
            return None
        if not isinstance(data, dict):
            return None

        video = data.get('video')
        if isinstance(video, list):
            video = video[0] if video else None
        if isinstance(video, dict) and video.get('contentUrl'):
            return MediaCandidate(
                video_url=clean_url(video['contentUrl']),
                display_url=clean_url(first_url(data.get('image')) or first_url(video.get('thumbnailUrl'))),
                is_video=True,
            )

        image = first_url(data.get('image'))
        if image:
            return MediaCandidate(display_url=clean_url(image))

        return None
