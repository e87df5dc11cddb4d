import logging

from flask import Flask, request, jsonify, render_template_string
from flask_cors import CORS

from reelysave import __version__
from reelysave.config import Config
from reelysave.errors import DownloadError, UpstreamError
from reelysave.instagram import InstagramScraper
from reelysave.models import DownloadRequest
from reelysave.resolver import MediaResolver
from reelysave.service import DownloadService

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

HTML_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Reely Save It - Instagram Reel & Audio Saver</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, sans-serif;
        }

        body {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            padding: 20px;
        }

        .container {
            max-width: 720px;
            margin: 0 auto;
            background: white;
            border-radius: 20px;
            box-shadow: 0 20px 60px rgba(0,0,0,0.3);
            overflow: hidden;
        }

        .header {
            background: linear-gradient(45deg, #405DE6, #833AB4, #C13584, #E1306C, #FD1D1D);
            color: white;
            padding: 40px 30px;
            text-align: center;
        }

        .header h1 {
            font-size: 2.5rem;
            margin-bottom: 10px;
            font-weight: 800;
        }

        .content {
            padding: 30px;
        }

        input[type="text"] {
            width: 100%;
            padding: 18px 25px;
            border: 3px solid #e0e0e0;
            border-radius: 12px;
            font-size: 16px;
            margin-bottom: 15px;
        }

        input[type="text"]:focus {
            outline: none;
            border-color: #405DE6;
        }

        .save-types {
            display: flex;
            gap: 20px;
            margin-bottom: 20px;
            color: #333;
        }

        button {
            background: linear-gradient(45deg, #405DE6, #833AB4);
            color: white;
            border: none;
            padding: 18px 40px;
            border-radius: 12px;
            font-size: 16px;
            font-weight: 700;
            cursor: pointer;
            width: 100%;
        }

        button.secondary {
            background: #6c757d;
        }

        button:disabled {
            opacity: 0.6;
            cursor: wait;
        }

        dialog {
            border: none;
            border-radius: 15px;
            padding: 30px;
            width: min(90vw, 480px);
            box-shadow: 0 20px 60px rgba(0,0,0,0.3);
        }

        dialog h3 {
            margin-bottom: 15px;
            color: #333;
        }

        .dialog-actions {
            display: flex;
            gap: 15px;
        }

        .notice {
            display: none;
            padding: 20px;
            border-radius: 12px;
            margin-top: 20px;
            font-weight: 600;
        }

        .notice.error {
            display: block;
            background: #fee;
            color: #d33;
            border-left: 5px solid #d33;
        }

        .notice.success {
            display: block;
            background: #e7f4e4;
            color: #28a745;
            border-left: 5px solid #28a745;
        }

        .notice a {
            color: inherit;
        }
    </style>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.0.0/css/all.min.css">
</head>
<body>
    <div class="container">
        <div class="header">
            <h1><i class="fab fa-instagram"></i> Reely Save It</h1>
            <p>Download Instagram reels and save their audio with just a few clicks.</p>
        </div>
        <div class="content">
            <input type="text" id="urlInput" placeholder="https://www.instagram.com/reel/...">
            <div class="save-types">
                <label><input type="radio" name="saveType" value="reel" checked> <i class="fas fa-video"></i> Reel (video)</label>
                <label><input type="radio" name="saveType" value="audio"> <i class="fas fa-music"></i> Audio</label>
            </div>
            <button onclick="openOptions()"><i class="fas fa-download"></i> Download</button>
            <div class="notice" id="notice"></div>
        </div>
    </div>

    <dialog id="optionsDialog">
        <h3><i class="fas fa-save"></i> Save options</h3>
        <p id="saveTypeLabel" style="margin-bottom: 10px; color: #555;"></p>
        <input type="text" id="fileNameInput" placeholder="File name">
        <div class="dialog-actions">
            <button class="secondary" onclick="closeOptions()">Cancel</button>
            <button id="confirmButton" onclick="confirmDownload()">Save</button>
        </div>
    </dialog>

    <script>
        const POST_PATTERN = /^(https?:\\/\\/)?(www\\.)?instagram\\.com\\/(p|reel|tv)\\/[A-Za-z0-9_-]+/i;

        function selectedSaveType() {
            return document.querySelector('input[name="saveType"]:checked').value;
        }

        function openOptions() {
            const url = document.getElementById('urlInput').value.trim();
            if (!url) {
                showNotice('error', 'Please enter an Instagram reel URL');
                return;
            }
            if (!POST_PATTERN.test(url)) {
                showNotice('error', 'Please enter a valid Instagram reel or post URL');
                return;
            }
            const saveType = selectedSaveType();
            document.getElementById('saveTypeLabel').textContent =
                saveType === 'audio' ? 'Saving audio (delivered as the original video file)' : 'Saving reel video';
            document.getElementById('fileNameInput').value = `instagram_${saveType}_${Date.now()}`;
            document.getElementById('optionsDialog').showModal();
        }

        function closeOptions() {
            document.getElementById('optionsDialog').close();
        }

        async function confirmDownload() {
            const confirmButton = document.getElementById('confirmButton');
            confirmButton.disabled = true;
            try {
                const response = await fetch('/api/download', {
                    method: 'POST',
                    headers: {
                        'Content-Type': 'application/json',
                    },
                    body: JSON.stringify({
                        url: document.getElementById('urlInput').value.trim(),
                        saveType: selectedSaveType(),
                        fileName: document.getElementById('fileNameInput').value.trim()
                    })
                });
                const data = await response.json();
                if (!data.success) {
                    throw new Error(data.error || 'Download failed');
                }

                const link = document.createElement('a');
                link.href = data.downloadUrl;
                link.download = data.fileName;
                link.target = '_blank';
                link.click();

                const savedLink = document.createElement('a');
                savedLink.href = data.downloadUrl;
                savedLink.target = '_blank';
                savedLink.download = data.fileName;
                savedLink.textContent = data.fileName;
                showNotice('success', `${data.message} `, savedLink);
                document.getElementById('urlInput').value = '';
            } catch (err) {
                showNotice('error', err.message || 'Failed to download Instagram content. Please try again.');
            } finally {
                confirmButton.disabled = false;
                closeOptions();
            }
        }

        function showNotice(kind, message, link) {
            const notice = document.getElementById('notice');
            notice.className = `notice ${kind}`;
            notice.textContent = message;
            if (link) {
                notice.appendChild(link);
            }
        }

        document.getElementById('urlInput').addEventListener('keypress', function(e) {
            if (e.key === 'Enter') {
                openOptions();
            }
        });

        document.getElementById('urlInput').focus();
    </script>
</body>
</html>
'''


def create_app(config=None, resolver=None):
    """Build the Flask app; tests pass their own config and resolver"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    CORS(app, origins='*', send_wildcard=True, allow_headers=app.config['CORS_ALLOW_HEADERS'])

    if resolver is None:
        scraper = InstagramScraper(
            timeout=app.config['STRATEGY_TIMEOUT'],
            user_agent=app.config['USER_AGENT'],
        )
        resolver = MediaResolver(scraper.strategies())
    service = DownloadService(resolver)

    @app.route('/')
    def home():
        return render_template_string(HTML_TEMPLATE)

    @app.route('/api/download', methods=['GET', 'POST'])
    def api_download():
        """API endpoint for resolving Instagram media"""
        try:
            if request.method == 'GET':
                payload = request.args
            else:
                payload = request.get_json(silent=True)

            download_request = DownloadRequest.from_payload(payload)
            result = service.handle(download_request)

            logger.info(f"Successfully extracted media: {result.download_url}")
            return jsonify(result.to_dict())

        except DownloadError as e:
            logger.warning(f"Request rejected ({e.code}): {e}")
            return jsonify(e.to_dict()), e.status

        except Exception as e:
            logger.exception("Instagram download error")
            error = UpstreamError(details=str(e))
            return jsonify(error.to_dict()), error.status

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'service': 'Reely Save It',
            'version': __version__,
            'strategies': resolver.names,
        })

    return app


app = create_app()

if __name__ == '__main__':
    app.run(host=app.config['HOST'], port=app.config['PORT'], debug=app.config['DEBUG'])
