import html
import json
import os
from typing import Any, Dict

# --- Environment Configuration ---
STAGE_NAME = os.environ.get('STAGE_NAME', 'dev')

# Static paths are served by the S3 origin; anything reaching this function is dynamic.
ALLOWED_METHODS = {'GET', 'HEAD', 'OPTIONS', 'POST', 'PUT', 'PATCH', 'DELETE'}
PAGE_METHODS = {'GET', 'HEAD'}

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <link rel="icon" href="/favicon.ico" />
    <script type="module" src="/assets/entry.client.js"></script>
  </head>
  <body data-stage="{stage}" data-path="{path}"></body>
</html>
"""


def _json(status: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body)
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Entry point for the API Gateway HTTP API (payload format 2.0).
    1. /api/health answers with a JSON status (used by monitors).
    2. Other GET/HEAD requests get the HTML shell the client bundle hydrates.
    3. Other methods on non-API paths are rejected with 405.
    """
    http = event.get('requestContext', {}).get('http', {})
    method = http.get('method', 'GET').upper()
    # CloudFront forwards the viewer path; the stage prefix is stripped by API Gateway
    path = event.get('rawPath') or http.get('path') or '/'
    stage_prefix = f"/{STAGE_NAME}"
    if path == stage_prefix or path.startswith(stage_prefix + '/'):
        path = path[len(stage_prefix):] or '/'

    print(f"➡️ {method} {path}")

    if method not in ALLOWED_METHODS:
        return _json(405, {"message": f"Method {method} not allowed"})

    if path == '/api/health':
        return _json(200, {"status": "ok", "stage": STAGE_NAME})

    if path.startswith('/api/'):
        return _json(404, {"message": f"No API route for {path}"})

    if method not in PAGE_METHODS:
        return _json(405, {"message": f"Method {method} not allowed on {path}"})

    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": "text/html; charset=utf-8",
            "Cache-Control": "no-store"
        },
        "body": INDEX_HTML.format(stage=STAGE_NAME, path=html.escape(path))
    }
