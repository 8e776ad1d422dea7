import json
import logging
from urllib import error, request
from urllib.parse import quote, urlparse

from stockdash.backend.base import ResourceBackend, check_collection
from stockdash.core.errors import BackendUnavailable, NotFound

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}


def _validate_base_url(base_url):
    parsed = urlparse(base_url or "")
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise RuntimeError("BACKEND_URL must be an absolute HTTP(S) URL")
    return base_url.rstrip("/")


def validate_base_url(base_url):
    return _validate_base_url(base_url)


def _read_error_body(exc):
    try:
        body_bytes = exc.read()
    except (OSError, ValueError):
        return ""
    if not body_bytes:
        return ""
    return body_bytes.decode("utf-8", errors="replace").strip()


class RestBackend(ResourceBackend):
    """Resource API over HTTP (json-server conventions).

    ``GET /{collection}``, ``GET /{collection}/{id}``, ``POST /{collection}``,
    ``PATCH /{collection}/{id}`` and ``DELETE /{collection}/{id}``.
    """

    name = "rest"

    def __init__(self, base_url: str, timeout: int = 15):
        self.base_url = _validate_base_url(base_url)
        self.timeout = timeout

    def _url(self, collection, identifier=None):
        url = "{}/{}".format(self.base_url, check_collection(collection))
        if identifier is not None:
            url = "{}/{}".format(url, quote(str(identifier), safe=""))
        return url

    def _request(self, method, url, payload=None, *, collection=None, identifier=None):
        data = None
        headers = {"Accept": "application/json"}
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = request.Request(url, data=data, method=method, headers=headers)
        try:
            with request.urlopen(req, timeout=self.timeout) as response:  # nosec B310
                status_code = response.getcode()
                body = response.read()
        except error.HTTPError as exc:
            if exc.code == 404 and collection is not None:
                raise NotFound(collection, identifier) from exc
            body_text = _read_error_body(exc)
            logger.warning("Backend %s %s failed: HTTP %s %s", method, url, exc.code, body_text)
            message = "Backend error: HTTP {}".format(exc.code)
            if body_text:
                message = "{} {}".format(message, body_text)
            raise BackendUnavailable(message, status_code=exc.code) from exc
        except error.URLError as exc:
            logger.warning("Backend %s %s unreachable: %s", method, url, exc.reason)
            raise BackendUnavailable("Backend unreachable: {}".format(exc.reason)) from exc
        except TimeoutError as exc:
            logger.warning("Backend %s %s timed out", method, url)
            raise BackendUnavailable("Backend request timed out") from exc

        if status_code < 200 or status_code >= 300:
            raise BackendUnavailable(
                "Backend error: HTTP {}".format(status_code), status_code=status_code
            )
        if not body:
            return None
        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as exc:
            raise BackendUnavailable("Backend returned invalid JSON") from exc

    def list(self, collection):
        result = self._request("GET", self._url(collection))
        if not isinstance(result, list):
            raise BackendUnavailable("Backend returned a non-list for {}".format(collection))
        return result

    def get(self, collection, identifier):
        return self._request(
            "GET",
            self._url(collection, identifier),
            collection=collection,
            identifier=identifier,
        )

    def create(self, collection, payload):
        return self._request("POST", self._url(collection), payload)

    def update(self, collection, identifier, changes):
        return self._request(
            "PATCH",
            self._url(collection, identifier),
            changes,
            collection=collection,
            identifier=identifier,
        )

    def delete(self, collection, identifier):
        self._request(
            "DELETE",
            self._url(collection, identifier),
            collection=collection,
            identifier=identifier,
        )


__all__ = ["RestBackend", "validate_base_url"]
