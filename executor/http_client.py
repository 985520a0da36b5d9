"""Build and send the outbound request for one action."""

import re
from typing import Dict

import requests
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema

from actions.errors import RequestConstructionError

# RFC 7230 token characters
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _raw(text: str) -> bytes:
    # surrogateescape gives back the original bytes of undecodable argv input
    return (text or "").encode("utf-8", "surrogateescape")


def build_request(method: str, url: str, headers: Dict[str, str], body: str) -> requests.PreparedRequest:
    """
    Prepare the request or raise RequestConstructionError; nothing is sent here.

    URL problems (no scheme, no host, unsupported scheme) are left to surface
    as requests exceptions so the caller reports them as transport failures.
    Header values and the body go out as raw UTF-8 bytes.
    """
    if not _METHOD_TOKEN.match(method or ""):
        raise RequestConstructionError(f"invalid method {method!r}")
    try:
        return requests.Request(
            method=method,
            url=url,
            headers={k: _raw(v) for k, v in (headers or {}).items()},
            data=_raw(body),
        ).prepare()
    except (MissingSchema, InvalidSchema, InvalidURL):
        raise
    except (requests.exceptions.RequestException, ValueError) as e:
        raise RequestConstructionError(str(e)) from e


def send_request(prepared: requests.PreparedRequest, timeout: float) -> requests.Response:
    """
    Send a prepared request and close the response without reading the body.
    Transport errors propagate as requests.exceptions.RequestException.
    """
    with requests.Session() as session:
        # timeout bounds the connect and each socket read, not the call as a whole
        response = session.send(prepared, timeout=timeout, stream=True, allow_redirects=True)
        response.close()
        return response


def status_line(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()
