from typing import Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from werkzeug.datastructures import Headers
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers.request import Request as WerkzeugRequest

from cos_sdk.utils import strings


class Request(WerkzeugRequest):
    """
    An outgoing HTTP request. This is a werkzeug request object that is built without a web server environment
    (sans-IO), so it can be assembled by the marshallers and sent by any ``HttpClient``.

    DO NOT add methods that are not also part of werkzeug.wrappers.request.Request object.
    """

    def __init__(
        self,
        method: str = "GET",
        path: str = "/",
        headers: Union[Mapping, Headers] = None,
        body: Union[bytes, str] = None,
        scheme: str = "https",
        query_string: Union[bytes, str] = b"",
        server: Optional[Tuple[str, Optional[int]]] = None,
        raw_path: str = None,
    ):
        # decode query string if necessary (latin-1 is what werkzeug would expect)
        query_string = strings.to_str(query_string, "latin-1")

        host, port = server or ("localhost", None)
        base_url = f"{scheme}://{host}:{port}" if port else f"{scheme}://{host}"

        builder = EnvironBuilder(
            path=path,
            base_url=base_url,
            method=method,
            headers=Headers(headers) if headers else None,
            data=strings.to_bytes(body) if body else b"",
            query_string=query_string,
        )
        try:
            environ = builder.get_environ()
        finally:
            builder.close()

        # keep the path as the marshaller encoded it, werkzeug would decode it
        environ["RAW_URI"] = raw_path or path
        if query_string:
            environ["RAW_URI"] += "?" + query_string
        environ["REQUEST_URI"] = environ["RAW_URI"]

        super(Request, self).__init__(environ)

        # werkzeug only provides read-only access to headers set in the WSGI environment, make them mutable again
        headers = Headers(headers)
        # these two headers are treated separately in the WSGI environment, so we extract them if necessary
        for h in ["content-length", "content-type"]:
            if h not in headers and h in self.headers:
                headers[h] = self.headers[h]
        self.headers = headers


def get_raw_path(request: WerkzeugRequest) -> str:
    """
    Returns the raw path of the request (with its original URL encoding), without the query string.

    :param request: the request object
    :return: the raw path
    """
    return urlparse(request.environ.get("RAW_URI", request.path)).path


def get_raw_base_url(request: WerkzeugRequest) -> str:
    """
    Returns the base URL (with original URL encoding). This does not include the query string.
    This is the encoding-preserving equivalent to `request.base_url`.
    """
    return f"{request.scheme}://{request.host}{get_raw_path(request)}"
