import abc
import logging
from typing import Optional, Tuple

import requests
from werkzeug import Request
from werkzeug.datastructures import Headers

from cos_sdk import config
from cos_sdk.aws.api import SdkClientException
from cos_sdk.constants import USER_AGENT

from .request import get_raw_base_url
from .response import Response

LOG = logging.getLogger(__name__)

# separate logger for the wire trace, it is only enabled with SDK_LOG=trace
WIRE_LOG = logging.getLogger("cos_sdk.wire")


class HttpClient(abc.ABC):
    """
    An HTTP client that can make http requests using werkzeug's request object.
    """

    def request(self, request: Request) -> Response:
        """
        Make the given HTTP request as a client. The request is sent exactly once.

        :param request: the request to make
        :return: the response.
        """
        raise NotImplementedError

    def close(self):
        """
        Close any underlying resources the client may need.
        """
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class SimpleRequestsClient(HttpClient):
    """
    ``HttpClient`` using a ``requests.Session``. Connection errors and timeouts are raised as
    ``SdkClientException``, HTTP error status codes are returned as regular responses.
    """

    session: requests.Session
    timeout: Tuple[float, float]

    def __init__(
        self,
        session: requests.Session = None,
        connection_timeout: Optional[float] = None,
        socket_timeout: Optional[float] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = (
            connection_timeout if connection_timeout is not None else config.CONNECTION_TIMEOUT,
            socket_timeout if socket_timeout is not None else config.SOCKET_TIMEOUT,
        )

    def request(self, request: Request) -> Response:
        url = get_raw_base_url(request)

        headers = dict(request.headers.items())
        headers.setdefault("User-Agent", USER_AGENT)
        # avoid any transparent manipulation of the response body by the underlying libraries
        if not request.headers.get("accept-encoding"):
            headers["accept-encoding"] = "identity"

        body = request.get_data()
        WIRE_LOG.debug(
            "%s %s", request.method, url, extra={"direction": "request", "status": None, "body": body}
        )

        try:
            response = self.session.request(
                method=request.method,
                url=url,
                # request.args are only the url parameters
                params=[(k, v) for k, v in request.args.items(multi=True)],
                headers=headers,
                data=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SdkClientException(f"Unable to execute HTTP request: {e}") from e

        final_response = Response(
            response=response.content,
            status=response.status_code,
            headers=Headers(dict(response.headers)),
        )
        WIRE_LOG.debug(
            "%s %s",
            request.method,
            url,
            extra={"direction": "response", "status": response.status_code, "body": response.content},
        )
        return final_response

    def close(self):
        self.session.close()
