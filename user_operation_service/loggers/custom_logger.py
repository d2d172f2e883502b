import json
import logging
import time
import traceback
from dataclasses import asdict, dataclass

from django.http import HttpRequest


@dataclass()
class HttpRequestLog:
    url: str
    urlReplaced: str
    method: str
    timestamp: int


@dataclass
class HttpResponseLog:
    status: int
    endTime: int
    totalTime: int
    errorMessage: str | None = None


@dataclass
class ErrorInfo:
    function: str
    line: int
    exceptionInfo: str | None = None


@dataclass
class ContextMessageLog:
    httpRequest: HttpRequestLog | None = None
    httpResponse: HttpResponseLog | None = None
    errorInfo: ErrorInfo | None = None
    extraData: dict | None = None


@dataclass
class JsonLog:
    level: str
    timestamp: int
    context: str
    message: str
    lineno: int
    contextMessage: ContextMessageLog | None = None

    def _remove_null_values_from_log(self, json_log: dict):
        """
        Delete keys with the value ``None`` in a dictionary, recursively.
        """
        for key, value in list(json_log.items()):
            if value is None:
                del json_log[key]
            elif isinstance(value, dict):
                self._remove_null_values_from_log(value)
        return json_log

    def to_json(self):
        return json.dumps(self._remove_null_values_from_log(asdict(self)))


def get_milliseconds_now():
    return int(time.time() * 1000)


def http_request_log(request, timestamp: int | None = None) -> HttpRequestLog:
    """
    Generate httpRequestLog from provided request. Request body is never logged,
    it can contain signatures
    """
    route = request.resolver_match.route if request.resolver_match else request.path
    return HttpRequestLog(
        url=str(route),
        urlReplaced=request.path,
        method=request.method,
        timestamp=timestamp or get_milliseconds_now(),
    )


class JsonFormatter(logging.Formatter):
    """
    Json formatter with following schema
    {
        level: str,
        timestamp: Datetime,
        context: str,
        message: str,
        contextMessage: <contextMessage>
    }
    """

    def format(self, record) -> str:
        if record.levelname == "ERROR":
            exception_info: str | None = None
            if record.exc_info:
                exc_type, exc_value, exc_tb = record.exc_info
                exception_info = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

            record.error_detail = ErrorInfo(
                function=record.funcName,
                line=record.lineno,
                exceptionInfo=exception_info,
            )

        context_message = ContextMessageLog(
            httpRequest=getattr(record, "http_request", None),
            httpResponse=getattr(record, "http_response", None),
            errorInfo=getattr(record, "error_detail", None),
            extraData=getattr(record, "extra_data", None),
        )

        json_log = JsonLog(
            level=record.levelname,
            timestamp=get_milliseconds_now(),
            context=f"{record.module}.{record.funcName}",
            message=record.getMessage(),
            contextMessage=context_message,
            lineno=record.lineno,
        )

        return json_log.to_json()


class LoggingMiddleware:
    """
    Http Middleware to generate request and response logs.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger("LoggingMiddleware")

    def __call__(self, request: HttpRequest):
        start_time = get_milliseconds_now()
        response = self.get_response(request)
        if request.resolver_match:
            end_time = get_milliseconds_now()
            delta = end_time - start_time
            http_request = http_request_log(request, start_time)
            content: str | None = None
            if 400 <= response.status_code < 500 and hasattr(response, "data"):
                content = str(response.data)

            http_response = HttpResponseLog(
                response.status_code, end_time, delta, content
            )
            self.logger.info(
                "Http request",
                extra={
                    "http_response": http_response,
                    "http_request": http_request,
                },
            )
        return response
