"""Self-contained diagnostic page for failed renders.

Built with plain f-strings, never with kida: the page has to come out
even when the template layer is the thing that broke.

Sections, top to bottom:
- Exception type, message and cause chain
- kida template location and source, when the failure came from kida
- Traceback with source context, locals, and app frames marked
- Request (method, URL, masked headers) and the render context
- Runtime versions

File locations become editor links when ``DOCSITE_EDITOR`` is set.
"""

import html
import linecache
import os
import sys
import types
from collections.abc import Mapping
from typing import Any

_EDITOR_PRESETS: dict[str, str] = {
    "vscode": "vscode://file/__FILE__:__LINE__",
    "cursor": "cursor://file/__FILE__:__LINE__",
    "sublime": "subl://open?url=file://__FILE__&line=__LINE__",
    "idea": "idea://open?file=__FILE__&line=__LINE__",
}

_MASKED = "********"

_SENSITIVE_HEADERS = frozenset({
    "authorization",
    "cookie",
    "proxy-authorization",
    "set-cookie",
    "x-api-key",
})

_SOURCE_RADIUS = 5
_MAX_REPR = 200


def editor_url(filepath: str, lineno: int) -> str | None:
    """Editor link for *filepath*:*lineno* from ``DOCSITE_EDITOR``.

    Accepts a preset name or a pattern with ``__FILE__``/``__LINE__``.
    """
    pattern = os.environ.get("DOCSITE_EDITOR", "")
    if not pattern:
        return None
    pattern = _EDITOR_PRESETS.get(pattern.lower(), pattern)
    return pattern.replace("__FILE__", filepath).replace("__LINE__", str(lineno))


def is_app_frame(filename: str) -> bool:
    if "site-packages" in filename or filename.startswith("<"):
        return False
    return not filename.startswith(os.path.dirname(os.__file__))


def _short_repr(value: object) -> str:
    try:
        text = repr(value)
    except Exception:
        return "<unrepresentable>"
    if len(text) > _MAX_REPR:
        return text[: _MAX_REPR - 3] + "..."
    return text


def collect_frames(tb: types.TracebackType | None) -> list[dict[str, Any]]:
    """Source window and locals for every frame of *tb*, outermost first."""
    frames: list[dict[str, Any]] = []
    while tb is not None:
        frame = tb.tb_frame
        lineno = tb.tb_lineno
        filename = frame.f_code.co_filename
        window = []
        for n in range(max(1, lineno - _SOURCE_RADIUS), lineno + _SOURCE_RADIUS + 1):
            line = linecache.getline(filename, n, frame.f_globals)
            if line:
                window.append((n, line.rstrip()))
        frames.append({
            "filename": filename,
            "lineno": lineno,
            "function": frame.f_code.co_name,
            "source": window,
            "locals": {
                name: _short_repr(value)
                for name, value in frame.f_locals.items()
                if not (name.startswith("__") and name.endswith("__"))
            },
            "is_app": is_app_frame(filename),
        })
        tb = tb.tb_next
    return frames


def template_details(exc: BaseException | None) -> dict[str, Any] | None:
    """Location details carried by kida exceptions, or ``None``."""
    if exc is None or "kida" not in (type(exc).__module__ or ""):
        return None

    details: dict[str, Any] = {
        "type": type(exc).__name__,
        "message": getattr(exc, "message", None) or str(exc),
        "template": (
            getattr(exc, "template_name", None)
            or getattr(exc, "filename", None)
            or getattr(exc, "template", None)
        ),
        "lineno": getattr(exc, "lineno", None),
        "suggestion": getattr(exc, "suggestion", None),
    }

    source = getattr(exc, "source", None)
    snippet = getattr(exc, "source_snippet", None)
    if snippet is not None:
        details["source"] = list(getattr(snippet, "lines", ()))
        details["highlight"] = getattr(snippet, "error_line", None) or details["lineno"]
    elif source and details["lineno"]:
        lines = source.splitlines()
        lineno = details["lineno"]
        start = max(0, lineno - 3)
        details["source"] = [(i + 1, lines[i]) for i in range(start, min(len(lines), lineno + 2))]
        details["highlight"] = lineno
    return details


def masked_headers(headers: Mapping[str, str] | None) -> list[tuple[str, str]]:
    if not headers:
        return []
    return [
        (name, _MASKED if name.lower() in _SENSITIVE_HEADERS else value)
        for name, value in headers.items()
    ]


_CSS = """\
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font: 14px/1.55 ui-monospace, Menlo, Consolas, monospace; background: #fff8f0; color: #3b2f2a; padding: 2rem; }
main { max-width: 980px; margin: 0 auto; }
h1 { color: #c2410c; font-size: 1.35rem; }
h2 { color: #9a3412; font-size: 1rem; margin: 1.6rem 0 0.5rem; border-bottom: 2px solid #fed7aa; }
.message { color: #7c2d12; font-size: 1rem; margin: 0.4rem 0 0.8rem; white-space: pre-wrap; word-break: break-word; }
.chain { color: #a8a29e; font-style: italic; }
.panel { background: #ffedd5; border-radius: 6px; padding: 0.7rem 0.9rem; margin: 0.4rem 0; }
.row { display: flex; gap: 0.6rem; }
.row .k { color: #9a3412; min-width: 130px; flex-shrink: 0; }
.row .v { word-break: break-all; }
.frame { border: 1px solid #fed7aa; border-radius: 6px; margin: 0.45rem 0; overflow: hidden; }
.frame.app { border-color: #fb923c; }
.frame header { background: #ffedd5; padding: 0.3rem 0.8rem; display: flex; justify-content: space-between; }
.frame header a { color: #c2410c; }
.fn { color: #7c3aed; }
.tag { color: #15803d; font-size: 0.75rem; margin-left: 0.4rem; }
.line { display: flex; padding: 0 0.8rem; font-size: 0.82rem; }
.line .n { color: #a8a29e; min-width: 3.5rem; padding-right: 1rem; text-align: right; user-select: none; }
.line .c { white-space: pre; }
.line.hit { background: #fecaca; }
details { padding: 0.2rem 0.8rem; font-size: 0.8rem; }
summary { cursor: pointer; color: #a8a29e; }
.tpl { border: 1px solid #f97316; }
.hint { color: #15803d; font-style: italic; margin-top: 0.3rem; }
"""


def _esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def _row(label: str, value: object) -> str:
    return f'<div class="row"><span class="k">{_esc(label)}</span><span class="v">{_esc(value)}</span></div>'


def _source(lines: list[tuple[int, str]], highlight: int | None) -> str:
    return "".join(
        f'<div class="line{" hit" if n == highlight else ""}">'
        f'<span class="n">{n}</span><span class="c">{_esc(code)}</span></div>'
        for n, code in lines
    )


def _frame(frame: dict[str, Any]) -> str:
    location = f"{_esc(frame['filename'])}:{frame['lineno']}"
    link = editor_url(frame["filename"], frame["lineno"])
    if link:
        location = f'<a href="{_esc(link)}">{location}</a>'
    tag = '<span class="tag">app</span>' if frame["is_app"] else ""
    local_vars = ""
    if frame["locals"]:
        rows = "".join(_row(name, value) for name, value in frame["locals"].items())
        local_vars = f"<details><summary>locals</summary>{rows}</details>"
    return (
        f'<section class="frame{" app" if frame["is_app"] else ""}">'
        f'<header><span>{location}</span><span><span class="fn">{_esc(frame["function"])}</span>{tag}</span></header>'
        f"{_source(frame['source'], frame['lineno'])}"
        f"{local_vars}"
        f"</section>"
    )


def _template_panel(details: dict[str, Any]) -> str:
    parts = [f'<div class="panel tpl"><strong>{_esc(details["type"])}</strong>']
    parts.append(f'<div class="message">{_esc(details["message"])}</div>')
    if details.get("template") or details.get("lineno"):
        where = str(details.get("template") or "<template>")
        if details.get("lineno"):
            where += f":{details['lineno']}"
        parts.append(_row("Template", where))
    if details.get("source"):
        parts.append(_source(details["source"], details.get("highlight")))
    if details.get("suggestion"):
        parts.append(f'<div class="hint">{_esc(details["suggestion"])}</div>')
    parts.append("</div>")
    return "".join(parts)


def _request_panel(request: Any, context: Mapping[str, Any] | None) -> str:
    parts = ['<div class="panel">']
    method = getattr(request, "method", "?")
    url = getattr(request, "url", getattr(request, "path", "?"))
    parts.append(_row("Request", f"{method} {url} HTTP/{getattr(request, 'http_version', '?')}"))
    client = getattr(request, "client", None)
    if client:
        parts.append(_row("Client", f"{client[0]}:{client[1]}"))
    path_params = getattr(request, "path_params", None)
    if path_params:
        parts.append(_row("Path params", ", ".join(f"{k}={v!r}" for k, v in path_params.items())))
    for name, value in masked_headers(getattr(request, "headers", None)):
        parts.append(_row(name, value))
    parts.append("</div>")

    if context:
        parts.append("<h2>Render context</h2>")
        parts.append('<div class="panel">')
        parts.extend(_row(key, value) for key, value in context.items() if key != "hreflangs")
        parts.append("</div>")
    return "".join(parts)


def _versions() -> str:
    from importlib.metadata import PackageNotFoundError, version

    import docsite

    rows = [_row("Python", sys.version), _row("docsite", docsite.__version__)]
    try:
        rows.append(_row("kida", version("kida-templates")))
    except PackageNotFoundError:
        pass
    return f'<div class="panel">{"".join(rows)}</div>'


def render_debug_page(
    exc: BaseException,
    request: Any,
    *,
    context: Mapping[str, Any] | None = None,
) -> str:
    """Render the diagnostic page for *exc* raised while serving *request*.

    *context* is the render context the page was being rendered with,
    shown below the request when given.
    """
    exc_type = type(exc)
    module = exc_type.__module__ or ""
    name = exc_type.__name__ if module in ("", "builtins") else f"{module}.{exc_type.__name__}"
    message = str(exc)

    cause = exc.__cause__
    implicit = None if exc.__suppress_context__ else exc.__context__

    sections = [f"<h1>{_esc(name)}</h1>", f'<div class="message">{_esc(message)}</div>']
    if cause is not None:
        sections.append(f'<div class="chain">raised from {_esc(type(cause).__name__)}: {_esc(cause)}</div>')
    elif implicit is not None:
        sections.append(
            f'<div class="chain">while handling {_esc(type(implicit).__name__)}: {_esc(implicit)}</div>'
        )

    details = template_details(exc) or template_details(cause) or template_details(implicit)
    if details:
        sections.append(_template_panel(details))

    frames = collect_frames(exc.__traceback__)
    if frames:
        sections.append("<h2>Traceback</h2>")
        sections.extend(_frame(frame) for frame in frames)

    sections.append("<h2>Request</h2>")
    sections.append(_request_panel(request, context))
    sections.append("<h2>Environment</h2>")
    sections.append(_versions())

    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{_esc(name)}: {_esc(message[:80])}</title>"
        f"<style>{_CSS}</style>"
        "</head><body>"
        f"<main>{''.join(sections)}</main>"
        "</body></html>"
    )
