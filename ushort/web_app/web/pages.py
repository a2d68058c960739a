"""Jinja2 page rendering for the browser-facing routes."""

import os

from fastapi.templating import Jinja2Templates

# Setup Jinja2 templates
template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)


def render(name: str, **context) -> str:
    return templates.get_template(name).render(**context)


def index_page(error: str = "") -> str:
    return render("index.html", error=error)


def result_page(short_url: str, original_url: str) -> str:
    return render("result.html", short_url=short_url, original_url=original_url)


def error_page(message: str) -> str:
    return render("error.html", message=message)
