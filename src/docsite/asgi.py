"""ASGI entry point: ``docsite.asgi:app``.

Builds the site from the environment (and ``.env``) at import time, so
any ASGI server, and pounce's reloader, can import it by name.
"""

from dotenv import find_dotenv, load_dotenv

from docsite.config import SiteConfig
from docsite.site.factory import create_site

load_dotenv(find_dotenv(usecwd=True))

app = create_site(SiteConfig.from_env(), app_path="docsite.asgi:app")
